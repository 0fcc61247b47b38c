"""Prompt templates for extraction, quick updates, conflict notes, summaries and questions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ConflictType, HistoryEntry, ProjectCandidate, ProjectRecord

EXTRACTION_SYSTEM_PROMPT: Final[str] = """\
You are a strategic analyst extracting project information for a CEO dashboard.

Extract ALL projects mentioned in the document and return ONLY valid JSON (no markdown):

{
  "projects": [
    {
      "name": "Project name",
      "description": "1-2 sentence summary",
      "ceoPriority": 0-10,
      "stakeholderUrgency": 0-10,
      "stakeholderSentiment": "calm"|"concerned"|"frustrated"|"furious",
      "status": "active"|"blocked"|"completed"|"archived",
      "deadline": "ISO-8601 date or null",
      "notes": "Detailed context",
      "keyRisks": ["risk1"],
      "dependencies": []
    }
  ]
}

Rules:
1. If the stakeholder is "furious", urgency MUST be >= 8
2. Prioritize based on CEO strategic goals (growth, risk mitigation, innovation)
3. Quote risks exactly as stated in the document
4. Use null for any field the document does not mention
5. Return ONLY the JSON object, no other text or markdown"""

QUICK_UPDATE_SYSTEM_PROMPT: Final[str] = """\
You are parsing a CEO's quick note to extract a project update.

Input: a single sentence like "Project X is now top priority because the board is asking questions"

Output JSON:
{
  "projectName": "Project X",
  "ceoPriority": 9,
  "stakeholderUrgency": null,
  "stakeholderSentiment": null,
  "status": null,
  "description": "Brief summary",
  "changeSummary": "CEO elevated priority due to board interest"
}

Rules:
- Prefer an existing project name when the note refers to one
  ("Phoenix" means "Project Phoenix")
- Infer priority and urgency from keywords ("top priority" = 9+, "urgent" = 8+)
- Write a one-sentence strategic change summary
- Return null for fields the note does not mention
- Return ONLY the JSON object"""


def build_extraction_prompt(content: str, label: str) -> str:
    return (
        "Extract all project information from this document.\n\n"
        f"File: {label}\n\n"
        f"Content:\n{content}\n\n"
        "Return JSON following the schema exactly."
    )


def build_quick_update_prompt(text: str, existing_names: Sequence[str]) -> str:
    names = ", ".join(existing_names) or "None"
    return (
        "Parse this quick capture note.\n\n"
        f"Existing projects: {names}\n\n"
        f"Note: {text}\n\n"
        "Return JSON with projectName and any updated fields."
    )


def build_explanation_prompt(
    *,
    existing: ProjectRecord,
    candidate: ProjectCandidate,
    conflict_type: ConflictType,
    recent_history: Sequence[HistoryEntry],
) -> str:
    history = "\n".join(
        f"- {entry.timestamp.isoformat()}: {entry.change}" for entry in recent_history
    )
    current = {
        "priority": existing.priority,
        "urgency": existing.urgency,
        "sentiment": str(existing.sentiment),
        "status": str(existing.status),
    }
    return (
        "Analyze this potential conflict in project data:\n\n"
        f"Project: {existing.name}\n"
        f"Conflict Type: {conflict_type}\n"
        f"Recent History:\n{history}\n\n"
        f"Current State: {json.dumps(current)}\n\n"
        f"Incoming Update: {_render_candidate(candidate)}\n\n"
        "Question: Does this update contradict recent changes? "
        "If yes, explain the strategic implication in 1 sentence.\n"
        'If no conflict, return "No conflict detected."'
    )


def build_summary_prompt(
    *,
    existing: ProjectRecord,
    candidate: ProjectCandidate,
    changes: Sequence[str],
) -> str:
    return (
        "Summarize why these project metrics changed in 1 concise sentence:\n\n"
        f"Project: {existing.name}\n"
        f"Changes: {', '.join(changes)}\n"
        f"New context: {candidate.notes or 'No new context'}\n\n"
        'Focus on the strategic reason (e.g., "Stakeholder escalated urgency due to '
        'missed deadline").'
    )


ADVICE_RECENT_HISTORY: Final[int] = 3
ADVICE_NOTES_LIMIT: Final[int] = 300

ADVICE_SYSTEM_PROMPT: Final[str] = """\
You are a strategic advisor to a CEO reviewing their project portfolio.

You see every project with its priority and urgency scores, status, sentiment,
risks, recent change history and source file.

Answer in INVERTED PYRAMID style:
1. Lead sentence: answer the question directly with the most important insight
2. Three bullet points: key supporting details or recommendations
3. Source: the project names and source files the answer relies on

Example:
"Project Phoenix is your highest risk initiative due to furious stakeholder sentiment.

- Current position: Priority 9/10, Urgency 10/10
- Key risk: Client threatening cancellation over a 3-week delay
- Recommended action: Escalate for immediate resource allocation

Source: Project Phoenix (weekly-update.md)"

When answering:
- Lead with what the CEO needs to know now
- Point out patterns across projects when relevant
- Keep the language concise and decisive"""


def build_advice_prompt(question: str, projects: Sequence[ProjectRecord]) -> str:
    snapshot = [_advice_snapshot(project) for project in projects]
    return (
        f"Current portfolio ({len(projects)} projects):\n"
        f"{json.dumps(snapshot, indent=2, default=str)}\n\n"
        f"Question: {question}\n\n"
        "Answer in inverted pyramid format (lead sentence, 3 bullets, source citation)."
    )


def _advice_snapshot(project: ProjectRecord) -> dict[str, object]:
    return {
        "name": project.name,
        "ceoPriority": project.priority,
        "stakeholderUrgency": project.urgency,
        "status": str(project.status),
        "stakeholderSentiment": str(project.sentiment),
        "keyRisks": list(project.risks),
        "recentHistory": [
            {
                "timestamp": entry.timestamp.isoformat(),
                "change": entry.change,
                "captureMethod": str(entry.capture_method),
            }
            for entry in project.history[-ADVICE_RECENT_HISTORY:]
        ],
        "notes": project.notes[:ADVICE_NOTES_LIMIT],
        "sourceFile": project.source_file,
    }


def _render_candidate(candidate: ProjectCandidate) -> str:
    fields = {"name": candidate.name, **candidate.present_fields()}
    return json.dumps(fields, default=str)
