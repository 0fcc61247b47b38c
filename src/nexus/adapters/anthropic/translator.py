"""Translate raw model output into domain candidates."""

from __future__ import annotations

import re
from logging import getLogger

from pydantic import ValidationError

from nexus.domain.errors import ExtractionError
from nexus.domain.model import ProjectCandidate, QuickUpdateCandidate
from nexus.domain.normalization import normalize_deadline

from .schema import ExtractedProjectPayload, ExtractionPayload, QuickUpdatePayload

log = getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_text(text: str) -> str:
    """Strip markdown fences and any prose around the outermost JSON object."""

    stripped = _FENCE.sub("", text).strip()
    match = _JSON_OBJECT.search(stripped)
    return match.group(0) if match else stripped


def parse_extraction(text: str, *, label: str) -> list[ProjectCandidate]:
    try:
        payload = ExtractionPayload.model_validate_json(extract_json_text(text))
    except ValidationError as exc:
        raise ExtractionError(f"Malformed extraction output: {exc}", label=label) from exc
    return [_candidate_from_payload(project) for project in payload.projects]


def parse_quick_update(text: str) -> QuickUpdateCandidate:
    try:
        payload = QuickUpdatePayload.model_validate_json(extract_json_text(text))
    except ValidationError as exc:
        raise ExtractionError(f"Malformed quick update output: {exc}") from exc
    return QuickUpdateCandidate(
        project_name=payload.project_name,
        priority=payload.priority,
        urgency=payload.urgency,
        sentiment=payload.sentiment,
        status=payload.status,
        description=payload.description,
        change_summary=payload.change_summary,
    )


def _candidate_from_payload(payload: ExtractedProjectPayload) -> ProjectCandidate:
    return ProjectCandidate(
        name=payload.name,
        description=payload.description,
        priority=payload.priority,
        urgency=payload.urgency,
        sentiment=payload.sentiment,
        status=payload.status,
        deadline=normalize_deadline(payload.deadline),
        notes=payload.notes,
        risks=payload.risks,
        dependencies=payload.dependencies,
    )


__all__ = ["extract_json_text", "parse_extraction", "parse_quick_update"]
