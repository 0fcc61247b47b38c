"""Language-model backed conflict explanations and change summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from nexus.config.llm import EXPLANATION_MAX_TOKENS, SUMMARY_MAX_TOKENS
from nexus.domain.errors import ExplanationError, SummaryError
from nexus.domain.ports.explanation import NO_CONFLICT_RATIONALE

from .client import AnthropicAPIError
from .prompts import build_explanation_prompt, build_summary_prompt

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ConflictType, HistoryEntry, ProjectCandidate, ProjectRecord

    from .client import AnthropicMessagesClient


@dataclass(slots=True)
class LlmConflictExplainer:
    client: AnthropicMessagesClient

    async def explain(
        self,
        *,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
        conflict_type: ConflictType,
        recent_history: Sequence[HistoryEntry],
    ) -> str:
        prompt = build_explanation_prompt(
            existing=existing,
            candidate=candidate,
            conflict_type=conflict_type,
            recent_history=recent_history,
        )
        try:
            text = await self.client.complete(prompt, max_tokens=EXPLANATION_MAX_TOKENS)
        except AnthropicAPIError as exc:
            raise ExplanationError(str(exc)) from exc
        return text.strip() or NO_CONFLICT_RATIONALE


@dataclass(slots=True)
class LlmChangeSummarizer:
    client: AnthropicMessagesClient

    async def summarize(
        self,
        *,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
        changes: Sequence[str],
    ) -> str:
        prompt = build_summary_prompt(existing=existing, candidate=candidate, changes=changes)
        try:
            text = await self.client.complete(prompt, max_tokens=SUMMARY_MAX_TOKENS)
        except AnthropicAPIError as exc:
            raise SummaryError(str(exc)) from exc
        return text.strip()


if TYPE_CHECKING:
    from nexus.domain.ports.explanation import ChangeSummarizer, ConflictExplainer

    def _explainer_check(client: AnthropicMessagesClient) -> ConflictExplainer:
        return LlmConflictExplainer(client)

    def _summarizer_check(client: AnthropicMessagesClient) -> ChangeSummarizer:
        return LlmChangeSummarizer(client)
