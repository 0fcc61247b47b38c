"""Language-model backed implementations of the extraction ports."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from nexus.config.llm import EXTRACTION_MAX_TOKENS, QUICK_UPDATE_MAX_TOKENS
from nexus.domain.errors import ExtractionError

from .client import AnthropicAPIError
from .prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    QUICK_UPDATE_SYSTEM_PROMPT,
    build_extraction_prompt,
    build_quick_update_prompt,
)
from .translator import parse_extraction, parse_quick_update

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ProjectCandidate, QuickUpdateCandidate

    from .client import AnthropicMessagesClient

log = getLogger(__name__)


@dataclass(slots=True)
class LlmProjectExtractor:
    client: AnthropicMessagesClient

    async def extract(self, text: str, *, label: str) -> list[ProjectCandidate]:
        try:
            raw = await self.client.complete(
                build_extraction_prompt(text, label),
                system=EXTRACTION_SYSTEM_PROMPT,
                max_tokens=EXTRACTION_MAX_TOKENS,
            )
        except AnthropicAPIError as exc:
            raise ExtractionError(str(exc), label=label) from exc
        candidates = parse_extraction(raw, label=label)
        log.debug("Model returned %d project(s) for %s", len(candidates), label)
        return candidates

    async def extract_quick_update(
        self,
        text: str,
        *,
        existing_names: Sequence[str],
    ) -> QuickUpdateCandidate:
        try:
            raw = await self.client.complete(
                build_quick_update_prompt(text, existing_names),
                system=QUICK_UPDATE_SYSTEM_PROMPT,
                max_tokens=QUICK_UPDATE_MAX_TOKENS,
            )
        except AnthropicAPIError as exc:
            raise ExtractionError(str(exc), label="quick update") from exc
        return parse_quick_update(raw)


if TYPE_CHECKING:
    from nexus.domain.ports.extraction import ProjectExtractor, QuickUpdateExtractor

    def _extractor_check(client: AnthropicMessagesClient) -> ProjectExtractor:
        return LlmProjectExtractor(client)

    def _quick_update_check(client: AnthropicMessagesClient) -> QuickUpdateExtractor:
        return LlmProjectExtractor(client)
