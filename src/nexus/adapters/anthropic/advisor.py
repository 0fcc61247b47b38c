"""Language-model backed answers to portfolio questions."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from nexus.config.llm import ADVICE_MAX_TOKENS
from nexus.domain.errors import AdviceError

from .client import AnthropicAPIError
from .prompts import ADVICE_SYSTEM_PROMPT, build_advice_prompt

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ProjectRecord

    from .client import AnthropicMessagesClient

log = getLogger(__name__)


@dataclass(slots=True)
class LlmPortfolioAdvisor:
    client: AnthropicMessagesClient

    async def answer(self, question: str, *, projects: Sequence[ProjectRecord]) -> str:
        try:
            text = await self.client.complete(
                build_advice_prompt(question, projects),
                system=ADVICE_SYSTEM_PROMPT,
                max_tokens=ADVICE_MAX_TOKENS,
            )
        except AnthropicAPIError as exc:
            raise AdviceError(str(exc)) from exc
        answer = text.strip()
        if not answer:
            raise AdviceError("Model returned an empty answer")
        log.debug("Answered portfolio question over %d project(s)", len(projects))
        return answer


if TYPE_CHECKING:
    from nexus.domain.ports.advice import PortfolioAdvisor

    def _advisor_check(client: AnthropicMessagesClient) -> PortfolioAdvisor:
        return LlmPortfolioAdvisor(client)
