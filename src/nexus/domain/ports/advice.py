"""Port for answering free-form questions about the portfolio."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ProjectRecord


@runtime_checkable
class PortfolioAdvisor(Protocol):
    """Answer one question from a snapshot of the stored projects."""

    async def answer(self, question: str, *, projects: Sequence[ProjectRecord]) -> str: ...


__all__ = ["PortfolioAdvisor"]
