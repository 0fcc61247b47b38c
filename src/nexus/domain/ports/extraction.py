"""Ports for the language-model-backed extraction capability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ProjectCandidate, QuickUpdateCandidate


@runtime_checkable
class ProjectExtractor(Protocol):
    """Turn one document into zero or more candidate records.

    Implementations raise ``ExtractionError`` for malformed output so the caller
    can skip the document.
    """

    async def extract(self, text: str, *, label: str) -> list[ProjectCandidate]: ...


@runtime_checkable
class QuickUpdateExtractor(Protocol):
    """Parse a short free-text note into a single update."""

    async def extract_quick_update(
        self,
        text: str,
        *,
        existing_names: Sequence[str],
    ) -> QuickUpdateCandidate: ...


__all__ = ["ProjectExtractor", "QuickUpdateExtractor"]
