"""Ports for advisory text generated about conflicts and changes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ConflictType, HistoryEntry, ProjectCandidate, ProjectRecord

NO_CONFLICT_RATIONALE: Final[str] = "No conflict detected."


@runtime_checkable
class ConflictExplainer(Protocol):
    """Produce a one-sentence rationale for an already-detected conflict.

    Returning :data:`NO_CONFLICT_RATIONALE` never suppresses the alert.
    """

    async def explain(
        self,
        *,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
        conflict_type: ConflictType,
        recent_history: Sequence[HistoryEntry],
    ) -> str: ...


@runtime_checkable
class ChangeSummarizer(Protocol):
    """Summarize why tracked fields changed, for the history entry."""

    async def summarize(
        self,
        *,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
        changes: Sequence[str],
    ) -> str: ...


__all__ = ["NO_CONFLICT_RATIONALE", "ChangeSummarizer", "ConflictExplainer"]
