"""Temporal conflict detection.

An incoming update is only compared against *recent* momentum: the record must
have at least one history entry inside the look-back window, otherwise nothing
is flagged no matter how extreme the update is. Three structural rules then run
independently, so one update can raise several alerts:

- ``priority_shift``: priority goes down right after a recorded increase
- ``urgency_spike``: urgency jumps by more than :data:`URGENCY_SPIKE_THRESHOLD`
- ``sentiment_change``: sentiment moves to a strictly more severe value

The explanation capability only annotates alerts; whether an alert exists is
decided by the rules alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nexus.domain.errors import ExplanationError
from nexus.domain.model import ConflictAlert, ConflictType
from nexus.domain.ports.explanation import NO_CONFLICT_RATIONALE
from nexus.domain.time_windows import LookbackWindow, utcnow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import HistoryEntry, ProjectCandidate, ProjectRecord
    from nexus.domain.ports.explanation import ConflictExplainer
    from nexus.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_CONFLICT_LOOKBACK: Final[timedelta] = timedelta(hours=2)
DEFAULT_RECENT_ENTRY_LIMIT: Final[int] = 5
URGENCY_SPIKE_THRESHOLD: Final[int] = 3


@dataclass(frozen=True, slots=True)
class _Trigger:
    conflict_type: ConflictType
    previous_value: str
    new_value: str


@dataclass(slots=True)
class ConflictDetector:
    """Classify contradictions between a record's recent history and an update."""

    explainer: ConflictExplainer
    window: LookbackWindow = field(
        default_factory=lambda: LookbackWindow(DEFAULT_CONFLICT_LOOKBACK)
    )
    recent_entry_limit: int = DEFAULT_RECENT_ENTRY_LIMIT
    clock: Clock = utcnow

    def recent_history(self, record: ProjectRecord) -> list[HistoryEntry]:
        """Return the tail of ``record.history`` that falls inside the window."""

        tail = record.history[-self.recent_entry_limit :] if self.recent_entry_limit else ()
        return self.window.filter_entries(tail, clock=self.clock)

    async def detect(
        self,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
    ) -> list[ConflictAlert]:
        recent = self.recent_history(existing)
        if not recent:
            return []

        alerts: list[ConflictAlert] = []
        for trigger in _evaluate_rules(existing, candidate, recent):
            analysis = await self._explain(existing, candidate, trigger, recent)
            alerts.append(
                ConflictAlert(
                    project_id=existing.id,
                    project_name=existing.name,
                    timestamp=self.clock(),
                    conflict_type=trigger.conflict_type,
                    previous_value=trigger.previous_value,
                    new_value=trigger.new_value,
                    analysis=analysis,
                )
            )

        if alerts:
            log.info(
                "Detected %d conflict(s) for %s: %s",
                len(alerts),
                existing.name,
                ", ".join(alert.conflict_type for alert in alerts),
            )
        return alerts

    async def _explain(
        self,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
        trigger: _Trigger,
        recent: Sequence[HistoryEntry],
    ) -> str:
        try:
            return await self.explainer.explain(
                existing=existing,
                candidate=candidate,
                conflict_type=trigger.conflict_type,
                recent_history=recent,
            )
        except ExplanationError as exc:
            log.warning(
                "Explanation unavailable for %s on %s: %s",
                trigger.conflict_type,
                existing.name,
                exc,
            )
            return NO_CONFLICT_RATIONALE


def _evaluate_rules(
    existing: ProjectRecord,
    candidate: ProjectCandidate,
    recent: Sequence[HistoryEntry],
) -> list[_Trigger]:
    triggers: list[_Trigger] = []

    if (
        candidate.priority is not None
        and candidate.priority < existing.priority
        and any(_mentions_priority_increase(entry) for entry in recent)
    ):
        triggers.append(
            _Trigger(
                ConflictType.PRIORITY_SHIFT,
                previous_value=f"{existing.priority} (increased recently)",
                new_value=f"{candidate.priority} (now decreasing)",
            )
        )

    if (
        candidate.urgency is not None
        and candidate.urgency > existing.urgency + URGENCY_SPIKE_THRESHOLD
    ):
        delta = candidate.urgency - existing.urgency
        triggers.append(
            _Trigger(
                ConflictType.URGENCY_SPIKE,
                previous_value=str(existing.urgency),
                new_value=f"{candidate.urgency} (+{delta})",
            )
        )

    if (
        candidate.sentiment is not None
        and candidate.sentiment.severity > existing.sentiment.severity
    ):
        triggers.append(
            _Trigger(
                ConflictType.SENTIMENT_CHANGE,
                previous_value=existing.sentiment.value,
                new_value=candidate.sentiment.value,
            )
        )

    return triggers


def _mentions_priority_increase(entry: HistoryEntry) -> bool:
    change = entry.change.casefold()
    return "priority" in change and "increased" in change


__all__ = [
    "DEFAULT_CONFLICT_LOOKBACK",
    "DEFAULT_RECENT_ENTRY_LIMIT",
    "URGENCY_SPIKE_THRESHOLD",
    "ConflictDetector",
]
