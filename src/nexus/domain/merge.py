"""Merge engine: create-or-update of project records keyed by fuzzy name identity."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nexus.domain.errors import SummaryError
from nexus.domain.model import CaptureMethod, HistoryEntry, ProjectRecord
from nexus.domain.normalization import enforce_furious_urgency
from nexus.domain.resolution import SubstringNameResolver
from nexus.domain.time_windows import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from nexus.domain.conflicts import ConflictDetector
    from nexus.domain.model import ConflictAlert, ProjectCandidate, Store
    from nexus.domain.ports.explanation import ChangeSummarizer
    from nexus.domain.resolution import NameResolver
    from nexus.domain.time_windows import Clock

log = getLogger(__name__)

CREATED_DESCRIPTION: Final[str] = "Project created from initial ingestion"
NO_CHANGES_DESCRIPTION: Final[str] = "No significant changes detected"


@dataclass(slots=True)
class UpsertOutcome:
    record: ProjectRecord
    conflicts: list[ConflictAlert]
    created: bool


def describe_changes(existing: ProjectRecord, candidate: ProjectCandidate) -> list[str]:
    """Describe every tracked field the candidate would change."""

    changes: list[str] = []
    for field_name in ("priority", "urgency"):
        old: int = getattr(existing, field_name)
        new: int | None = getattr(candidate, field_name)
        if new is None or new == old:
            continue
        direction = "increased" if new > old else "decreased"
        changes.append(f"{field_name} {direction} from {old} to {new}")

    if candidate.sentiment is not None and candidate.sentiment is not existing.sentiment:
        direction = (
            "escalated" if candidate.sentiment.severity > existing.sentiment.severity else "eased"
        )
        changes.append(
            f"sentiment {direction} from {existing.sentiment} to {candidate.sentiment}"
        )

    if candidate.status is not None and candidate.status is not existing.status:
        changes.append(f"status changed from {existing.status} to {candidate.status}")

    return changes


@dataclass(slots=True)
class MergeEngine:
    """Reconcile candidates against the store.

    Every touch of an existing record preserves its ``id`` and appends exactly one
    history entry (unless ``record_unchanged_updates`` is off and nothing tracked
    changed). Conflict alerts are appended to the store within the same call.
    """

    detector: ConflictDetector
    summarizer: ChangeSummarizer
    resolver: NameResolver = field(default_factory=SubstringNameResolver)
    record_unchanged_updates: bool = True
    clock: Clock = utcnow

    async def upsert(
        self,
        store: Store,
        candidate: ProjectCandidate,
        *,
        capture_method: CaptureMethod = CaptureMethod.FILE,
        source_label: str | None = None,
    ) -> UpsertOutcome:
        existing = self.resolver.resolve(candidate.name, store.projects)
        if existing is None:
            record = self.create(
                store,
                candidate,
                change=CREATED_DESCRIPTION,
                capture_method=capture_method,
                source_label=source_label,
            )
            return UpsertOutcome(record=record, conflicts=[], created=True)

        conflicts = await self.record_conflicts(store, existing, candidate)
        now = self.clock()
        merged = enforce_furious_urgency(
            replace(
                existing,
                **candidate.present_fields(),
                source_file=source_label,
                last_updated=now,
            )
        )

        description = await self._history_description(existing, candidate)
        if description is not None:
            merged = merged.with_history_entry(
                HistoryEntry(timestamp=now, change=description, capture_method=capture_method)
            )

        store.put_record(merged)
        log.debug("Updated project %s (%s)", merged.name, merged.id)
        return UpsertOutcome(record=merged, conflicts=conflicts, created=False)

    def create(
        self,
        store: Store,
        candidate: ProjectCandidate,
        *,
        change: str,
        capture_method: CaptureMethod,
        source_label: str | None = None,
    ) -> ProjectRecord:
        """Build a new record from defaults plus the candidate and add it to ``store``."""

        now = self.clock()
        record = ProjectRecord(
            name=candidate.name,
            last_updated=now,
            source_file=source_label,
            history=(HistoryEntry(timestamp=now, change=change, capture_method=capture_method),),
        )
        record = enforce_furious_urgency(replace(record, **candidate.present_fields()))
        store.put_record(record)
        log.info("Created project %s (%s)", record.name, record.id)
        return record

    async def record_conflicts(
        self,
        store: Store,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
    ) -> list[ConflictAlert]:
        """Detect conflicts against the pre-mutation record and append them to ``store``."""

        conflicts = await self.detector.detect(existing, candidate)
        store.add_conflicts(conflicts)
        return conflicts

    def history_entry(
        self,
        change: str,
        capture_method: CaptureMethod,
        *,
        timestamp: datetime | None = None,
    ) -> HistoryEntry:
        return HistoryEntry(
            timestamp=timestamp or self.clock(),
            change=change,
            capture_method=capture_method,
        )

    async def _history_description(
        self,
        existing: ProjectRecord,
        candidate: ProjectCandidate,
    ) -> str | None:
        changes = describe_changes(existing, candidate)
        if not changes:
            return NO_CHANGES_DESCRIPTION if self.record_unchanged_updates else None

        try:
            summary = await self.summarizer.summarize(
                existing=existing,
                candidate=candidate,
                changes=changes,
            )
        except SummaryError as exc:
            log.warning("Change summary unavailable for %s: %s", existing.name, exc)
            return _fallback_summary(changes)
        return summary.strip() or _fallback_summary(changes)


def _fallback_summary(changes: list[str]) -> str:
    text = "; ".join(changes)
    return text[:1].upper() + text[1:]


__all__ = [
    "CREATED_DESCRIPTION",
    "NO_CHANGES_DESCRIPTION",
    "MergeEngine",
    "UpsertOutcome",
    "describe_changes",
]
