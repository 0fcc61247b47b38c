"""Single-utterance updates from quick-capture and voice entry points."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from nexus.domain.model import ProjectCandidate
from nexus.domain.normalization import enforce_furious_urgency, normalize_quick_update

if TYPE_CHECKING:
    from datetime import datetime

    from nexus.domain.merge import MergeEngine
    from nexus.domain.model import (
        CaptureMethod,
        ConflictAlert,
        ProjectRecord,
        QuickUpdateCandidate,
    )
    from nexus.domain.ports.extraction import QuickUpdateExtractor
    from nexus.domain.ports.unit_of_work import StoreUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class QuickUpdateResult:
    projects_updated: list[str]
    conflicts: list[ConflictAlert]


@dataclass(slots=True)
class QuickUpdateHandler:
    """Apply one free-text note to the store and commit before returning."""

    extractor: QuickUpdateExtractor
    merge_engine: MergeEngine

    async def handle(
        self,
        uow: StoreUnitOfWork,
        text: str,
        capture_method: CaptureMethod,
    ) -> QuickUpdateResult:
        note = text.strip()
        if not note:
            raise ValueError("Quick update text must not be blank")

        store = uow.store
        parsed = await self.extractor.extract_quick_update(note, existing_names=store.project_names)
        update = normalize_quick_update(parsed)

        existing = self.merge_engine.resolver.resolve(update.project_name, store.projects)
        if existing is None:
            record = self.merge_engine.create(
                store,
                _seed_candidate(update, note),
                change=f"Created via {capture_method}: {note}",
                capture_method=capture_method,
            )
            conflicts: list[ConflictAlert] = []
        else:
            conflicts = await self.merge_engine.record_conflicts(
                store, existing, update.as_project_candidate()
            )
            now = self.merge_engine.clock()
            record = _apply_update(existing, update, note, now=now).with_history_entry(
                self.merge_engine.history_entry(
                    update.change_summary or f"Updated via {capture_method}",
                    capture_method,
                    timestamp=now,
                )
            )
            store.put_record(record)

        uow.commit()
        log.info(
            "Quick update via %s applied to %s (%d conflict(s))",
            capture_method,
            record.name,
            len(conflicts),
        )
        return QuickUpdateResult(projects_updated=[record.name], conflicts=conflicts)


def _seed_candidate(update: QuickUpdateCandidate, note: str) -> ProjectCandidate:
    return ProjectCandidate(
        name=update.project_name,
        description=update.description or note,
        priority=update.priority,
        urgency=update.urgency,
        sentiment=update.sentiment,
        status=update.status,
        notes=note,
    )


def _apply_update(
    existing: ProjectRecord,
    update: QuickUpdateCandidate,
    note: str,
    *,
    now: datetime,
) -> ProjectRecord:
    notes = f"{note}\n\n{existing.notes}" if existing.notes else note
    updated = replace(
        existing,
        priority=existing.priority if update.priority is None else update.priority,
        urgency=existing.urgency if update.urgency is None else update.urgency,
        sentiment=update.sentiment or existing.sentiment,
        status=update.status or existing.status,
        notes=notes,
        last_updated=now,
    )
    return enforce_furious_urgency(updated)


__all__ = ["QuickUpdateHandler", "QuickUpdateResult"]
