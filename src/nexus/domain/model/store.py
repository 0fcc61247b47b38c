"""Top-level persisted document: records, alerts and aggregate metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from .conflict import ConflictAlert
    from .project import ProjectRecord

SCHEMA_VERSION: Final[str] = "1.0"
MAX_QUALITY_SCORE: Final[int] = 100


@dataclass(slots=True, kw_only=True)
class StoreMetadata:
    last_ingestion: datetime | None = None
    total_files_processed: int = 0
    quality_score: int = MAX_QUALITY_SCORE


@dataclass(slots=True, kw_only=True)
class Store:
    """In-memory view of the persisted document.

    Record order carries no meaning; identity is by ``id``.
    """

    version: str = SCHEMA_VERSION
    projects: list[ProjectRecord] = field(default_factory=list["ProjectRecord"])
    conflicts: list[ConflictAlert] = field(default_factory=list["ConflictAlert"])
    metadata: StoreMetadata = field(default_factory=StoreMetadata)

    def put_record(self, record: ProjectRecord) -> None:
        """Replace the record with the same id, or append it (last writer wins)."""

        for index, project in enumerate(self.projects):
            if project.id == record.id:
                self.projects[index] = record
                return
        self.projects.append(record)

    def reconcile(self, records: Iterable[ProjectRecord]) -> None:
        for record in records:
            self.put_record(record)

    def add_conflicts(self, conflicts: Iterable[ConflictAlert]) -> None:
        self.conflicts.extend(conflicts)

    @property
    def project_names(self) -> list[str]:
        return [project.name for project in self.projects]
