"""Project records and their append-only audit trail."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from .enums import ProjectStatus, Sentiment

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import CaptureMethod

SCORE_MIN = 0
SCORE_MAX = 10
DEFAULT_PRIORITY = 5
DEFAULT_URGENCY = 5
DEFAULT_SENTIMENT = Sentiment.CALM
DEFAULT_STATUS = ProjectStatus.ACTIVE


def new_id() -> UUID:
    return uuid4()


@dataclass(frozen=True, slots=True, kw_only=True)
class HistoryEntry:
    """One immutable audit record."""

    timestamp: datetime
    change: str
    capture_method: CaptureMethod


@dataclass(slots=True, kw_only=True)
class ProjectRecord:
    """A tracked initiative.

    ``id`` is assigned once at creation. ``history`` is a tuple so that entries
    can only be added through :meth:`with_history_entry`, which returns a new
    record rather than reordering or truncating the existing trail.
    """

    name: str
    last_updated: datetime
    id: UUID = field(default_factory=new_id)
    description: str = ""
    priority: int = DEFAULT_PRIORITY
    urgency: int = DEFAULT_URGENCY
    sentiment: Sentiment = DEFAULT_SENTIMENT
    status: ProjectStatus = DEFAULT_STATUS
    deadline: datetime | None = None
    notes: str = ""
    risks: list[str] = field(default_factory=list[str])
    dependencies: list[str] = field(default_factory=list[str])
    history: tuple[HistoryEntry, ...] = ()
    source_file: str | None = None

    def with_history_entry(self, entry: HistoryEntry) -> ProjectRecord:
        return replace(self, history=(*self.history, entry))
