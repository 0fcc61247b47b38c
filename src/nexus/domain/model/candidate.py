"""Partial entity updates produced by extraction, not yet merged."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import ProjectStatus, Sentiment

TRACKED_FIELDS: Final[tuple[str, ...]] = ("priority", "urgency", "sentiment", "status")


@dataclass(slots=True, kw_only=True)
class ProjectCandidate:
    """Candidate record; ``None`` means the field was not mentioned."""

    name: str
    description: str | None = None
    priority: int | None = None
    urgency: int | None = None
    sentiment: Sentiment | None = None
    status: ProjectStatus | None = None
    deadline: datetime | None = None
    notes: str | None = None
    risks: list[str] | None = None
    dependencies: list[str] | None = None

    def present_fields(self) -> dict[str, object]:
        """Return every populated field except ``name``."""

        present: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name == "name" or value is None:
                continue
            present[item.name] = list(value) if isinstance(value, list) else value
        return present


@dataclass(slots=True, kw_only=True)
class QuickUpdateCandidate:
    """Single-utterance update parsed from a short note."""

    project_name: str
    priority: int | None = None
    urgency: int | None = None
    sentiment: Sentiment | None = None
    status: ProjectStatus | None = None
    description: str | None = None
    change_summary: str | None = None

    def as_project_candidate(self) -> ProjectCandidate:
        """View the tracked fields as a ``ProjectCandidate`` for conflict detection."""

        return ProjectCandidate(
            name=self.project_name,
            priority=self.priority,
            urgency=self.urgency,
            sentiment=self.sentiment,
            status=self.status,
        )
