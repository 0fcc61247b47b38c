"""Conflict alerts raised when an update contradicts recent momentum."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .project import new_id

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .enums import ConflictType


@dataclass(slots=True, kw_only=True)
class ConflictAlert:
    """A flagged contradiction between an incoming update and recent history.

    ``resolved`` is only ever flipped by an explicit resolution action outside the
    ingestion pipeline.
    """

    project_id: UUID
    project_name: str
    timestamp: datetime
    conflict_type: ConflictType
    previous_value: str
    new_value: str
    analysis: str
    resolved: bool = False
    id: UUID = field(default_factory=new_id)
