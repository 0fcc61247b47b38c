"""Domain model for tracked projects, their audit trail and conflict alerts."""

from __future__ import annotations

from .candidate import TRACKED_FIELDS, ProjectCandidate, QuickUpdateCandidate
from .conflict import ConflictAlert
from .enums import SEVERITY_RANK, CaptureMethod, ConflictType, ProjectStatus, Sentiment
from .project import (
    DEFAULT_PRIORITY,
    DEFAULT_SENTIMENT,
    DEFAULT_STATUS,
    DEFAULT_URGENCY,
    SCORE_MAX,
    SCORE_MIN,
    HistoryEntry,
    ProjectRecord,
    new_id,
)
from .store import MAX_QUALITY_SCORE, SCHEMA_VERSION, Store, StoreMetadata

__all__ = [
    "DEFAULT_PRIORITY",
    "DEFAULT_SENTIMENT",
    "DEFAULT_STATUS",
    "DEFAULT_URGENCY",
    "MAX_QUALITY_SCORE",
    "SCHEMA_VERSION",
    "SCORE_MAX",
    "SCORE_MIN",
    "SEVERITY_RANK",
    "TRACKED_FIELDS",
    "CaptureMethod",
    "ConflictAlert",
    "ConflictType",
    "HistoryEntry",
    "ProjectCandidate",
    "ProjectRecord",
    "ProjectStatus",
    "QuickUpdateCandidate",
    "Sentiment",
    "Store",
    "StoreMetadata",
    "new_id",
]
