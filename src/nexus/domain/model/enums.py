"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType


class Sentiment(StrEnum):
    CALM = "calm"
    CONCERNED = "concerned"
    FRUSTRATED = "frustrated"
    FURIOUS = "furious"

    @property
    def severity(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = MappingProxyType(
    {
        Sentiment.CALM: 0,
        Sentiment.CONCERNED: 1,
        Sentiment.FRUSTRATED: 2,
        Sentiment.FURIOUS: 3,
    }
)


class ProjectStatus(StrEnum):
    ACTIVE = "active"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class CaptureMethod(StrEnum):
    """Provenance tag for a history entry."""

    FILE = "file"
    VOICE = "voice"
    EMAIL = "email"
    QUICK_CAPTURE = "quick-capture"


class ConflictType(StrEnum):
    PRIORITY_SHIFT = "priority_shift"
    URGENCY_SPIKE = "urgency_spike"
    STATUS_REVERSAL = "status_reversal"
    SENTIMENT_CHANGE = "sentiment_change"
