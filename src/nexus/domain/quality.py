"""Store health score derived from completeness and ingestion recency."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Final

from nexus.domain.model import MAX_QUALITY_SCORE
from nexus.domain.time_windows import is_older_than, utcnow

if TYPE_CHECKING:
    from nexus.domain.model import Store
    from nexus.domain.time_windows import Clock

MIN_DESCRIPTION_LENGTH: Final[int] = 10
SHORT_DESCRIPTION_PENALTY: Final[int] = 2
NO_RISKS_PENALTY: Final[int] = 1
STALE_INGESTION_PENALTY: Final[int] = 10
STALE_INGESTION_AGE: Final[timedelta] = timedelta(days=7)


def quality_score(store: Store, *, clock: Clock = utcnow) -> int:
    """Return a 0-100 score; recomputed on demand, never maintained incrementally."""

    score = MAX_QUALITY_SCORE
    for project in store.projects:
        if len(project.description) < MIN_DESCRIPTION_LENGTH:
            score -= SHORT_DESCRIPTION_PENALTY
        if not project.risks:
            score -= NO_RISKS_PENALTY

    if is_older_than(store.metadata.last_ingestion, STALE_INGESTION_AGE, clock=clock):
        score -= STALE_INGESTION_PENALTY

    return max(0, score)


__all__ = ["quality_score"]
