"""Normalization rules applied to every candidate after extraction."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, date, datetime, time
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nexus.domain.errors import ExtractionError
from nexus.domain.model import SCORE_MAX, SCORE_MIN, Sentiment

if TYPE_CHECKING:
    from nexus.domain.model import ProjectCandidate, ProjectRecord, QuickUpdateCandidate

log = getLogger(__name__)

FURIOUS_MIN_URGENCY: Final[int] = 8
_NULL_SENTINELS: Final[frozenset[str]] = frozenset({"", "null", "none", "n/a", "tbd", "unknown"})


def normalize_candidate(candidate: ProjectCandidate) -> ProjectCandidate | None:
    """Return a normalized copy of ``candidate``, or ``None`` when it has no usable name."""

    name = candidate.name.strip()
    if not name:
        log.warning("Dropping extracted candidate without a project name")
        return None

    urgency = _furious_urgency(candidate.sentiment, _clamp_score(candidate.urgency, "urgency"))
    return replace(
        candidate,
        name=name,
        priority=_clamp_score(candidate.priority, "priority"),
        urgency=urgency,
        deadline=normalize_deadline(candidate.deadline),
    )


def normalize_quick_update(update: QuickUpdateCandidate) -> QuickUpdateCandidate:
    """Normalize a quick update; a blank project name is an extraction failure."""

    name = update.project_name.strip()
    if not name:
        raise ExtractionError("Quick update did not name a project")

    urgency = _furious_urgency(update.sentiment, _clamp_score(update.urgency, "urgency"))
    return replace(
        update,
        project_name=name,
        priority=_clamp_score(update.priority, "priority"),
        urgency=urgency,
    )


def normalize_deadline(value: object) -> datetime | None:
    """Coerce a deadline into an aware UTC timestamp, or ``None`` when absent/unparseable."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if not isinstance(value, str):
        log.debug("Ignoring deadline of unexpected type %s", type(value).__name__)
        return None

    text = value.strip()
    if text.lower() in _NULL_SENTINELS:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        log.debug("Ignoring unparseable deadline %r", value)
        return None
    return normalize_deadline(parsed)


def enforce_furious_urgency(record: ProjectRecord) -> ProjectRecord:
    """Raise a merged record's urgency to the furious floor when needed."""

    if record.sentiment is not Sentiment.FURIOUS or record.urgency >= FURIOUS_MIN_URGENCY:
        return record
    return replace(record, urgency=FURIOUS_MIN_URGENCY)


def _furious_urgency(sentiment: Sentiment | None, urgency: int | None) -> int | None:
    if sentiment is not Sentiment.FURIOUS:
        return urgency
    if urgency is None or urgency < FURIOUS_MIN_URGENCY:
        return FURIOUS_MIN_URGENCY
    return urgency


def _clamp_score(value: int | None, field_name: str) -> int | None:
    if value is None:
        return None
    clamped = min(max(value, SCORE_MIN), SCORE_MAX)
    if clamped != value:
        log.debug("Clamped %s from %s to %s", field_name, value, clamped)
    return clamped


__all__ = [
    "FURIOUS_MIN_URGENCY",
    "enforce_furious_urgency",
    "normalize_candidate",
    "normalize_deadline",
    "normalize_quick_update",
]
