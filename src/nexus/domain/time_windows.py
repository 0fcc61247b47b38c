"""Clock abstraction and the look-back window used for conflict gating."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from nexus.domain.model import HistoryEntry


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Timestamps must include timezone information")
    return value.astimezone(UTC)


@dataclass(frozen=True)
class LookbackWindow:
    """A fixed interval ending now, e.g. "the last two hours"."""

    duration: timedelta

    def __post_init__(self) -> None:
        if self.duration < timedelta(0):
            raise ValueError("Lookback duration must be non-negative")

    def start(self, *, clock: Clock = utcnow) -> datetime:
        return ensure_aware(clock()) - self.duration

    def filter_entries(
        self,
        entries: Iterable[HistoryEntry],
        *,
        clock: Clock = utcnow,
    ) -> list[HistoryEntry]:
        start = self.start(clock=clock)
        return [entry for entry in entries if ensure_aware(entry.timestamp) > start]


def is_older_than(timestamp: datetime | None, age: timedelta, *, clock: Clock = utcnow) -> bool:
    """Return True when ``timestamp`` is absent or more than ``age`` in the past."""

    if timestamp is None:
        return True
    return ensure_aware(clock()) - ensure_aware(timestamp) > age


__all__ = ["Clock", "LookbackWindow", "ensure_aware", "is_older_than", "utcnow"]
