"""Ingestion defaults: pacing, conflict look-back and history behaviour."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from pathlib import Path

from .env import env_bool, env_float, env_int, optional_env_var
from .errors import ConfigurationError

DEFAULT_INTER_CALL_DELAY_SECONDS = 3.0
DEFAULT_EXTRACTION_CONCURRENCY = 1
DEFAULT_CONFLICT_LOOKBACK = timedelta(hours=2)
DEFAULT_RECENT_ENTRY_LIMIT = 5


class NameMatching(StrEnum):
    """How an extracted project name is matched to a stored record."""

    SUBSTRING = "substring"
    EXACT = "exact"


@dataclass(frozen=True, slots=True)
class IngestConfig:
    inter_call_delay_seconds: float = DEFAULT_INTER_CALL_DELAY_SECONDS
    concurrency: int = DEFAULT_EXTRACTION_CONCURRENCY
    conflict_lookback: timedelta = DEFAULT_CONFLICT_LOOKBACK
    recent_entry_limit: int = DEFAULT_RECENT_ENTRY_LIMIT
    record_unchanged_updates: bool = True
    ingest_dir: Path | None = None
    name_matching: NameMatching = NameMatching.SUBSTRING


def get_ingest_config() -> IngestConfig:
    ingest_dir = optional_env_var("NEXUS_INGEST_DIR")
    return IngestConfig(
        inter_call_delay_seconds=env_float(
            "NEXUS_INGEST_DELAY_SECONDS", DEFAULT_INTER_CALL_DELAY_SECONDS, minimum=0.0
        ),
        concurrency=env_int("NEXUS_INGEST_CONCURRENCY", DEFAULT_EXTRACTION_CONCURRENCY, minimum=1),
        record_unchanged_updates=env_bool("NEXUS_RECORD_UNCHANGED_UPDATES", default=True),
        ingest_dir=Path(ingest_dir) if ingest_dir else None,
        name_matching=_name_matching_from_env(),
    )


def _name_matching_from_env() -> NameMatching:
    raw = optional_env_var("NEXUS_NAME_MATCHING")
    if raw is None:
        return NameMatching.SUBSTRING
    try:
        return NameMatching(raw.lower())
    except ValueError as exc:
        allowed = ", ".join(mode.value for mode in NameMatching)
        raise ConfigurationError(
            f"NEXUS_NAME_MATCHING must be one of: {allowed} (got {raw!r})"
        ) from exc
