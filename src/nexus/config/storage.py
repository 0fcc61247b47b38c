"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "nexus"
DEFAULT_STATE_FILENAME: Final[str] = "nexus_state.json"
DEFAULT_INGEST_DIRNAME: Final[str] = "ingest"


class WritePolicy(StrEnum):
    """How a commit treats a document that changed on disk since it was loaded."""

    LAST_WRITER_WINS = "last_writer_wins"
    REJECT_STALE = "reject_stale"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    state_filename: str = DEFAULT_STATE_FILENAME
    state_path_override: Path | None = None
    write_policy: WritePolicy = WritePolicy.LAST_WRITER_WINS

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def state_path(self, *, ensure: bool = True) -> Path:
        if self.state_path_override is not None:
            path = self.state_path_override.expanduser().resolve()
            if ensure:
                path.parent.mkdir(parents=True, exist_ok=True)
            return path
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.state_filename

    def ingest_dir(self) -> Path:
        return self.resolve_data_dir() / DEFAULT_INGEST_DIRNAME


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def _write_policy_from_env() -> WritePolicy:
    raw = optional_env_var("NEXUS_WRITE_POLICY")
    if raw is None:
        return WritePolicy.LAST_WRITER_WINS
    try:
        return WritePolicy(raw.lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in WritePolicy)
        raise ConfigurationError(
            f"NEXUS_WRITE_POLICY must be one of: {allowed} (got {raw!r})"
        ) from exc


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("NEXUS_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    state_path = optional_env_var("NEXUS_STATE_PATH")
    return StorageConfig(
        data_dir=data_dir,
        state_path_override=Path(state_path) if state_path else None,
        write_policy=_write_policy_from_env(),
    )
