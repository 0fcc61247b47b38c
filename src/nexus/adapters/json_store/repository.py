"""JSON file persistence for the store document."""

from __future__ import annotations

import hashlib
import os
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from nexus.domain.errors import StoreValidationError
from nexus.domain.ports.persistence import LoadedStore

from .schema import StoreDocument, empty_document
from .translator import document_to_store, store_to_document

if TYPE_CHECKING:
    from nexus.domain.model import Store

log = getLogger(__name__)


def _revision_of(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


class JsonFileStoreRepository:
    """Load and save the whole store as one JSON document.

    Writes go to a temporary sibling file that replaces the target atomically, so a
    reader never observes a half-written document.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> LoadedStore:
        if not self.path.exists():
            log.info("No store at %s; starting with an empty document", self.path)
            return LoadedStore(store=document_to_store(empty_document()), revision=None)

        raw = self.path.read_bytes()
        try:
            document = StoreDocument.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreValidationError(f"Invalid store document at {self.path}: {exc}") from exc
        return LoadedStore(store=document_to_store(document), revision=_revision_of(raw))

    def save(self, store: Store) -> str:
        try:
            document = store_to_document(store)
        except ValidationError as exc:
            raise StoreValidationError(f"Refusing to write invalid store: {exc}") from exc

        raw = document.model_dump_json(by_alias=True, exclude_none=True, indent=2).encode()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(raw)
            tmp_path.replace(self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        log.debug(
            "Saved store to %s (%d projects, %d conflicts)",
            self.path,
            len(store.projects),
            len(store.conflicts),
        )
        return _revision_of(raw)

    def current_revision(self) -> str | None:
        if not self.path.exists():
            return None
        return _revision_of(self.path.read_bytes())


if TYPE_CHECKING:
    from nexus.domain.ports.persistence import StoreRepository

    _repository_check: StoreRepository = JsonFileStoreRepository(Path("nexus_state.json"))
