"""Unit of work around one load/mutate/save cycle of the JSON store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from nexus.config.storage import WritePolicy
from nexus.domain.errors import StaleStoreError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from nexus.domain.model import Store
    from nexus.domain.ports.persistence import StoreRepository

log = getLogger(__name__)


class UnitOfWorkStateError(RuntimeError):
    """Raised when the store is accessed outside an active unit of work."""


class JsonStoreUnitOfWork:
    """Scoped transaction over the whole store document.

    Entering loads and validates the document. ``commit`` validates and saves it.
    Leaving the block by an exception, or without committing, discards every
    in-memory change.

    With ``WritePolicy.LAST_WRITER_WINS`` concurrent operations can silently
    overwrite each other; ``WritePolicy.REJECT_STALE`` raises ``StaleStoreError``
    instead when the document changed on disk after it was loaded.
    """

    def __init__(
        self,
        repository: StoreRepository,
        *,
        write_policy: WritePolicy = WritePolicy.LAST_WRITER_WINS,
        before_commit: Callable[[Store], None] | None = None,
    ) -> None:
        self.repository = repository
        self.write_policy = write_policy
        self.before_commit = before_commit
        self._store: Store | None = None
        self._revision: str | None = None
        self._committed = False

    def __enter__(self) -> JsonStoreUnitOfWork:
        if self._store is not None:
            raise UnitOfWorkStateError("Unit of work already active")
        loaded = self.repository.load()
        self._store = loaded.store
        self._revision = loaded.revision
        self._committed = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None or not self._committed:
            self.rollback()
        self._store = None
        return False  # don't swallow exceptions

    @property
    def store(self) -> Store:
        if self._store is None:
            raise UnitOfWorkStateError("Store accessed outside an active unit of work")
        return self._store

    @property
    def revision(self) -> str | None:
        return self._revision

    def commit(self) -> None:
        store = self.store
        if self.before_commit is not None:
            self.before_commit(store)
        if self.write_policy is WritePolicy.REJECT_STALE:
            current = self.repository.current_revision()
            if current != self._revision:
                raise StaleStoreError(
                    "Store changed on disk since it was loaded; refusing to overwrite"
                )
        self._revision = self.repository.save(store)
        self._committed = True

    def rollback(self) -> None:
        """Drop the in-memory store; the document on disk is left untouched."""

        if self._store is None:
            return
        if not self._committed:
            log.debug("Discarding uncommitted store changes")
        self._store = None


if TYPE_CHECKING:
    from nexus.domain.ports.unit_of_work import StoreUnitOfWork

    def _uow_check(repository: StoreRepository) -> StoreUnitOfWork:
        return JsonStoreUnitOfWork(repository)
