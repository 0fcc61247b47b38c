"""Unit-of-work boundary around one load/mutate/save of the store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from nexus.domain.model import Store


@runtime_checkable
class StoreUnitOfWork(Protocol):
    """Scoped transaction: ``commit`` saves, any other exit discards."""

    @property
    def store(self) -> Store: ...

    def __enter__(self) -> StoreUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


__all__ = ["StoreUnitOfWork"]
