"""Ports for persisting the versioned store document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from nexus.domain.model import Store


@dataclass(slots=True)
class LoadedStore:
    """A validated store together with the revision it was read at.

    ``revision`` is ``None`` when no document existed yet.
    """

    store: Store
    revision: str | None


@runtime_checkable
class StoreRepository(Protocol):
    """Whole-document load/save contract.

    Both directions validate against the schema and raise
    ``StoreValidationError`` instead of returning or writing a corrupt document.
    """

    def load(self) -> LoadedStore: ...

    def save(self, store: Store) -> str: ...

    def current_revision(self) -> str | None: ...


__all__ = ["LoadedStore", "StoreRepository"]
