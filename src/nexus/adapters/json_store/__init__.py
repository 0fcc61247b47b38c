"""Public interface for the JSON store adapter."""

from __future__ import annotations

from .repository import JsonFileStoreRepository
from .schema import StoreDocument, empty_document
from .translator import document_to_store, store_to_document
from .unit_of_work import JsonStoreUnitOfWork, UnitOfWorkStateError

__all__ = [
    "JsonFileStoreRepository",
    "JsonStoreUnitOfWork",
    "StoreDocument",
    "UnitOfWorkStateError",
    "document_to_store",
    "empty_document",
    "store_to_document",
]
