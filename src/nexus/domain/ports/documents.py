"""Port for listing and reading raw documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class DocumentMetadata:
    id: str
    name: str
    media_type: str


@runtime_checkable
class DocumentSource(Protocol):
    """Document listing and decoded-text access.

    ``read_document`` raises ``DocumentNotFoundError`` for unknown ids.
    """

    def list_documents(self) -> list[DocumentMetadata]: ...

    def read_document(self, document_id: str) -> str: ...


__all__ = ["DocumentMetadata", "DocumentSource"]
