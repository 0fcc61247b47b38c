"""Document sources backed by a local directory or by in-memory text."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nexus.domain.errors import DocumentNotFoundError, UnsupportedDocumentError
from nexus.domain.ports.documents import DocumentMetadata

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = getLogger(__name__)

TEXT_MEDIA_TYPES: Final[frozenset[str]] = frozenset({"text/plain", "text/markdown"})
_SUFFIX_MEDIA_TYPES: Final[dict[str, str]] = {
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".txt": "text/plain",
}
_FALLBACK_MEDIA_TYPE: Final[str] = "application/octet-stream"


def guess_media_type(name: str) -> str:
    suffix = name[name.rfind(".") :].lower() if "." in name else ""
    if suffix in _SUFFIX_MEDIA_TYPES:
        return _SUFFIX_MEDIA_TYPES[suffix]
    media_type, _ = mimetypes.guess_type(name)
    return media_type or _FALLBACK_MEDIA_TYPE


class LocalDirectoryDocumentSource:
    """Expose the regular, non-hidden files of one directory as documents.

    Document ids are file names. Only plain text and markdown are decoded;
    binary formats such as PDF or Word are listed but raise
    ``UnsupportedDocumentError`` when read.
    """

    def __init__(self, directory: Path, *, encoding: str = "utf-8") -> None:
        self.directory = directory
        self.encoding = encoding

    def list_documents(self) -> list[DocumentMetadata]:
        if not self.directory.is_dir():
            log.warning("Ingest directory %s does not exist", self.directory)
            return []
        documents = [
            DocumentMetadata(id=path.name, name=path.name, media_type=guess_media_type(path.name))
            for path in sorted(self.directory.iterdir())
            if path.is_file() and not path.name.startswith(".")
        ]
        log.debug("Found %d document(s) in %s", len(documents), self.directory)
        return documents

    def read_document(self, document_id: str) -> str:
        metadata = next(
            (document for document in self.list_documents() if document.id == document_id),
            None,
        )
        if metadata is None:
            raise DocumentNotFoundError(document_id)
        if metadata.media_type not in TEXT_MEDIA_TYPES:
            raise UnsupportedDocumentError(
                f"Unsupported media type {metadata.media_type} for {metadata.name}"
            )
        return (self.directory / metadata.id).read_text(encoding=self.encoding)


@dataclass(slots=True)
class InMemoryDocumentSource:
    """Serve already-decoded text, e.g. email bodies or transcripts."""

    documents: dict[str, str] = field(default_factory=dict[str, str])
    media_type: str = "text/plain"

    @classmethod
    def from_mapping(cls, documents: Mapping[str, str]) -> InMemoryDocumentSource:
        return cls(documents=dict(documents))

    def list_documents(self) -> list[DocumentMetadata]:
        return [
            DocumentMetadata(id=name, name=name, media_type=self.media_type)
            for name in self.documents
        ]

    def read_document(self, document_id: str) -> str:
        try:
            return self.documents[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None


if TYPE_CHECKING:
    from pathlib import Path as _Path

    from nexus.domain.ports.documents import DocumentSource

    _local_check: DocumentSource = LocalDirectoryDocumentSource(_Path("."))
    _memory_check: DocumentSource = InMemoryDocumentSource()
