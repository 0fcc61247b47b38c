"""Domain error taxonomy."""

from __future__ import annotations


class NexusError(RuntimeError):
    """Base class for recoverable and fatal pipeline errors."""


class ExtractionError(NexusError):
    """Raised when a document's extraction output is missing or malformed."""

    def __init__(self, message: str, *, label: str | None = None) -> None:
        super().__init__(message)
        self.label = label

    def __str__(self) -> str:
        base = super().__str__()
        return f"{self.label}: {base}" if self.label else base


class ExplanationError(NexusError):
    """Raised when the conflict explanation capability fails."""


class SummaryError(NexusError):
    """Raised when the change-summary capability fails."""


class AdviceError(NexusError):
    """Raised when a portfolio question could not be answered."""


class StoreValidationError(NexusError):
    """Raised when a store document fails schema validation on load or before save."""


class StaleStoreError(NexusError):
    """Raised when a commit would overwrite changes made since the store was loaded."""


class DocumentSourceError(NexusError):
    """Base class for document source lookup and decoding failures."""


class DocumentNotFoundError(DocumentSourceError):
    """Raised when a document id has no matching document."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class UnsupportedDocumentError(DocumentSourceError):
    """Raised when no decoder is registered for a document's media type."""
