"""Batch ingestion: documents -> extraction -> sequential merge.

Extraction runs through a bounded-concurrency queue (one slot by default) so the
external rate limit is respected and only a few documents are held in memory at
once. Each document is isolated: a failure is logged, recorded and skipped.
Merging only starts after every extraction finished or failed, and happens one
candidate at a time in document order so that two documents mentioning the same
project cannot both create it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nexus.domain.model import CaptureMethod
from nexus.domain.normalization import normalize_candidate
from nexus.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from nexus.domain.merge import MergeEngine
    from nexus.domain.model import ConflictAlert, ProjectCandidate, ProjectRecord, Store
    from nexus.domain.ports.documents import DocumentMetadata, DocumentSource
    from nexus.domain.ports.extraction import ProjectExtractor
    from nexus.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_INTER_CALL_DELAY_SECONDS: Final[float] = 3.0
DEFAULT_CONCURRENCY: Final[int] = 1


@dataclass(frozen=True, slots=True)
class DocumentError:
    """A document that was skipped, with enough context for an operator to act."""

    document_id: str
    label: str
    message: str


@dataclass(slots=True)
class IngestionResult:
    records: list[ProjectRecord] = field(default_factory=list["ProjectRecord"])
    conflicts: list[ConflictAlert] = field(default_factory=list["ConflictAlert"])
    errors: list[DocumentError] = field(default_factory=list[DocumentError])
    processed: int = 0
    created: int = 0


@dataclass(slots=True)
class _Extraction:
    document: DocumentMetadata
    candidates: list[ProjectCandidate]


@dataclass(slots=True)
class IngestionOrchestrator:
    extractor: ProjectExtractor
    merge_engine: MergeEngine
    concurrency: int = DEFAULT_CONCURRENCY
    inter_call_delay: float = DEFAULT_INTER_CALL_DELAY_SECONDS
    capture_method: CaptureMethod = CaptureMethod.FILE
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("Extraction concurrency must be at least 1")
        if self.inter_call_delay < 0:
            raise ValueError("Inter-call delay must be non-negative")

    async def ingest(self, source: DocumentSource, store: Store) -> IngestionResult:
        """Extract every document from ``source`` and merge the results into ``store``.

        The returned records are the touched/created ones (last writer wins by id);
        they are already placed in ``store`` by the merge engine.
        """

        documents = source.list_documents()
        log.info("Ingesting %d document(s) with concurrency=%d", len(documents), self.concurrency)

        extractions, errors = await self._extract_all(source, documents)

        result = IngestionResult(errors=errors, processed=len(extractions))
        touched: dict[UUID, ProjectRecord] = {}
        for extraction in extractions:
            for candidate in extraction.candidates:
                outcome = await self.merge_engine.upsert(
                    store,
                    candidate,
                    capture_method=self.capture_method,
                    source_label=extraction.document.name,
                )
                touched[outcome.record.id] = outcome.record
                result.conflicts.extend(outcome.conflicts)
                if outcome.created:
                    result.created += 1

        result.records = list(touched.values())
        log.info(
            "Ingestion finished: processed=%d, failed=%d, records=%d, created=%d, conflicts=%d",
            result.processed,
            len(result.errors),
            len(result.records),
            result.created,
            len(result.conflicts),
        )
        return result

    async def _extract_all(
        self,
        source: DocumentSource,
        documents: list[DocumentMetadata],
    ) -> tuple[list[_Extraction], list[DocumentError]]:
        slots = asyncio.Semaphore(self.concurrency)
        last_index = len(documents) - 1

        async def run(index: int, document: DocumentMetadata) -> _Extraction | DocumentError:
            async with slots:
                outcome = await self._extract_one(source, document)
                if index < last_index and self.inter_call_delay > 0:
                    await self.sleep(self.inter_call_delay)
                return outcome

        outcomes = await asyncio.gather(
            *(run(index, document) for index, document in enumerate(documents))
        )

        extractions: list[_Extraction] = []
        errors: list[DocumentError] = []
        for outcome in outcomes:
            if isinstance(outcome, DocumentError):
                errors.append(outcome)
            else:
                extractions.append(outcome)
        return extractions, errors

    async def _extract_one(
        self,
        source: DocumentSource,
        document: DocumentMetadata,
    ) -> _Extraction | DocumentError:
        try:
            text = await asyncio.to_thread(source.read_document, document.id)
            raw_candidates = await self.extractor.extract(text, label=document.name)
        except Exception as exc:  # noqa: BLE001
            log.error("Skipping document %s: %s", document.name, exc)  # noqa: TRY400
            return DocumentError(document_id=document.id, label=document.name, message=str(exc))

        candidates = [
            normalized
            for candidate in raw_candidates
            if (normalized := normalize_candidate(candidate)) is not None
        ]
        log.info("Extracted %d project(s) from %s", len(candidates), document.name)
        return _Extraction(document=document, candidates=candidates)


def record_ingestion(
    store: Store,
    result: IngestionResult,
    *,
    clock: Clock = utcnow,
) -> None:
    """Reconcile ``result`` into ``store`` and bump the ingestion metadata."""

    store.reconcile(result.records)
    store.metadata.last_ingestion = clock()
    store.metadata.total_files_processed += result.processed


__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_INTER_CALL_DELAY_SECONDS",
    "DocumentError",
    "IngestionOrchestrator",
    "IngestionResult",
    "record_ingestion",
]
