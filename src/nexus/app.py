"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from nexus.adapters.anthropic import (
    AnthropicMessagesClient,
    LlmChangeSummarizer,
    LlmConflictExplainer,
    LlmPortfolioAdvisor,
    LlmProjectExtractor,
)
from nexus.adapters.documents import InMemoryDocumentSource, LocalDirectoryDocumentSource
from nexus.adapters.json_store import JsonFileStoreRepository, JsonStoreUnitOfWork
from nexus.config import NameMatching, get_ingest_config, get_llm_config, get_storage_config
from nexus.domain.conflicts import ConflictDetector
from nexus.domain.ingestion import IngestionOrchestrator, record_ingestion
from nexus.domain.merge import MergeEngine
from nexus.domain.model import CaptureMethod
from nexus.domain.ports.unit_of_work import StoreUnitOfWork
from nexus.domain.quality import quality_score
from nexus.domain.quick_update import QuickUpdateHandler
from nexus.domain.resolution import ExactNameResolver, SubstringNameResolver
from nexus.domain.time_windows import LookbackWindow, utcnow

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from datetime import datetime

    from nexus.config import IngestConfig, StorageConfig
    from nexus.domain.ingestion import IngestionResult
    from nexus.domain.model import ConflictAlert, ProjectRecord, Store
    from nexus.domain.ports.advice import PortfolioAdvisor
    from nexus.domain.ports.documents import DocumentSource
    from nexus.domain.ports.explanation import ChangeSummarizer, ConflictExplainer
    from nexus.domain.ports.extraction import ProjectExtractor, QuickUpdateExtractor
    from nexus.domain.quick_update import QuickUpdateResult
    from nexus.domain.time_windows import Clock

UnitOfWorkFactory = Callable[[], StoreUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class LlmServices:
    """The language-model capabilities one operation needs."""

    extractor: ProjectExtractor
    quick_update_extractor: QuickUpdateExtractor
    explainer: ConflictExplainer
    summarizer: ChangeSummarizer
    advisor: PortfolioAdvisor


def refresh_quality_score(store: Store, *, clock: Clock = utcnow) -> None:
    store.metadata.quality_score = quality_score(store, clock=clock)


def build_store_unit_of_work(
    *,
    storage: StorageConfig | None = None,
    clock: Clock = utcnow,
) -> JsonStoreUnitOfWork:
    """Unit of work over the configured JSON document that refreshes the quality score."""

    config = storage or get_storage_config()
    return JsonStoreUnitOfWork(
        JsonFileStoreRepository(config.state_path()),
        write_policy=config.write_policy,
        before_commit=partial(refresh_quality_score, clock=clock),
    )


@asynccontextmanager
async def _open_services(services: LlmServices | None) -> AsyncIterator[LlmServices]:
    if services is not None:
        yield services
        return
    async with AnthropicMessagesClient(get_llm_config()) as client:
        extractor = LlmProjectExtractor(client)
        yield LlmServices(
            extractor=extractor,
            quick_update_extractor=extractor,
            explainer=LlmConflictExplainer(client),
            summarizer=LlmChangeSummarizer(client),
            advisor=LlmPortfolioAdvisor(client),
        )


def _build_merge_engine(
    services: LlmServices,
    config: IngestConfig,
    clock: Clock,
) -> MergeEngine:
    detector = ConflictDetector(
        explainer=services.explainer,
        window=LookbackWindow(config.conflict_lookback),
        recent_entry_limit=config.recent_entry_limit,
        clock=clock,
    )
    resolver = (
        ExactNameResolver()
        if config.name_matching is NameMatching.EXACT
        else SubstringNameResolver()
    )
    return MergeEngine(
        detector=detector,
        summarizer=services.summarizer,
        resolver=resolver,
        record_unchanged_updates=config.record_unchanged_updates,
        clock=clock,
    )


def ingest_documents(
    *,
    source: DocumentSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    services: LlmServices | None = None,
    ingest_config: IngestConfig | None = None,
    clock: Clock = utcnow,
) -> IngestionResult:
    """Extract every document from ``source`` and merge the results into the store."""

    config = ingest_config or get_ingest_config()
    effective_source = source or LocalDirectoryDocumentSource(
        config.ingest_dir or get_storage_config().ingest_dir()
    )
    effective_uow = unit_of_work_factory or partial(build_store_unit_of_work, clock=clock)
    log.info(
        "Starting ingestion: concurrency=%s, delay=%ss",
        config.concurrency,
        config.inter_call_delay_seconds,
    )

    result = asyncio.run(
        _ingest_async(
            source=effective_source,
            unit_of_work_factory=effective_uow,
            services=services,
            config=config,
            clock=clock,
        )
    )

    log.info(
        f"Finished ingestion: processed={result.processed}, failed={len(result.errors)}, "
        f"records={len(result.records)}, conflicts={len(result.conflicts)}"
    )
    return result


async def _ingest_async(
    *,
    source: DocumentSource,
    unit_of_work_factory: UnitOfWorkFactory,
    services: LlmServices | None,
    config: IngestConfig,
    clock: Clock,
    capture_method: CaptureMethod = CaptureMethod.FILE,
) -> IngestionResult:
    async with _open_services(services) as llm:
        orchestrator = IngestionOrchestrator(
            extractor=llm.extractor,
            merge_engine=_build_merge_engine(llm, config, clock),
            concurrency=config.concurrency,
            inter_call_delay=config.inter_call_delay_seconds,
            capture_method=capture_method,
        )
        with unit_of_work_factory() as uow:
            result = await orchestrator.ingest(source, uow.store)
            record_ingestion(uow.store, result, clock=clock)
            uow.commit()
    return result


def ingest_email(
    body: str,
    *,
    subject: str = "",
    received_at: datetime | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    services: LlmServices | None = None,
    ingest_config: IngestConfig | None = None,
    clock: Clock = utcnow,
) -> IngestionResult:
    """Run an already-parsed email body through the document ingestion path.

    The email becomes a single in-memory document named after its subject, and
    every history entry it produces is tagged as captured by email.
    """

    text = body.strip()
    if not text:
        raise ValueError("Email body must not be blank")

    config = ingest_config or get_ingest_config()
    effective_uow = unit_of_work_factory or partial(build_store_unit_of_work, clock=clock)
    name = email_document_name(subject, received_at or clock())
    result = asyncio.run(
        _ingest_async(
            source=InMemoryDocumentSource.from_mapping({name: text}),
            unit_of_work_factory=effective_uow,
            services=services,
            config=config,
            clock=clock,
            capture_method=CaptureMethod.EMAIL,
        )
    )
    log.info(
        "Email %s ingested: records=%d, conflicts=%d",
        name,
        len(result.records),
        len(result.conflicts),
    )
    return result


def email_document_name(subject: str, received_at: datetime) -> str:
    title = subject.strip()
    if title:
        return f"{title}.txt"
    return f"email-{received_at:%Y%m%dT%H%M%S}.txt"


def quick_update(
    text: str,
    *,
    capture_method: CaptureMethod = CaptureMethod.QUICK_CAPTURE,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    services: LlmServices | None = None,
    ingest_config: IngestConfig | None = None,
    clock: Clock = utcnow,
) -> QuickUpdateResult:
    """Apply one short note to the store; persisted before this returns."""

    config = ingest_config or get_ingest_config()
    effective_uow = unit_of_work_factory or partial(build_store_unit_of_work, clock=clock)
    result = asyncio.run(
        _quick_update_async(
            text,
            capture_method=capture_method,
            unit_of_work_factory=effective_uow,
            services=services,
            config=config,
            clock=clock,
        )
    )
    log.info(
        "Quick update finished: projects=%s, conflicts=%d",
        ", ".join(result.projects_updated),
        len(result.conflicts),
    )
    return result


async def _quick_update_async(
    text: str,
    *,
    capture_method: CaptureMethod,
    unit_of_work_factory: UnitOfWorkFactory,
    services: LlmServices | None,
    config: IngestConfig,
    clock: Clock,
) -> QuickUpdateResult:
    async with _open_services(services) as llm:
        handler = QuickUpdateHandler(
            extractor=llm.quick_update_extractor,
            merge_engine=_build_merge_engine(llm, config, clock),
        )
        with unit_of_work_factory() as uow:
            return await handler.handle(uow, text, capture_method)


def compute_quality_score(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    persist: bool = False,
    clock: Clock = utcnow,
) -> int:
    """Recompute the store quality score, optionally saving it into the metadata."""

    effective_uow = unit_of_work_factory or partial(build_store_unit_of_work, clock=clock)
    with effective_uow() as uow:
        score = quality_score(uow.store, clock=clock)
        if persist:
            uow.store.metadata.quality_score = score
            uow.commit()
    return score


def list_conflicts(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    project_name: str | None = None,
    include_resolved: bool = False,
) -> list[ConflictAlert]:
    """Return stored conflict alerts, newest first."""

    effective_uow = unit_of_work_factory or build_store_unit_of_work
    with effective_uow() as uow:
        alerts = [
            alert
            for alert in uow.store.conflicts
            if (include_resolved or not alert.resolved)
            and (
                project_name is None
                or project_name.casefold() in alert.project_name.casefold()
            )
        ]
    return sorted(alerts, key=lambda alert: alert.timestamp, reverse=True)


def ask_portfolio(
    question: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    services: LlmServices | None = None,
) -> str:
    """Answer a free-form question from the stored projects; the store is not modified."""

    text = question.strip()
    if not text:
        raise ValueError("Question must not be blank")

    effective_uow = unit_of_work_factory or build_store_unit_of_work
    with effective_uow() as uow:
        projects = list(uow.store.projects)
    log.info("Answering question over %d project(s)", len(projects))
    return asyncio.run(_ask_async(text, projects=projects, services=services))


async def _ask_async(
    question: str,
    *,
    projects: list[ProjectRecord],
    services: LlmServices | None,
) -> str:
    async with _open_services(services) as llm:
        return await llm.advisor.answer(question, projects=projects)
