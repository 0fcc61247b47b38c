from __future__ import annotations

import pytest

from nexus.domain.conflicts import ConflictDetector
from nexus.domain.merge import MergeEngine
from tests.helpers.fakes import FakeExplainer, FakeSummarizer, FixedClock


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path_factory: pytest.TempPathFactory,
) -> None:
    for name in (
        "NEXUS_LLM_MODEL",
        "NEXUS_LLM_BASE_URL",
        "NEXUS_LLM_MAX_RETRIES",
        "NEXUS_STATE_PATH",
        "NEXUS_INGEST_DIR",
        "NEXUS_INGEST_DELAY_SECONDS",
        "NEXUS_INGEST_CONCURRENCY",
        "NEXUS_RECORD_UNCHANGED_UPDATES",
        "NEXUS_WRITE_POLICY",
        "NEXUS_NAME_MATCHING",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NEXUS_DATA_DIR", str(tmp_path_factory.mktemp("nexus-data")))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def explainer() -> FakeExplainer:
    return FakeExplainer()


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def detector(explainer: FakeExplainer, clock: FixedClock) -> ConflictDetector:
    return ConflictDetector(explainer=explainer, clock=clock)


@pytest.fixture
def merge_engine(
    detector: ConflictDetector,
    summarizer: FakeSummarizer,
    clock: FixedClock,
) -> MergeEngine:
    return MergeEngine(detector=detector, summarizer=summarizer, clock=clock)
