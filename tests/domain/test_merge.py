from __future__ import annotations

import asyncio
from datetime import timedelta

from nexus.domain.conflicts import ConflictDetector
from nexus.domain.merge import (
    CREATED_DESCRIPTION,
    NO_CHANGES_DESCRIPTION,
    MergeEngine,
    UpsertOutcome,
    describe_changes,
)
from nexus.domain.model import (
    CaptureMethod,
    ConflictType,
    ProjectCandidate,
    ProjectStatus,
    Sentiment,
    Store,
)
from nexus.domain.resolution import ExactNameResolver
from tests.helpers.fakes import FIXED_NOW, FakeExplainer, FakeSummarizer, FixedClock, make_record


def _upsert(
    engine: MergeEngine,
    store: Store,
    candidate: ProjectCandidate,
    *,
    source_label: str | None = None,
) -> UpsertOutcome:
    return asyncio.run(engine.upsert(store, candidate, source_label=source_label))


def test_upsert_creates_record_with_defaults(merge_engine: MergeEngine) -> None:
    store = Store()

    outcome = _upsert(
        merge_engine,
        store,
        ProjectCandidate(name="Project Phoenix", sentiment=Sentiment.FURIOUS, urgency=8),
        source_label="board.md",
    )

    assert outcome.created is True
    assert outcome.conflicts == []
    record = outcome.record
    assert store.projects == [record]
    assert record.urgency == 8
    assert record.priority == 5
    assert record.status is ProjectStatus.ACTIVE
    assert record.description == ""
    assert record.risks == []
    assert record.source_file == "board.md"
    assert record.last_updated == FIXED_NOW
    assert [entry.change for entry in record.history] == [CREATED_DESCRIPTION]
    assert record.history[0].capture_method is CaptureMethod.FILE


def test_upserting_same_name_twice_mutates_single_record(merge_engine: MergeEngine) -> None:
    store = Store()

    first = _upsert(merge_engine, store, ProjectCandidate(name="Atlas", priority=4))
    second = _upsert(merge_engine, store, ProjectCandidate(name="Atlas", priority=7))

    assert len(store.projects) == 1
    assert second.created is False
    assert second.record.id == first.record.id
    assert store.projects[0].priority == 7
    assert len(store.projects[0].history) == 2


def test_update_overwrites_present_fields_only(merge_engine: MergeEngine) -> None:
    existing = make_record(
        "Project Phoenix",
        description="Replatform billing",
        notes="old notes",
        risks=["vendor lock-in"],
        priority=6,
    )
    store = Store(projects=[existing])

    outcome = _upsert(
        merge_engine,
        store,
        ProjectCandidate(name="phoenix", urgency=7, risks=["budget overrun"]),
        source_label="standup.txt",
    )

    record = outcome.record
    assert record.id == existing.id
    assert record.name == "Project Phoenix"
    assert record.description == "Replatform billing"
    assert record.notes == "old notes"
    assert record.priority == 6
    assert record.urgency == 7
    assert record.risks == ["budget overrun"]
    assert record.source_file == "standup.txt"
    assert store.projects == [record]


def test_update_appends_exactly_one_history_entry(
    merge_engine: MergeEngine, summarizer: FakeSummarizer
) -> None:
    existing = make_record(history_age=timedelta(days=3), priority=5)
    store = Store(projects=[existing])
    before = existing.history

    outcome = _upsert(merge_engine, store, ProjectCandidate(name="Phoenix", priority=8))

    after = outcome.record.history
    assert len(after) == len(before) + 1
    assert after[: len(before)] == before
    assert after[-1].change == "priority increased from 5 to 8"
    assert after[-1].timestamp == FIXED_NOW
    assert summarizer.calls == [("priority increased from 5 to 8",)]


def test_unchanged_update_records_placeholder_entry(
    merge_engine: MergeEngine, summarizer: FakeSummarizer
) -> None:
    store = Store(projects=[make_record(priority=5)])

    outcome = _upsert(merge_engine, store, ProjectCandidate(name="Phoenix", priority=5))

    assert [entry.change for entry in outcome.record.history] == [NO_CHANGES_DESCRIPTION]
    assert summarizer.calls == []


def test_unchanged_update_can_skip_history(
    detector: ConflictDetector, summarizer: FakeSummarizer, clock: FixedClock
) -> None:
    engine = MergeEngine(
        detector=detector,
        summarizer=summarizer,
        record_unchanged_updates=False,
        clock=clock,
    )
    store = Store(projects=[make_record(priority=5)])

    outcome = _upsert(engine, store, ProjectCandidate(name="Phoenix", notes="fresh context"))

    assert outcome.record.history == ()
    assert outcome.record.notes == "fresh context"


def test_summary_failure_falls_back_to_change_descriptions(
    detector: ConflictDetector, clock: FixedClock
) -> None:
    engine = MergeEngine(detector=detector, summarizer=FakeSummarizer(fail=True), clock=clock)
    store = Store(projects=[make_record(priority=5, sentiment=Sentiment.CONCERNED)])

    outcome = _upsert(
        engine,
        store,
        ProjectCandidate(name="Phoenix", priority=3, sentiment=Sentiment.CALM),
    )

    assert outcome.record.history[-1].change == (
        "Priority decreased from 5 to 3; sentiment eased from concerned to calm"
    )


def test_upsert_appends_conflicts_to_store(
    merge_engine: MergeEngine, explainer: FakeExplainer
) -> None:
    existing = make_record(urgency=2, history_age=timedelta(minutes=15))
    store = Store(projects=[existing])

    outcome = _upsert(merge_engine, store, ProjectCandidate(name="Phoenix", urgency=9))

    assert [alert.conflict_type for alert in outcome.conflicts] == [ConflictType.URGENCY_SPIKE]
    assert store.conflicts == outcome.conflicts
    assert explainer.calls == [ConflictType.URGENCY_SPIKE]


def test_conflicts_compare_against_pre_merge_record(merge_engine: MergeEngine) -> None:
    existing = make_record(urgency=2, history_age=timedelta(minutes=15))
    store = Store(projects=[existing])

    outcome = _upsert(merge_engine, store, ProjectCandidate(name="Phoenix", urgency=9))

    assert outcome.conflicts[0].previous_value == "2"
    assert outcome.record.urgency == 9


def test_furious_floor_holds_after_merge(merge_engine: MergeEngine) -> None:
    store = Store(projects=[make_record(sentiment=Sentiment.FURIOUS, urgency=9)])

    outcome = _upsert(merge_engine, store, ProjectCandidate(name="Phoenix", urgency=2))

    assert outcome.record.sentiment is Sentiment.FURIOUS
    assert outcome.record.urgency == 8


def test_resolver_is_pluggable(
    detector: ConflictDetector, summarizer: FakeSummarizer, clock: FixedClock
) -> None:
    engine = MergeEngine(
        detector=detector,
        summarizer=summarizer,
        resolver=ExactNameResolver(),
        clock=clock,
    )
    store = Store(projects=[make_record("Project Phoenix")])

    outcome = _upsert(engine, store, ProjectCandidate(name="Phoenix"))

    assert outcome.created is True
    assert len(store.projects) == 2


def test_describe_changes_covers_tracked_fields() -> None:
    existing = make_record(priority=5, urgency=5)
    candidate = ProjectCandidate(
        name="Phoenix",
        priority=8,
        urgency=2,
        sentiment=Sentiment.FRUSTRATED,
        status=ProjectStatus.BLOCKED,
        notes="ignored for change descriptions",
    )

    assert describe_changes(existing, candidate) == [
        "priority increased from 5 to 8",
        "urgency decreased from 5 to 2",
        "sentiment escalated from calm to frustrated",
        "status changed from active to blocked",
    ]
