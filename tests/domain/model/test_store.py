from __future__ import annotations

from datetime import timedelta

from nexus.domain.model import (
    SEVERITY_RANK,
    CaptureMethod,
    ConflictAlert,
    ConflictType,
    HistoryEntry,
    ProjectCandidate,
    QuickUpdateCandidate,
    Sentiment,
    Store,
)
from tests.helpers.fakes import FIXED_NOW, make_record


def test_put_record_replaces_by_id_or_appends() -> None:
    atlas = make_record("Atlas")
    store = Store(projects=[atlas])

    renamed = make_record("Atlas v2", id=atlas.id)
    store.put_record(renamed)
    hermes = make_record("Hermes")
    store.put_record(hermes)

    assert store.projects == [renamed, hermes]
    assert store.project_names == ["Atlas v2", "Hermes"]


def test_add_conflicts_appends() -> None:
    record = make_record()
    store = Store()
    alert = ConflictAlert(
        project_id=record.id,
        project_name=record.name,
        timestamp=FIXED_NOW,
        conflict_type=ConflictType.URGENCY_SPIKE,
        previous_value="2",
        new_value="9 (+7)",
        analysis="No conflict detected.",
    )

    store.add_conflicts([alert])

    assert store.conflicts == [alert]
    assert alert.resolved is False


def test_with_history_entry_returns_new_record() -> None:
    record = make_record(history_age=timedelta(hours=1))
    entry = HistoryEntry(timestamp=FIXED_NOW, change="noted", capture_method=CaptureMethod.VOICE)

    updated = record.with_history_entry(entry)

    assert len(record.history) == 1
    assert updated.history == (*record.history, entry)
    assert updated.id == record.id


def test_severity_rank_is_ordered() -> None:
    ranks = [SEVERITY_RANK[sentiment] for sentiment in Sentiment]

    assert ranks == sorted(ranks)
    assert Sentiment.CALM.severity < Sentiment.FURIOUS.severity


def test_present_fields_skips_absent_values_and_copies_lists() -> None:
    risks = ["budget"]
    candidate = ProjectCandidate(name="Atlas", priority=3, risks=risks)

    present = candidate.present_fields()

    assert present == {"priority": 3, "risks": ["budget"]}
    assert present["risks"] is not risks


def test_quick_update_as_project_candidate() -> None:
    update = QuickUpdateCandidate(
        project_name="Atlas", urgency=7, description="ignored", change_summary="ignored"
    )

    candidate = update.as_project_candidate()

    assert candidate.name == "Atlas"
    assert candidate.present_fields() == {"urgency": 7}
