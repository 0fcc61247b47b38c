from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from nexus.adapters.anthropic import (
    AnthropicAPIError,
    AnthropicMessagesClient,
    LlmChangeSummarizer,
    LlmConflictExplainer,
    LlmPortfolioAdvisor,
    LlmProjectExtractor,
    extract_json_text,
    parse_extraction,
    parse_quick_update,
)
from nexus.config import LlmConfig, ResilienceConfig
from nexus.domain.errors import AdviceError, ExplanationError, ExtractionError, SummaryError
from nexus.domain.model import (
    CaptureMethod,
    ConflictType,
    HistoryEntry,
    ProjectCandidate,
    ProjectStatus,
    Sentiment,
)
from nexus.domain.ports.explanation import NO_CONFLICT_RATIONALE
from tests.helpers.fakes import make_record

Handler = Callable[[httpx.Request], httpx.Response]

EXTRACTION_REPLY = """```json
{
  "projects": [
    {
      "name": "Project Phoenix",
      "description": "Billing replatform",
      "ceoPriority": 8.6,
      "stakeholderUrgency": "6",
      "stakeholderSentiment": "Furious",
      "status": "active",
      "deadline": "2025-06-30",
      "notes": "Board wants a date",
      "keyRisks": ["\\"We will lose the renewal\\""],
      "dependencies": []
    },
    {
      "name": "Atlas",
      "stakeholderSentiment": "ecstatic",
      "deadline": null
    }
  ]
}
```"""


def _config() -> LlmConfig:
    return LlmConfig(
        api_key="test-key",
        model="claude-test",
        resilience=ResilienceConfig(name="anthropic", base_url="https://anthropic.test"),
    )


def _text_reply(text: str) -> httpx.Response:
    return httpx.Response(
        status_code=200,
        json={
            "id": "msg_1",
            "model": "claude-test",
            "stop_reason": "end_turn",
            "content": [{"type": "text", "text": text}],
        },
    )


def _client(handler: Handler) -> AnthropicMessagesClient:
    return AnthropicMessagesClient(_config(), transport=httpx.MockTransport(handler))


def test_extractor_posts_messages_request_and_parses_projects() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _text_reply(EXTRACTION_REPLY)

    async def run() -> list[ProjectCandidate]:
        async with _client(handler) as client:
            return await LlmProjectExtractor(client).extract("Board notes", label="board.md")

    candidates = asyncio.run(run())

    request = seen[0]
    assert request.method == "POST"
    assert request.url == "https://anthropic.test/v1/messages"
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(request.content)
    assert body["model"] == "claude-test"
    assert body["max_tokens"] == 8192
    assert "extracting project information" in body["system"]
    assert "File: board.md" in body["messages"][0]["content"]

    phoenix, atlas = candidates
    assert phoenix.name == "Project Phoenix"
    assert phoenix.priority == 9
    assert phoenix.urgency == 6
    assert phoenix.sentiment is Sentiment.FURIOUS
    assert phoenix.status is ProjectStatus.ACTIVE
    assert phoenix.deadline == datetime(2025, 6, 30, tzinfo=UTC)
    assert phoenix.risks == ['"We will lose the renewal"']
    assert atlas.sentiment is None
    assert atlas.deadline is None
    assert atlas.priority is None


def test_extractor_wraps_api_errors_with_label() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code=429,
            json={
                "type": "error",
                "error": {"type": "rate_limit_error", "message": "Too many requests"},
            },
        )

    async def run() -> None:
        async with _client(handler) as client:
            await LlmProjectExtractor(client).extract("text", label="standup.txt")

    with pytest.raises(ExtractionError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.label == "standup.txt"
    assert str(excinfo.value) == "standup.txt: Too many requests"
    cause = excinfo.value.__cause__
    assert isinstance(cause, AnthropicAPIError)
    assert cause.status_code == 429
    assert cause.error_type == "rate_limit_error"


def test_extractor_rejects_malformed_output() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return _text_reply("Sorry, I could not find any projects.")

    async def run() -> None:
        async with _client(handler) as client:
            await LlmProjectExtractor(client).extract("text", label="memo.md")

    with pytest.raises(ExtractionError, match="memo.md"):
        asyncio.run(run())


def test_client_requires_text_content() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"content": []})

    async def run() -> str:
        async with _client(handler) as client:
            return await client.complete("hello", max_tokens=10)

    with pytest.raises(AnthropicAPIError, match="no text content"):
        asyncio.run(run())


def test_client_wraps_transport_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run() -> str:
        async with _client(handler) as client:
            return await client.complete("hello", max_tokens=10)

    with pytest.raises(AnthropicAPIError, match="connection refused"):
        asyncio.run(run())


def test_quick_update_prompt_lists_existing_projects() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return _text_reply(
            '{"projectName": "Phoenix", "ceoPriority": 9, "stakeholderUrgency": null, '
            '"changeSummary": "CEO elevated priority"}'
        )

    async def run() -> object:
        async with _client(handler) as client:
            return await LlmProjectExtractor(client).extract_quick_update(
                "Phoenix is top priority", existing_names=["Project Phoenix", "Atlas"]
            )

    update = asyncio.run(run())

    body = seen[0]
    assert body["max_tokens"] == 2048
    messages = body["messages"]
    assert isinstance(messages, list)
    assert "Existing projects: Project Phoenix, Atlas" in messages[0]["content"]
    assert update == parse_quick_update(
        '{"projectName": "Phoenix", "ceoPriority": 9, "changeSummary": "CEO elevated priority"}'
    )


def test_explainer_returns_stripped_sentence() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return _text_reply("  Reverses last hour's escalation.\n")

    existing = make_record(priority=8, history_age=timedelta(minutes=5), change="priority up")

    async def run() -> str:
        async with _client(handler) as client:
            return await LlmConflictExplainer(client).explain(
                existing=existing,
                candidate=ProjectCandidate(name="Phoenix", priority=3),
                conflict_type=ConflictType.PRIORITY_SHIFT,
                recent_history=existing.history,
            )

    assert asyncio.run(run()) == "Reverses last hour's escalation."
    body = seen[0]
    assert body["max_tokens"] == 512
    assert "system" not in body
    messages = body["messages"]
    assert isinstance(messages, list)
    prompt = messages[0]["content"]
    assert "Conflict Type: priority_shift" in prompt
    assert "priority up" in prompt
    assert '"priority": 3' in prompt


def test_explainer_blank_answer_means_no_conflict() -> None:
    async def run() -> str:
        async with _client(lambda _: _text_reply("   ")) as client:
            return await LlmConflictExplainer(client).explain(
                existing=make_record(),
                candidate=ProjectCandidate(name="Phoenix"),
                conflict_type=ConflictType.URGENCY_SPIKE,
                recent_history=(),
            )

    assert asyncio.run(run()) == NO_CONFLICT_RATIONALE


def test_explainer_and_summarizer_wrap_failures() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=500, text="upstream exploded")

    async def explain() -> str:
        async with _client(handler) as client:
            return await LlmConflictExplainer(client).explain(
                existing=make_record(),
                candidate=ProjectCandidate(name="Phoenix"),
                conflict_type=ConflictType.URGENCY_SPIKE,
                recent_history=(),
            )

    async def summarize() -> str:
        async with _client(handler) as client:
            return await LlmChangeSummarizer(client).summarize(
                existing=make_record(),
                candidate=ProjectCandidate(name="Phoenix", priority=2),
                changes=["priority decreased from 5 to 2"],
            )

    with pytest.raises(ExplanationError, match="HTTP 500"):
        asyncio.run(explain())
    with pytest.raises(SummaryError, match="HTTP 500"):
        asyncio.run(summarize())


def test_summarizer_prompt_includes_changes_and_context() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content)["messages"][0]["content"])
        return _text_reply("Stakeholder escalated urgency after a missed deadline.")

    async def run() -> str:
        async with _client(handler) as client:
            return await LlmChangeSummarizer(client).summarize(
                existing=make_record(),
                candidate=ProjectCandidate(name="Phoenix", urgency=9, notes="Missed deadline"),
                changes=["urgency increased from 5 to 9"],
            )

    assert asyncio.run(run()) == "Stakeholder escalated urgency after a missed deadline."
    assert "Changes: urgency increased from 5 to 9" in seen[0]
    assert "New context: Missed deadline" in seen[0]


def test_extract_json_text_strips_fences_and_prose() -> None:
    assert extract_json_text('Here you go:\n```json\n{"projects": []}\n```\nThanks!') == (
        '{"projects": []}'
    )
    assert extract_json_text("no json here") == "no json here"


def test_parse_extraction_accepts_plain_field_names() -> None:
    candidates = parse_extraction(
        '{"projects": [{"name": "Atlas", "priority": 3, "urgency": 4, "sentiment": "calm", '
        '"risks": "single risk"}]}',
        label="a.md",
    )

    assert candidates == [
        ProjectCandidate(
            name="Atlas", priority=3, urgency=4, sentiment=Sentiment.CALM, risks=["single risk"]
        )
    ]


def test_parse_extraction_requires_projects_list() -> None:
    with pytest.raises(ExtractionError, match="a.md"):
        parse_extraction('{"items": []}', label="a.md")


def test_parse_quick_update_requires_project_name() -> None:
    with pytest.raises(ExtractionError):
        parse_quick_update('{"ceoPriority": 4}')


def test_advisor_sends_portfolio_snapshot_with_recent_history() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _text_reply("  Phoenix is the top risk.\n\n- Priority 9/10\n")

    record = make_record("Project Phoenix", notes="x" * 500, source_file="weekly.md")
    for index in range(5):
        record = record.with_history_entry(
            HistoryEntry(
                timestamp=datetime(2025, 3, 14, index, tzinfo=UTC),
                change=f"change {index}",
                capture_method=CaptureMethod.FILE,
            )
        )

    async def run() -> str:
        async with _client(handler) as client:
            return await LlmPortfolioAdvisor(client).answer(
                "What is riskiest?", projects=[record]
            )

    answer = asyncio.run(run())

    assert answer == "Phoenix is the top risk.\n\n- Priority 9/10"
    body = json.loads(seen[0].content)
    assert body["max_tokens"] == 4096
    assert "INVERTED PYRAMID" in body["system"]
    prompt = body["messages"][0]["content"]
    assert "Current portfolio (1 projects):" in prompt
    assert "Question: What is riskiest?" in prompt
    snapshot_text = prompt.split("\n", 1)[1].split("\n\nQuestion:", 1)[0]
    (snapshot,) = json.loads(snapshot_text)
    assert [entry["change"] for entry in snapshot["recentHistory"]] == [
        "change 2",
        "change 3",
        "change 4",
    ]
    assert len(snapshot["notes"]) == 300
    assert snapshot["sourceFile"] == "weekly.md"


def test_advisor_wraps_api_errors() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code=529,
            json={"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
        )

    async def run() -> str:
        async with _client(handler) as client:
            return await LlmPortfolioAdvisor(client).answer("Anything?", projects=[])

    with pytest.raises(AdviceError, match="Overloaded"):
        asyncio.run(run())
