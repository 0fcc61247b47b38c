"""Pydantic models describing Messages API payloads and model output."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from logging import getLogger
from typing import Annotated

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from nexus.domain.model import ProjectStatus, Sentiment

log = getLogger(__name__)


def _coerce_score(value: object) -> object:
    if isinstance(value, float):
        return round(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or stripped.casefold() == "null":
            return None
        try:
            return round(float(stripped))
        except ValueError:
            return value
    return value


def _lenient_choice(enum_type: type[StrEnum]) -> Callable[[object], object]:
    def coerce(value: object) -> object:
        if value is None or isinstance(value, enum_type):
            return value
        text = str(value).strip().casefold()
        if not text:
            return None
        try:
            return enum_type(text)
        except ValueError:
            log.warning("Ignoring unknown %s value %r", enum_type.__name__, value)
            return None

    return coerce


def _listify(value: object) -> object:
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


Score = Annotated[int | None, BeforeValidator(_coerce_score)]
SentimentValue = Annotated[Sentiment | None, BeforeValidator(_lenient_choice(Sentiment))]
StatusValue = Annotated[ProjectStatus | None, BeforeValidator(_lenient_choice(ProjectStatus))]
TextList = Annotated[list[str] | None, BeforeValidator(_listify)]


class AnthropicBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ContentBlock(AnthropicBaseModel):
    type: str
    text: str | None = None


class MessagesResponse(AnthropicBaseModel):
    id: str | None = None
    model: str | None = None
    content: list[ContentBlock] = Field(default_factory=list[ContentBlock])
    stop_reason: str | None = None

    def first_text(self) -> str | None:
        for block in self.content:
            if block.type == "text" and block.text is not None:
                return block.text
        return None


class ErrorDetail(AnthropicBaseModel):
    type: str
    message: str


class ErrorResponse(AnthropicBaseModel):
    type: str = "error"
    error: ErrorDetail


class ExtractedProjectPayload(AnthropicBaseModel):
    """One project as returned by the extraction prompt.

    Both the dashboard-style keys (``ceoPriority``) and the plain field names
    (``priority``) are accepted.
    """

    name: str = ""
    description: str | None = None
    priority: Score = Field(default=None, validation_alias=AliasChoices("ceoPriority", "priority"))
    urgency: Score = Field(
        default=None, validation_alias=AliasChoices("stakeholderUrgency", "urgency")
    )
    sentiment: SentimentValue = Field(
        default=None, validation_alias=AliasChoices("stakeholderSentiment", "sentiment")
    )
    status: StatusValue = None
    deadline: str | None = None
    notes: str | None = None
    risks: TextList = Field(default=None, validation_alias=AliasChoices("keyRisks", "risks"))
    dependencies: TextList = None


class ExtractionPayload(AnthropicBaseModel):
    projects: list[ExtractedProjectPayload]


class QuickUpdatePayload(AnthropicBaseModel):
    project_name: str = Field(validation_alias=AliasChoices("projectName", "project_name", "name"))
    priority: Score = Field(default=None, validation_alias=AliasChoices("ceoPriority", "priority"))
    urgency: Score = Field(
        default=None, validation_alias=AliasChoices("stakeholderUrgency", "urgency")
    )
    sentiment: SentimentValue = Field(
        default=None, validation_alias=AliasChoices("stakeholderSentiment", "sentiment")
    )
    status: StatusValue = None
    description: str | None = None
    change_summary: str | None = Field(
        default=None, validation_alias=AliasChoices("changeSummary", "change_summary")
    )
