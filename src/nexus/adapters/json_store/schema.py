"""Pydantic models describing the persisted store document (schema ``1.0``)."""

from __future__ import annotations

from typing import Annotated, Literal
from uuid import UUID  # noqa: TC003

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from nexus.domain.model import (
    SCHEMA_VERSION,
    SCORE_MAX,
    SCORE_MIN,
    CaptureMethod,
    ConflictType,
    ProjectStatus,
    Sentiment,
)

Score = Annotated[int, Field(ge=SCORE_MIN, le=SCORE_MAX)]


class StoreBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class HistoryEntryPayload(StoreBaseModel):
    timestamp: AwareDatetime
    change: str
    capture_method: CaptureMethod


class ProjectPayload(StoreBaseModel):
    id: UUID
    name: str = Field(min_length=1)
    description: str
    priority: Score
    urgency: Score
    sentiment: Sentiment
    status: ProjectStatus
    deadline: AwareDatetime | None = None
    notes: str
    risks: list[str]
    dependencies: list[str]
    history: list[HistoryEntryPayload]
    source_file: str | None = None
    last_updated: AwareDatetime


class ConflictAlertPayload(StoreBaseModel):
    id: UUID
    project_id: UUID
    project_name: str
    timestamp: AwareDatetime
    conflict_type: ConflictType
    previous_value: str
    new_value: str
    analysis: str
    resolved: bool = False


class MetadataPayload(StoreBaseModel):
    last_ingestion: AwareDatetime | None = None
    total_files_processed: int = Field(ge=0)
    quality_score: int = Field(ge=0, le=100)


class StoreDocument(StoreBaseModel):
    version: Literal["1.0"]
    projects: list[ProjectPayload]
    conflicts: list[ConflictAlertPayload]
    metadata: MetadataPayload

    @field_validator("projects")
    @classmethod
    def _unique_project_ids(cls, value: list[ProjectPayload]) -> list[ProjectPayload]:
        seen: set[UUID] = set()
        for project in value:
            if project.id in seen:
                raise ValueError(f"Duplicate project id: {project.id}")
            seen.add(project.id)
        return value


def empty_document() -> StoreDocument:
    return StoreDocument(
        version=SCHEMA_VERSION,
        projects=[],
        conflicts=[],
        metadata=MetadataPayload(total_files_processed=0, quality_score=100),
    )


__all__ = [
    "ConflictAlertPayload",
    "HistoryEntryPayload",
    "MetadataPayload",
    "ProjectPayload",
    "StoreDocument",
    "empty_document",
]
