"""Translate between the persisted document and domain objects."""

from __future__ import annotations

from nexus.domain.model import (
    ConflictAlert,
    HistoryEntry,
    ProjectRecord,
    Store,
    StoreMetadata,
)

from .schema import (
    ConflictAlertPayload,
    ProjectPayload,
    StoreDocument,
)


def document_to_store(document: StoreDocument) -> Store:
    return Store(
        version=document.version,
        projects=[_project_from_payload(project) for project in document.projects],
        conflicts=[_conflict_from_payload(conflict) for conflict in document.conflicts],
        metadata=StoreMetadata(
            last_ingestion=document.metadata.last_ingestion,
            total_files_processed=document.metadata.total_files_processed,
            quality_score=document.metadata.quality_score,
        ),
    )


def store_to_document(store: Store) -> StoreDocument:
    """Build a validated document; raises ``pydantic.ValidationError`` on bad values."""

    return StoreDocument.model_validate(
        {
            "version": store.version,
            "projects": [_project_to_payload(project) for project in store.projects],
            "conflicts": [_conflict_to_payload(conflict) for conflict in store.conflicts],
            "metadata": {
                "last_ingestion": store.metadata.last_ingestion,
                "total_files_processed": store.metadata.total_files_processed,
                "quality_score": store.metadata.quality_score,
            },
        }
    )


def _project_from_payload(payload: ProjectPayload) -> ProjectRecord:
    return ProjectRecord(
        id=payload.id,
        name=payload.name,
        description=payload.description,
        priority=payload.priority,
        urgency=payload.urgency,
        sentiment=payload.sentiment,
        status=payload.status,
        deadline=payload.deadline,
        notes=payload.notes,
        risks=list(payload.risks),
        dependencies=list(payload.dependencies),
        history=tuple(
            HistoryEntry(
                timestamp=entry.timestamp,
                change=entry.change,
                capture_method=entry.capture_method,
            )
            for entry in payload.history
        ),
        source_file=payload.source_file,
        last_updated=payload.last_updated,
    )


def _project_to_payload(project: ProjectRecord) -> dict[str, object]:
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "priority": project.priority,
        "urgency": project.urgency,
        "sentiment": project.sentiment,
        "status": project.status,
        "deadline": project.deadline,
        "notes": project.notes,
        "risks": list(project.risks),
        "dependencies": list(project.dependencies),
        "history": [
            {
                "timestamp": entry.timestamp,
                "change": entry.change,
                "capture_method": entry.capture_method,
            }
            for entry in project.history
        ],
        "source_file": project.source_file,
        "last_updated": project.last_updated,
    }


def _conflict_from_payload(payload: ConflictAlertPayload) -> ConflictAlert:
    return ConflictAlert(
        id=payload.id,
        project_id=payload.project_id,
        project_name=payload.project_name,
        timestamp=payload.timestamp,
        conflict_type=payload.conflict_type,
        previous_value=payload.previous_value,
        new_value=payload.new_value,
        analysis=payload.analysis,
        resolved=payload.resolved,
    )


def _conflict_to_payload(conflict: ConflictAlert) -> dict[str, object]:
    return {
        "id": conflict.id,
        "project_id": conflict.project_id,
        "project_name": conflict.project_name,
        "timestamp": conflict.timestamp,
        "conflict_type": conflict.conflict_type,
        "previous_value": conflict.previous_value,
        "new_value": conflict.new_value,
        "analysis": conflict.analysis,
        "resolved": conflict.resolved,
    }


__all__ = ["document_to_store", "store_to_document"]
