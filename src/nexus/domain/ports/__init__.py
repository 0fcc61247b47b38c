"""Domain port definitions for adapters."""

from __future__ import annotations

from .advice import PortfolioAdvisor
from .documents import DocumentMetadata, DocumentSource
from .explanation import NO_CONFLICT_RATIONALE, ChangeSummarizer, ConflictExplainer
from .extraction import ProjectExtractor, QuickUpdateExtractor
from .persistence import LoadedStore, StoreRepository
from .unit_of_work import StoreUnitOfWork

__all__ = [
    "NO_CONFLICT_RATIONALE",
    "ChangeSummarizer",
    "ConflictExplainer",
    "DocumentMetadata",
    "DocumentSource",
    "LoadedStore",
    "PortfolioAdvisor",
    "ProjectExtractor",
    "QuickUpdateExtractor",
    "StoreRepository",
    "StoreUnitOfWork",
]
