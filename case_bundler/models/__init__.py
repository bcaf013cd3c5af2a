"""
Case Data Model

Read-only inputs of the export pipeline (documents, extractions, search
results) and the ephemeral records it builds (tasks, batches, manifest entries).
"""

from .case_types import (
    Batch,
    CaseCollection,
    DocCategory,
    ExportTask,
    Extraction,
    ManifestEntry,
    Person,
    SearchResult,
    SourceDocument,
    SourceLocation,
    split_articles,
)

__all__ = [
    'Batch',
    'CaseCollection',
    'DocCategory',
    'ExportTask',
    'Extraction',
    'ManifestEntry',
    'Person',
    'SearchResult',
    'SourceDocument',
    'SourceLocation',
    'split_articles',
]
