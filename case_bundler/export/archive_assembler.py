"""
Archive Assembler - packages one batch of export tasks.

For one batch the assembler:
1. Adds the report documents at the archive root (first batch only).
2. Groups the batch's tasks by source PDF so each source is parsed once.
3. Slices every task and writes the same bytes under every folder the
   naming rules assign (physical duplication, no links).
4. Collects one manifest entry per fact of every sliced extraction.

Failures never abort the batch:
- Source unavailable: all tasks of that source are skipped and logged.
- Empty page range: that task is skipped and logged.
- Report failure: the report is omitted and the failure recorded.

The archive is stored uncompressed (ZIP_STORED); the PDFs inside are
already compressed and store-only keeps packaging fast.

Usage:
    assembler = ArchiveAssembler(
        paths_for=full_export_paths,
        report_jobs=[(INDEX_DOCX_NAME, lambda: generate_word_report(case))],
    )
    assembled = assembler.assemble(batch)
    assembled.archive.add(assembled.manifest_name, manifest_bytes)
    data = assembled.archive.to_bytes()
"""

from __future__ import annotations

import gc
import io
import time
import zipfile
from dataclasses import dataclass, field
from typing import Callable

from case_bundler.config import FOLDER_SEARCH_DOCUMENTS, MANIFEST_NAME_TEMPLATE, SOURCE_PAUSE_SECONDS
from case_bundler.errors import SourceUnavailableError
from case_bundler.logging_config import Timer, debug_log, error, warning
from case_bundler.models import (
    Batch,
    ExportTask,
    Extraction,
    ManifestEntry,
    SearchResult,
    SourceDocument,
    SourceLocation,
)

from .naming import DerivedPaths, build_file_name, derive_export_paths
from .pdf_slicer import build_metadata, open_source, slice_pages

PathStrategy = Callable[[Extraction | SearchResult, SourceLocation], DerivedPaths]
ReportJob = tuple[str, Callable[[], bytes]]


def full_export_paths(item: Extraction | SearchResult, location: SourceLocation) -> DerivedPaths:
    """Four-taxonomy placement (location, doc type, facts, people)."""
    return derive_export_paths(item, location)


def search_export_paths(item: Extraction | SearchResult, location: SourceLocation) -> DerivedPaths:
    """Single combined folder for filtered exports."""
    return DerivedPaths(file_name=build_file_name(item, location), folder_paths=(FOLDER_SEARCH_DOCUMENTS,))


def release_memory(pause_seconds: float):
    """Collect garbage and pause briefly so freed PDF buffers are reclaimed."""
    gc.collect()
    if pause_seconds > 0:
        time.sleep(pause_seconds)


class ArchiveBuilder:
    """
    Staged ZIP archive.

    Entries are held until to_bytes(). Adding a path that is already
    staged replaces the earlier entry (last write wins).
    """

    def __init__(self):
        self._entries: dict[str, bytes] = {}

    def add(self, path: str, data: bytes):
        if path in self._entries:
            warning(f"[ASSEMBLER] Replacing duplicate archive entry {path}")
        self._entries[path] = data

    def names(self) -> list[str]:
        return list(self._entries)

    def get(self, path: str) -> bytes | None:
        return self._entries.get(path)

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def to_bytes(self) -> bytes:
        """Serialize all staged entries as a store-only ZIP archive."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_STORED) as zf:
            for path, data in self._entries.items():
                zf.writestr(path, data)
        return buffer.getvalue()


@dataclass
class SkippedTask:
    """A task that produced no output, and why."""
    file_id: str
    display_number: str
    page_range: str
    reason: str


@dataclass
class AssembledBatch:
    """
    Output of assembling one batch.

    Attributes:
        batch: The batch that was assembled.
        archive: Staged archive (reports + sliced PDFs).
        manifest_entries: One entry per fact of every sliced extraction.
        files_written: Number of extractions sliced and written.
        skipped: Tasks skipped with their reasons.
        report_failures: Archive names of reports that could not be built.
    """
    batch: Batch
    archive: ArchiveBuilder
    manifest_entries: list[ManifestEntry] = field(default_factory=list)
    files_written: int = 0
    skipped: list[SkippedTask] = field(default_factory=list)
    report_failures: list[str] = field(default_factory=list)

    @property
    def manifest_name(self) -> str:
        return MANIFEST_NAME_TEMPLATE.format(number=self.batch.number)


def manifest_entries_for(
    item: Extraction | SearchResult,
    location: SourceLocation,
    file_name: str,
) -> list[ManifestEntry]:
    """One manifest entry per fact, mirroring the per-fact folder layout."""
    return [
        ManifestEntry(
            display_number=item.display_number,
            articles=item.articles or "",
            doc_type=item.doc_type,
            summary=item.summary or "",
            facts=[fact],
            people=list(item.people),
            file_name=file_name,
            location_name=location.location_name,
            volume=location.volume,
            original_page_range=item.page_range,
        )
        for fact in item.effective_facts
    ]


class ArchiveAssembler:
    """
    Packages batches of export tasks into staged archives.

    Attributes:
        paths_for: File name and folder placement strategy (full or search layout).
        report_jobs: (archive name, builder) pairs run for the first batch.
        source_pause_seconds: Pause after each source document.
    """

    def __init__(
        self,
        paths_for: PathStrategy = full_export_paths,
        report_jobs: list[ReportJob] | None = None,
        source_pause_seconds: float = SOURCE_PAUSE_SECONDS,
    ):
        self.paths_for = paths_for
        self.report_jobs = list(report_jobs or [])
        self.source_pause_seconds = source_pause_seconds

    def assemble(self, batch: Batch) -> AssembledBatch:
        """
        Assemble one batch.

        Args:
            batch: Tasks to package; reports are added when batch.is_first.

        Returns:
            AssembledBatch with the staged archive and manifest entries.
        """
        result = AssembledBatch(batch=batch, archive=ArchiveBuilder())

        if batch.is_first:
            self._add_reports(result)

        for source, tasks in self._group_by_source(batch.tasks):
            self._process_source(source, tasks, result)
            release_memory(self.source_pause_seconds)

        debug_log(f"[ASSEMBLER] Batch {batch.number}/{batch.total}: "
                  f"{result.files_written} written, {len(result.skipped)} skipped")
        return result

    def _add_reports(self, result: AssembledBatch):
        for name, build in self.report_jobs:
            try:
                with Timer(f"[ASSEMBLER] Building {name}"):
                    result.archive.add(name, build())
            except Exception as e:
                error(f"[ASSEMBLER] Report {name} omitted: {e}", exc_info=True)
                result.report_failures.append(name)

    @staticmethod
    def _group_by_source(tasks: list[ExportTask]) -> list[tuple[SourceDocument, list[ExportTask]]]:
        """Tasks grouped by source file, in order of first appearance."""
        groups: dict[str, tuple[SourceDocument, list[ExportTask]]] = {}
        for task in tasks:
            groups.setdefault(task.source.file_id, (task.source, []))[1].append(task)
        return list(groups.values())

    def _process_source(self, source: SourceDocument, tasks: list[ExportTask], result: AssembledBatch):
        try:
            reader = open_source(source.read_bytes(), source.file_id)
        except SourceUnavailableError as e:
            warning(f"[ASSEMBLER] Skipping {len(tasks)} extraction(s): {e}")
            for task in tasks:
                result.skipped.append(self._skip(task, e.reason))
            return

        for task in tasks:
            item = task.item
            location = source.location
            try:
                sliced = slice_pages(reader, item.start_page, item.end_page, build_metadata(item))
            except Exception as e:
                warning(f"[ASSEMBLER] Could not slice {item.display_number} from {source.file_id}: {e}")
                result.skipped.append(self._skip(task, f"slice failed ({e})"))
                continue

            if sliced.is_empty:
                debug_log(f"[ASSEMBLER] Empty range {item.page_range} in {source.file_id}, skipped")
                result.skipped.append(self._skip(task, "empty page range"))
                continue

            paths = self.paths_for(item, location)
            for archive_path in paths.archive_paths:
                result.archive.add(archive_path, sliced.data)
            result.manifest_entries.extend(manifest_entries_for(item, location, paths.file_name))
            result.files_written += 1

    @staticmethod
    def _skip(task: ExportTask, reason: str) -> SkippedTask:
        return SkippedTask(
            file_id=task.source.file_id,
            display_number=task.item.display_number,
            page_range=task.item.page_range,
            reason=reason,
        )
