"""
Export Orchestrator - drives planning, packaging and delivery.

Each run walks a small state machine:

    IDLE -> PLANNING -> (PACKAGING[i] -> DELIVERING[i])* -> IDLE

Batches are processed strictly one after another. Each archive is
delivered as soon as it is packaged and released before the next batch
starts, so peak memory stays bounded by one batch. Between batches (and
between source documents inside the assembler) the orchestrator collects
garbage and pauses briefly.

Two variants share the machinery:
- export_case(): the whole case, four-taxonomy folders, Word + Excel index.
- export_search_results(): a filtered result list, one combined folder,
  search report + spreadsheet.

Usage:
    orchestrator = ExportOrchestrator(DirectoryDelivery("exports"))
    result = orchestrator.export_case(case)
    for path in result.archives:
        print(path)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable

import psutil

from case_bundler.config import (
    BATCH_PAUSE_SECONDS,
    FULL_EXPORT_PREFIX,
    INDEX_DOCX_NAME,
    INDEX_XLSX_NAME,
    MAX_EXTRACTIONS_PER_ARCHIVE,
    SEARCH_DOCX_NAME,
    SEARCH_EXPORT_PREFIX,
    SEARCH_XLSX_NAME,
    SOURCE_PAUSE_SECONDS,
)
from case_bundler.errors import DeliveryError
from case_bundler.logging_config import Timer, debug_log, error, info
from case_bundler.models import CaseCollection, ExportTask, SearchResult
from case_bundler.reports import (
    generate_excel_report,
    generate_search_report,
    generate_search_spreadsheet,
    generate_word_report,
)

from .archive_assembler import (
    ArchiveAssembler,
    AssembledBatch,
    SkippedTask,
    full_export_paths,
    release_memory,
    search_export_paths,
)
from .batch_planner import plan_batches, tasks_from_case, tasks_from_results
from .delivery import ArchiveDelivery
from .naming import archive_name


class ExportState(Enum):
    IDLE = "idle"
    PLANNING = "planning"
    PACKAGING = "packaging"
    DELIVERING = "delivering"


@dataclass
class ExportRunResult:
    """
    Outcome of one export run.

    Attributes:
        archives: Delivered archive locations, in batch order.
        batch_count: Number of planned batches.
        files_written: Extractions sliced and written across all batches.
        manifest_entries: Manifest entries written across all batches.
        skipped: Tasks that produced no output.
        report_failures: Report files omitted from the first archive.
    """
    archives: list[Path] = field(default_factory=list)
    batch_count: int = 0
    files_written: int = 0
    manifest_entries: int = 0
    skipped: list[SkippedTask] = field(default_factory=list)
    report_failures: list[str] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        """True when there was nothing to export."""
        return self.batch_count == 0


def manifest_bytes(assembled: AssembledBatch) -> bytes:
    entries = [entry.to_dict() for entry in assembled.manifest_entries]
    return json.dumps(entries, indent=2, ensure_ascii=False).encode('utf-8')


class ExportOrchestrator:
    """
    Runs export jobs batch by batch and hands each archive to a delivery sink.

    Attributes:
        delivery: Sink receiving each packaged archive.
        batch_size: Maximum extractions per archive.
        source_pause_seconds: Pause after each source document.
        batch_pause_seconds: Pause after each delivered batch.
        progress_callback: Optional callback(percent, message).
        state: Current ExportState.
    """

    def __init__(
        self,
        delivery: ArchiveDelivery,
        batch_size: int = MAX_EXTRACTIONS_PER_ARCHIVE,
        source_pause_seconds: float = SOURCE_PAUSE_SECONDS,
        batch_pause_seconds: float = BATCH_PAUSE_SECONDS,
        progress_callback: Callable[[int, str], None] | None = None,
        today: date | None = None,
    ):
        self.delivery = delivery
        self.batch_size = batch_size
        self.source_pause_seconds = source_pause_seconds
        self.batch_pause_seconds = batch_pause_seconds
        self.progress_callback = progress_callback
        self.today = today
        self.state = ExportState.IDLE

    def export_case(self, case: CaseCollection | None) -> ExportRunResult:
        """
        Export every extraction of the case.

        Args:
            case: The full case.

        Returns:
            ExportRunResult (no-op result when the case has no extractions).

        Raises:
            ValueError: No case was supplied.
            DeliveryError: An archive could not be delivered.
        """
        if case is None:
            raise ValueError("No case data to export")

        assembler = ArchiveAssembler(
            paths_for=full_export_paths,
            report_jobs=[
                (INDEX_DOCX_NAME, lambda: generate_word_report(case, case.doc_types, case.facts)),
                (INDEX_XLSX_NAME, lambda: generate_excel_report(case)),
            ],
            source_pause_seconds=self.source_pause_seconds,
        )
        return self._run(lambda: tasks_from_case(case), assembler, FULL_EXPORT_PREFIX)

    def export_search_results(
        self,
        case: CaseCollection | None,
        results: list[SearchResult],
    ) -> ExportRunResult:
        """
        Export only the given search results into one combined folder.

        Args:
            case: The case owning the result's source documents.
            results: Pre-filtered results, exported in this order.

        Raises:
            ValueError: No case was supplied.
            DeliveryError: An archive could not be delivered.
        """
        if case is None:
            raise ValueError("No case data to export")

        results = list(results)
        assembler = ArchiveAssembler(
            paths_for=search_export_paths,
            report_jobs=[
                (SEARCH_DOCX_NAME, lambda: generate_search_report(results)),
                (SEARCH_XLSX_NAME, lambda: generate_search_spreadsheet(results)),
            ],
            source_pause_seconds=self.source_pause_seconds,
        )
        return self._run(lambda: tasks_from_results(case, results), assembler, SEARCH_EXPORT_PREFIX)

    def _run(
        self,
        build_tasks: Callable[[], list[ExportTask]],
        assembler: ArchiveAssembler,
        prefix: str,
    ) -> ExportRunResult:
        result = ExportRunResult()
        date_stamp = (self.today or date.today()).isoformat()

        try:
            self.state = ExportState.PLANNING
            batches = plan_batches(build_tasks(), self.batch_size)
            result.batch_count = len(batches)
            if not batches:
                info(f"[ORCHESTRATOR] Nothing to export for {prefix}")
                return result

            info(f"[ORCHESTRATOR] {prefix}: {len(batches)} archive(s) to deliver")
            for batch in batches:
                name = archive_name(prefix, date_stamp, batch.number, batch.total)

                self.state = ExportState.PACKAGING
                self._report_progress(batch.index, batch.total, f"Packaging part {batch.number} of {batch.total}")
                assembled = assembler.assemble(batch)
                assembled.archive.add(assembled.manifest_name, manifest_bytes(assembled))
                with Timer(f"[ORCHESTRATOR] Serializing {name}"):
                    data = assembled.archive.to_bytes()

                self._collect(result, assembled)
                del assembled

                self.state = ExportState.DELIVERING
                try:
                    result.archives.append(self.delivery.deliver(name, data))
                except DeliveryError as e:
                    e.delivered = list(result.archives)
                    error(f"[ORCHESTRATOR] {e}; {len(result.archives)} archive(s) already delivered")
                    raise
                del data

                self._report_progress(batch.number, batch.total, f"Delivered part {batch.number} of {batch.total}")
                release_memory(self.batch_pause_seconds)
                self._log_memory(batch.number)

            info(f"[ORCHESTRATOR] {prefix} finished: {result.files_written} files, "
                 f"{len(result.skipped)} skipped")
            return result
        finally:
            self.state = ExportState.IDLE

    @staticmethod
    def _collect(result: ExportRunResult, assembled: AssembledBatch):
        result.files_written += assembled.files_written
        result.manifest_entries += len(assembled.manifest_entries)
        result.skipped.extend(assembled.skipped)
        result.report_failures.extend(assembled.report_failures)

    def _report_progress(self, done: int, total: int, message: str):
        if self.progress_callback:
            self.progress_callback(int(done / total * 100), message)

    @staticmethod
    def _log_memory(batch_number: int):
        rss_mb = psutil.Process().memory_info().rss / (1024 * 1024)
        debug_log(f"[ORCHESTRATOR] Resident memory after batch {batch_number}: {rss_mb:.0f} MB")
