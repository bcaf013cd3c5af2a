"""
Batch Planner

Flattens the case (or a filtered result list) into one ordered task list
and cuts it into fixed-size batches. The batch size only bounds archive
size and peak memory; a source document's tasks may straddle two batches.
"""

from __future__ import annotations

from typing import Iterable

from case_bundler.config import MAX_EXTRACTIONS_PER_ARCHIVE
from case_bundler.logging_config import debug_log, warning
from case_bundler.models import Batch, CaseCollection, ExportTask, SearchResult


def tasks_from_case(case: CaseCollection) -> list[ExportTask]:
    """One task per extraction, in document then extraction order."""
    return [ExportTask(source=source, item=extraction) for source, extraction in case.iter_extractions()]


def tasks_from_results(case: CaseCollection, results: Iterable[SearchResult]) -> list[ExportTask]:
    """
    One task per search result, in result order.

    Results whose source document is no longer in the case are dropped.
    """
    tasks = []
    for result in results:
        source = case.find_document(result.file_id)
        if source is None:
            warning(f"[PLANNER] Search result {result.extraction_id} references unknown file {result.file_id}")
            continue
        tasks.append(ExportTask(source=source, item=result))
    return tasks


def plan_batches(tasks: list[ExportTask], batch_size: int = MAX_EXTRACTIONS_PER_ARCHIVE) -> list[Batch]:
    """
    Partition tasks into contiguous batches of batch_size (last may be shorter).

    Concatenating the batches reproduces the input order. An empty task
    list yields no batches.

    Raises:
        ValueError: batch_size is smaller than 1.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    chunks = [tasks[i:i + batch_size] for i in range(0, len(tasks), batch_size)]
    batches = [Batch(index=i, total=len(chunks), tasks=chunk) for i, chunk in enumerate(chunks)]
    debug_log(f"[PLANNER] {len(tasks)} tasks -> {len(batches)} batches of up to {batch_size}")
    return batches
