"""
Export Package - slicing classified page ranges into delivered archives.

Architecture:
    ExportOrchestrator (plans, packages and delivers batch by batch)
            |
    plan_batches (fixed-size chunks of ExportTask)
            |
    ArchiveAssembler (one parse per source, per-task slicing)
            |
    pdf_slicer (page copy)  +  naming (file name, folder taxonomy)

The orchestrator and assembler also pull in the report generators, so
import them from their modules:

    from case_bundler.export.orchestrator import ExportOrchestrator
    from case_bundler.export.delivery import DirectoryDelivery

The leaf helpers are re-exported here.
"""

from .batch_planner import plan_batches, tasks_from_case, tasks_from_results
from .naming import DerivedPaths, archive_name, build_file_name, derive_export_paths, derive_folder_paths
from .pdf_slicer import SlicedPdf, build_metadata, generate_preview, open_source, page_indices, slice_pages, slice_pdf

__all__ = [
    'plan_batches',
    'tasks_from_case',
    'tasks_from_results',
    'DerivedPaths',
    'archive_name',
    'build_file_name',
    'derive_export_paths',
    'derive_folder_paths',
    'SlicedPdf',
    'build_metadata',
    'generate_preview',
    'open_source',
    'page_indices',
    'slice_pages',
    'slice_pdf',
]
