"""
Report Generators

Word and Excel indices that accompany an export. Both are built from the
same exploded rows (articles x facts x people) so they index the archive
with identical file names.

    from case_bundler.reports import generate_word_report, generate_excel_report
"""

from .docx_report import generate_search_report, generate_word_report
from .excel_report import generate_excel_report, generate_search_spreadsheet
from .rows import (
    IndexRow,
    ReportSection,
    build_sections,
    explode_rows,
    rows_for_documents,
    rows_for_results,
    sort_rows_by_article,
)

__all__ = [
    'generate_word_report',
    'generate_search_report',
    'generate_excel_report',
    'generate_search_spreadsheet',
    'IndexRow',
    'ReportSection',
    'build_sections',
    'explode_rows',
    'rows_for_documents',
    'rows_for_results',
    'sort_rows_by_article',
]
