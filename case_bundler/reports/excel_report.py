"""
Excel Index Generator

One flat sheet across every section of the case, using the same row
explosion as the Word index, sorted by article (natural order, rows
without an article last).
"""

from __future__ import annotations

import io

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from case_bundler.logging_config import Timer, debug_log
from case_bundler.models import CaseCollection, SearchResult

from .rows import IndexRow, rows_for_documents, rows_for_results, sort_rows_by_article

SHEET_TITLE = "Case Data"

# (header, IndexRow attribute, column width)
COLUMNS = [
    ("Article", "article", 12),
    ("Fact", "fact", 25),
    ("Person", "person", 25),
    ("Document Type", "doc_type", 22),
    ("Summary", "summary", 40),
    ("Display Number", "display_number", 14),
    ("Location", "location_name", 20),
    ("Volume", "volume", 10),
    ("PDF File Name", "file_name", 60),
]


def _write_workbook(rows: list[IndexRow]) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    header_fill = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col, (header, _, width) in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = "A2"

    for row in rows:
        ws.append([getattr(row, attribute) for _, attribute, _ in COLUMNS])

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def generate_excel_report(case: CaseCollection) -> bytes:
    """Build the full-case spreadsheet as an .xlsx binary."""
    with Timer("[REPORTS] Excel index"):
        rows = sort_rows_by_article(rows_for_documents(case.documents))
        debug_log(f"[REPORTS] Excel index: {len(rows)} rows")
        return _write_workbook(rows)


def generate_search_spreadsheet(results: list[SearchResult]) -> bytes:
    """Build the spreadsheet for a filtered export as an .xlsx binary."""
    with Timer("[REPORTS] Excel search sheet"):
        rows = sort_rows_by_article(rows_for_results(results))
        debug_log(f"[REPORTS] Excel search sheet: {len(rows)} rows")
        return _write_workbook(rows)
