"""
Word Index Generator

Builds the landscape Word index that opens every full export (and the
search report of a filtered export). Rows come from the shared row
explosion in rows.py, so each row's file name matches the archive entry.

Layout of the full index:
    Title
    Overview: extraction counts per doc type and per fact
    Main Record            (table)
    Appendices -> <group>  (one table per group, groups sorted by name)
    Annexes    -> <group>

Usage:
    data = generate_word_report(case, doc_types=case.doc_types, facts=case.facts)
    archive.add(INDEX_DOCX_NAME, data)
"""

from __future__ import annotations

import io
from collections import Counter
from typing import Iterable

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from case_bundler.logging_config import Timer, debug_log
from case_bundler.models import CaseCollection, DocCategory, SearchResult
from case_bundler.utils.text_utils import xml_safe_text

from .rows import IndexRow, build_sections, format_article, rows_for_results

HEADING_COLOR = RGBColor(0x2E, 0x74, 0xB5)
TABLE_HEADER_BG = "4F81BD"
TABLE_ROW_EVEN_BG = "D0D8E8"
TABLE_ROW_ODD_BG = "FFFFFF"
SUMMARY_COLOR = RGBColor(0x66, 0x66, 0x66)

INDEX_COLUMNS = [
    "Articles",
    "Fact",
    "People",
    "Type / Summary",
    "Number",
    "PDF File Name",
]

CATEGORY_HEADINGS = {
    DocCategory.APPENDIX: "Appendices",
    DocCategory.ANNEX: "Annexes",
}


def _shade(cell, fill: str):
    """Apply a solid background colour to a table cell."""
    tc_pr = cell._tc.get_or_add_tcPr()
    shading = OxmlElement('w:shd')
    shading.set(qn('w:val'), 'clear')
    shading.set(qn('w:color'), 'auto')
    shading.set(qn('w:fill'), fill)
    tc_pr.append(shading)


def _repeat_as_header(row):
    """Mark a table row to repeat at the top of each page."""
    tr_pr = row._tr.get_or_add_trPr()
    header = OxmlElement('w:tblHeader')
    header.set(qn('w:val'), 'true')
    tr_pr.append(header)


def _new_document(title: str):
    document = Document()
    section = document.sections[0]
    section.orientation = WD_ORIENT.LANDSCAPE
    section.page_width, section.page_height = section.page_height, section.page_width
    heading = document.add_heading(title, level=0)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
    return document


def _add_header_row(table, labels: list[str]):
    row = table.rows[0]
    _repeat_as_header(row)
    for cell, label in zip(row.cells, labels):
        _shade(cell, TABLE_HEADER_BG)
        paragraph = cell.paragraphs[0]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = paragraph.add_run(label)
        run.bold = True
        run.font.color.rgb = RGBColor(0xFF, 0xFF, 0xFF)


def _add_index_table(document, rows: list[IndexRow]):
    table = document.add_table(rows=1, cols=len(INDEX_COLUMNS))
    table.style = 'Table Grid'
    _add_header_row(table, INDEX_COLUMNS)

    for position, row in enumerate(rows):
        cells = table.add_row().cells
        fill = TABLE_ROW_ODD_BG if position % 2 == 0 else TABLE_ROW_EVEN_BG
        for cell in cells:
            _shade(cell, fill)

        cells[0].text = format_article(row.article)
        cells[0].paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER
        cells[1].text = row.fact
        cells[2].text = row.person or "-"

        type_paragraph = cells[3].paragraphs[0]
        type_paragraph.add_run(row.doc_type).bold = True
        if row.summary:
            summary_run = cells[3].add_paragraph().add_run(row.summary)
            summary_run.italic = True
            summary_run.font.size = Pt(9)
            summary_run.font.color.rgb = SUMMARY_COLOR

        cells[4].text = row.display_number
        cells[4].paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER
        file_run = cells[5].paragraphs[0].add_run(row.file_name)
        file_run.font.name = 'Consolas'
        file_run.font.size = Pt(8)

    document.add_paragraph()


def _add_section_heading(document, text: str, level: int):
    heading = document.add_heading(level=level)
    run = heading.add_run(text)
    run.font.color.rgb = HEADING_COLOR


def _add_rows_or_placeholder(document, rows: list[IndexRow]):
    if rows:
        _add_index_table(document, rows)
    else:
        document.add_paragraph().add_run("No marked documents.").italic = True


def _vocabulary_counts(labels: Iterable[str], used: Counter) -> list[tuple[str, int]]:
    """Counts in vocabulary order, then labels used but absent from the vocabulary."""
    ordered = list(dict.fromkeys(labels))
    ordered.extend(sorted(label for label in used if label not in ordered))
    return [(label, used.get(label, 0)) for label in ordered]


def _add_overview(document, case: CaseCollection, doc_types: list[str], facts: list[str]):
    doc_type_usage = Counter(extraction.doc_type for _, extraction in case.iter_extractions())
    fact_usage = Counter(
        fact for _, extraction in case.iter_extractions() for fact in extraction.effective_facts
    )

    _add_section_heading(document, "Overview", level=1)
    for label, counts in (
        ("Document type", _vocabulary_counts(doc_types, doc_type_usage)),
        ("Fact", _vocabulary_counts(facts, fact_usage)),
    ):
        table = document.add_table(rows=1, cols=2)
        table.style = 'Table Grid'
        _add_header_row(table, [label, "Extractions"])
        for name, count in counts:
            cells = table.add_row().cells
            cells[0].text = xml_safe_text(name)
            cells[1].text = str(count)
            cells[1].paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER
        document.add_paragraph()


def _to_bytes(document) -> bytes:
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def generate_word_report(
    case: CaseCollection,
    doc_types: list[str] | None = None,
    facts: list[str] | None = None,
) -> bytes:
    """
    Build the full case index as a .docx binary.

    Args:
        case: The full, unfiltered case.
        doc_types: Doc-type vocabulary for the overview (defaults to case.doc_types).
        facts: Fact vocabulary for the overview (defaults to case.facts).

    Returns:
        The Word document bytes.
    """
    with Timer("[REPORTS] Word index"):
        document = _new_document("Index of Case Documents")
        _add_overview(
            document,
            case,
            case.doc_types if doc_types is None else doc_types,
            case.facts if facts is None else facts,
        )

        sections = build_sections(case)
        current_category = None
        for section in sections:
            if section.category is DocCategory.MAIN_RECORD:
                _add_section_heading(document, section.heading, level=1)
            else:
                if section.category is not current_category:
                    _add_section_heading(document, CATEGORY_HEADINGS[section.category], level=1)
                document.add_heading(section.heading, level=2)
            current_category = section.category
            _add_rows_or_placeholder(document, section.rows)

        debug_log(f"[REPORTS] Word index: {len(sections)} sections, "
                  f"{sum(len(s.rows) for s in sections)} rows")
        return _to_bytes(document)


def generate_search_report(results: list[SearchResult]) -> bytes:
    """
    Build the search report for a filtered export as a .docx binary.

    Rows follow the caller's result order with the same row explosion and
    file names as the full index.
    """
    with Timer("[REPORTS] Word search report"):
        document = _new_document("Search Report")
        rows = rows_for_results(results)
        _add_rows_or_placeholder(document, rows)
        debug_log(f"[REPORTS] Search report: {len(results)} results, {len(rows)} rows")
        return _to_bytes(document)
