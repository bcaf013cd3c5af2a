"""
Report Rows - shared row explosion for the Word and Excel indices.

Each extraction expands into one row per combination of
    {article, or a blank placeholder} x {fact} x {person, or a blank placeholder}
so a report filtered on any single column still shows the co-occurring
facts and people. Every row carries the exact file name the archive uses.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Iterable

from case_bundler.config import UNNAMED_GROUP
from case_bundler.export.naming import build_file_name
from case_bundler.models import (
    CaseCollection,
    DocCategory,
    Extraction,
    SearchResult,
    SourceDocument,
    SourceLocation,
)
from case_bundler.utils.text_utils import natural_sort_key, xml_safe_text


@dataclass(frozen=True)
class IndexRow:
    """One exploded report row."""
    article: str
    fact: str
    person: str
    doc_type: str
    summary: str
    display_number: str
    file_name: str
    location_name: str
    volume: str


@dataclass
class ReportSection:
    """
    Rows of one location section in the Word index.

    Attributes:
        heading: Section or group heading.
        category: Category the section belongs to.
        rows: Exploded rows, documents ordered naturally by volume.
    """
    heading: str
    category: DocCategory
    rows: list[IndexRow]


def explode_rows(item: Extraction | SearchResult, location: SourceLocation) -> list[IndexRow]:
    """
    Expand one extraction into articles x facts x people rows.

    Empty article and people lists contribute one blank placeholder each;
    an empty fact list is replaced by the sentinel fact. Text fields are
    made XML-safe so both report writers accept them.
    """
    file_name = build_file_name(item, location)
    articles = item.article_list or [""]
    people = list(item.people) or [""]
    return [
        IndexRow(
            article=xml_safe_text(article),
            fact=xml_safe_text(fact),
            person=xml_safe_text(person),
            doc_type=xml_safe_text(item.doc_type),
            summary=xml_safe_text(item.summary),
            display_number=xml_safe_text(item.display_number),
            file_name=file_name,
            location_name=xml_safe_text(location.location_name),
            volume=xml_safe_text(location.volume),
        )
        for article, fact, person in product(articles, item.effective_facts, people)
    ]


def rows_for_documents(documents: Iterable[SourceDocument]) -> list[IndexRow]:
    """Exploded rows for the given documents, in the given order."""
    rows = []
    for document in documents:
        for extraction in document.extractions:
            rows.extend(explode_rows(extraction, document.location))
    return rows


def rows_for_results(results: Iterable[SearchResult]) -> list[IndexRow]:
    """Exploded rows for search results, keeping result order."""
    rows = []
    for result in results:
        rows.extend(explode_rows(result, result.location))
    return rows


def sort_by_volume(documents: Iterable[SourceDocument]) -> list[SourceDocument]:
    return sorted(documents, key=lambda document: natural_sort_key(document.location.volume))


def build_sections(case: CaseCollection) -> list[ReportSection]:
    """
    Group the case into report sections.

    The main record comes first, then one section per appendix group and
    one per annex group, each kind sorted by group name. Documents inside a
    section are ordered naturally by volume.
    """
    sections = []
    main_documents = [d for d in case.documents if d.location.category is DocCategory.MAIN_RECORD]
    if main_documents:
        sections.append(ReportSection(
            heading=DocCategory.MAIN_RECORD.value,
            category=DocCategory.MAIN_RECORD,
            rows=rows_for_documents(sort_by_volume(main_documents)),
        ))

    for category in (DocCategory.APPENDIX, DocCategory.ANNEX):
        groups: dict[str, list[SourceDocument]] = {}
        for document in case.documents:
            if document.location.category is category:
                groups.setdefault(document.location.group_name or UNNAMED_GROUP, []).append(document)
        for name in sorted(groups):
            sections.append(ReportSection(
                heading=xml_safe_text(name),
                category=category,
                rows=rows_for_documents(sort_by_volume(groups[name])),
            ))
    return sections


def sort_rows_by_article(rows: list[IndexRow]) -> list[IndexRow]:
    """Natural article order; rows without an article go last (stable)."""
    return sorted(rows, key=lambda row: (row.article == "", natural_sort_key(row.article)))


def format_article(article: str) -> str:
    """Display form of an article reference ('55' -> '#55', blank -> '-')."""
    if not article:
        return "-"
    return article if article.startswith('#') else f"#{article}"
