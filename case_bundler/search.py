"""
Case Search

Filters a case by its classification metadata (never by PDF content) and
returns SearchResult projections ready for the filtered export.

Matching rules:
- display number, summary: case-insensitive substring
- article: substring of the raw article list
- doc type, person, fact: exact match (fact uses the sentinel when empty)
- location: category, plus group name for the two sub-file kinds
"""

from __future__ import annotations

from dataclasses import dataclass

from case_bundler.logging_config import debug_log
from case_bundler.models import CaseCollection, DocCategory, Extraction, SearchResult, SourceDocument
from case_bundler.utils.text_utils import first_number


@dataclass
class SearchCriteria:
    """Search filters; empty fields match everything."""
    display_number: str = ""
    article: str = ""
    summary: str = ""
    doc_type: str = ""
    person: str = ""
    fact: str = ""
    category: DocCategory | None = None
    group_name: str = ""

    def matches_location(self, document: SourceDocument) -> bool:
        if self.category is None:
            return True
        location = document.location
        if location.category is not self.category:
            return False
        return location.is_main_record or not self.group_name or location.group_name == self.group_name

    def matches(self, extraction: Extraction) -> bool:
        if self.display_number and self.display_number.lower() not in extraction.display_number.lower():
            return False
        if self.article and self.article not in (extraction.articles or ''):
            return False
        if self.summary and self.summary.lower() not in (extraction.summary or '').lower():
            return False
        if self.doc_type and extraction.doc_type != self.doc_type:
            return False
        if self.person and self.person not in extraction.people:
            return False
        if self.fact and self.fact not in extraction.effective_facts:
            return False
        return True


def search_case(case: CaseCollection, criteria: SearchCriteria) -> list[SearchResult]:
    """Return matching extractions as SearchResults, in case order."""
    results = [
        SearchResult.from_extraction(document, extraction)
        for document in case.documents
        if criteria.matches_location(document)
        for extraction in document.extractions
        if criteria.matches(extraction)
    ]
    debug_log(f"[SEARCH] {len(results)} of {case.extraction_count} extractions matched")
    return results


def group_by_fact(results: list[SearchResult], numeric: bool = True) -> list[tuple[str, list[SearchResult]]]:
    """
    Group results under each of their facts.

    A result with several facts appears in each group. Groups are ordered
    by the first number in the fact label (labels without one last), or
    alphabetically when numeric is False.
    """
    groups: dict[str, list[SearchResult]] = {}
    for result in results:
        for fact in result.effective_facts:
            groups.setdefault(fact, []).append(result)

    if numeric:
        def order(label):
            number = first_number(label)
            return (number is None, number or 0, label.casefold())
    else:
        def order(label):
            return label.casefold()

    return [(label, groups[label]) for label in sorted(groups, key=order)]
