"""
Case Data Types

Data structures for a classified case: the source PDFs, the page-range
extractions marked inside them, and the ephemeral records the export
pipeline builds from them.

Key Types:
    DocCategory - Main record or one of the two named sub-file kinds
    SourceLocation - Where a source PDF sits in the case (category/group/volume)
    SourceDocument - One source PDF plus its extractions
    Extraction - One classified page range of a source PDF
    SearchResult - Read-only projection of an Extraction and its location
    CaseCollection - Ordered documents plus the classification vocabularies
    ExportTask / Batch - Units of work for the archive assembler
    ManifestEntry - One JSON manifest record

Usage:
    doc = SourceDocument(
        file_id="f1",
        location=SourceLocation(DocCategory.MAIN_RECORD, volume="1"),
        path=Path("vol1.pdf"),
    )
    doc.extractions.append(Extraction(start_page=3, end_page=5, display_number="0007"))
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator

from case_bundler.config import MAIN_RECORD_SEGMENT, SENTINEL_FACT
from case_bundler.errors import SourceUnavailableError
from case_bundler.utils.text_utils import file_name_segment


def _new_id() -> str:
    return uuid.uuid4().hex


def split_articles(articles: str) -> list[str]:
    """Split a comma-separated article list, trimming and dropping empties."""
    return [part.strip() for part in (articles or '').split(',') if part.strip()]


class DocCategory(Enum):
    """The three fixed kinds of source document."""
    MAIN_RECORD = "Main Record"
    APPENDIX = "Appendix"
    ANNEX = "Annex"

    @classmethod
    def parse(cls, value: str | DocCategory) -> DocCategory:
        """Accept an enum member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.casefold() in (member.value.casefold(), member.name.casefold()):
                return member
        raise ValueError(f"Unknown document category: {value!r}")


@dataclass(frozen=True)
class SourceLocation:
    """
    Location metadata of a source PDF inside the case.

    Attributes:
        category: Main record or a named sub-file kind.
        group_name: Sub-file group name (required for APPENDIX/ANNEX).
        volume: Free-text volume label, sorted naturally.
    """
    category: DocCategory
    group_name: str | None = None
    volume: str = ""

    @property
    def is_main_record(self) -> bool:
        return self.category is DocCategory.MAIN_RECORD

    @property
    def location_name(self) -> str:
        """Display name used in manifests and report sections."""
        if self.is_main_record:
            return DocCategory.MAIN_RECORD.value
        return self.group_name or self.category.value

    @property
    def category_segment(self) -> str:
        """File-name segment for the category/group."""
        if self.is_main_record:
            return MAIN_RECORD_SEGMENT
        return file_name_segment(self.group_name or self.category.value)


@dataclass
class Extraction:
    """
    One classified page range of a source PDF.

    Pages are 1-based and inclusive. display_number is the user's own
    numbering and is not guaranteed to be unique.
    """
    start_page: int
    end_page: int
    display_number: str = ""
    articles: str = ""
    doc_type: str = ""
    summary: str = ""
    people: list[str] = field(default_factory=list)
    facts: list[str] = field(default_factory=list)
    extraction_id: str = field(default_factory=_new_id)

    @property
    def effective_facts(self) -> list[str]:
        """Facts with the sentinel substituted when none are assigned."""
        return list(self.facts) if self.facts else [SENTINEL_FACT]

    @property
    def article_list(self) -> list[str]:
        return split_articles(self.articles)

    @property
    def page_range(self) -> str:
        return f"{self.start_page}-{self.end_page}"


@dataclass
class SourceDocument:
    """
    One source PDF of the case.

    The binary comes from `data` when already in memory, otherwise from
    `path`. It is treated as immutable for the duration of an export run.
    """
    file_id: str
    location: SourceLocation
    file_name: str = ""
    path: Path | None = None
    data: bytes | None = None
    extractions: list[Extraction] = field(default_factory=list)

    def read_bytes(self) -> bytes:
        """
        Return the PDF binary.

        Raises:
            SourceUnavailableError: No binary is linked or the file cannot be read.
        """
        if self.data is not None:
            return self.data
        if self.path is None:
            raise SourceUnavailableError(self.file_id, "no file linked")
        try:
            return Path(self.path).read_bytes()
        except OSError as e:
            raise SourceUnavailableError(self.file_id, str(e)) from e


@dataclass(frozen=True)
class SearchResult:
    """
    Denormalised, read-only projection of an Extraction and its source location.

    Carries every field the export pipeline reads, so it can be passed
    wherever an Extraction is accepted.
    """
    file_id: str
    extraction_id: str
    category: DocCategory
    group_name: str | None
    volume: str
    display_number: str
    articles: str
    doc_type: str
    summary: str
    people: tuple[str, ...]
    facts: tuple[str, ...]
    start_page: int
    end_page: int

    @classmethod
    def from_extraction(cls, source: SourceDocument, extraction: Extraction) -> SearchResult:
        location = source.location
        return cls(
            file_id=source.file_id,
            extraction_id=extraction.extraction_id,
            category=location.category,
            group_name=location.group_name,
            volume=location.volume,
            display_number=extraction.display_number,
            articles=extraction.articles or "",
            doc_type=extraction.doc_type,
            summary=extraction.summary or "",
            people=tuple(extraction.people),
            facts=tuple(extraction.effective_facts),
            start_page=extraction.start_page,
            end_page=extraction.end_page,
        )

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.category, self.group_name, self.volume)

    @property
    def effective_facts(self) -> list[str]:
        return list(self.facts) if self.facts else [SENTINEL_FACT]

    @property
    def article_list(self) -> list[str]:
        return split_articles(self.articles)

    @property
    def page_range(self) -> str:
        return f"{self.start_page}-{self.end_page}"


@dataclass(frozen=True)
class Person:
    """A person referenced by extractions (defendant, witness, expert...)."""
    name: str
    role: str = ""


@dataclass
class CaseCollection:
    """
    The full classified case.

    Attributes:
        documents: Source PDFs in case order.
        doc_types: Doc-type vocabulary (report column population only).
        facts: Fact vocabulary (report column population only).
        people: People referenced by the case.
    """
    documents: list[SourceDocument] = field(default_factory=list)
    doc_types: list[str] = field(default_factory=list)
    facts: list[str] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)

    def find_document(self, file_id: str) -> SourceDocument | None:
        for document in self.documents:
            if document.file_id == file_id:
                return document
        return None

    def iter_extractions(self) -> Iterator[tuple[SourceDocument, Extraction]]:
        """Yield (source, extraction) pairs in case order."""
        for document in self.documents:
            for extraction in document.extractions:
                yield document, extraction

    @property
    def extraction_count(self) -> int:
        return sum(len(document.extractions) for document in self.documents)


@dataclass
class ExportTask:
    """Pairs one source document with one item (Extraction or SearchResult)."""
    source: SourceDocument
    item: Extraction | SearchResult


@dataclass
class Batch:
    """
    A contiguous chunk of export tasks packaged into one archive.

    Attributes:
        index: Zero-based batch index.
        total: Number of batches in the run.
        tasks: Tasks in plan order.
    """
    index: int
    total: int
    tasks: list[ExportTask] = field(default_factory=list)

    @property
    def number(self) -> int:
        """One-based batch number used in file names."""
        return self.index + 1

    @property
    def is_first(self) -> bool:
        return self.index == 0

    def __len__(self) -> int:
        return len(self.tasks)


@dataclass
class ManifestEntry:
    """One JSON manifest record for a sliced extraction."""
    display_number: str
    articles: str
    doc_type: str
    summary: str
    facts: list[str]
    people: list[str]
    file_name: str
    location_name: str
    volume: str
    original_page_range: str

    def to_dict(self) -> dict:
        return {
            "displayNumber": self.display_number,
            "articles": self.articles,
            "docType": self.doc_type,
            "summary": self.summary,
            "facts": list(self.facts),
            "people": list(self.people),
            "fileName": self.file_name,
            "location": {
                "name": self.location_name,
                "volume": self.volume,
                "originalPageRange": self.original_page_range,
            },
        }
