"""
Archive naming: file names and folder placement for sliced extractions.

Every sliced PDF gets one canonical file name and is duplicated under four
independent folder taxonomies (location, doc type, each fact, each person).
The functions here are pure; identical input always yields identical output.
"""

from __future__ import annotations

from dataclasses import dataclass

from case_bundler.config import (
    FOLDER_BY_DOC_TYPE,
    FOLDER_BY_FACT,
    FOLDER_BY_LOCATION,
    FOLDER_BY_PERSON,
    UNNAMED_GROUP,
)
from case_bundler.models import Extraction, SearchResult, SourceLocation
from case_bundler.utils.text_utils import file_name_segment, sanitize_filename


@dataclass(frozen=True)
class DerivedPaths:
    """Canonical file name and the folders the file is written under."""
    file_name: str
    folder_paths: tuple[str, ...]

    @property
    def archive_paths(self) -> list[str]:
        return [f"{folder}/{self.file_name}" for folder in self.folder_paths]


def build_file_name(item: Extraction | SearchResult, location: SourceLocation) -> str:
    """
    Build the canonical PDF file name for an extraction.

    Format: <number>.<category>.<volume>.<docType>.<facts joined by _>.pdf

    Example:
        >>> build_file_name(Extraction(3, 5, display_number="0007", doc_type="Report"),
        ...                 SourceLocation(DocCategory.MAIN_RECORD, volume="1"))
        '0007.Main_Record.1.Report.General_evidence.pdf'
    """
    segments = [
        file_name_segment(item.display_number),
        location.category_segment,
        file_name_segment(location.volume),
        file_name_segment(item.doc_type),
        file_name_segment('_'.join(item.effective_facts)),
    ]
    return '.'.join(segments) + '.pdf'


def _folder(root: str, name: str) -> str:
    """One folder below root; empty or dot-only names (".", "..") become UNNAMED_GROUP."""
    segment = sanitize_filename(name)
    if not segment.strip('.'):
        segment = UNNAMED_GROUP
    return f"{root}/{segment}"


def derive_folder_paths(item: Extraction | SearchResult, location: SourceLocation) -> tuple[str, ...]:
    """
    Folders the same sliced PDF is duplicated under.

    Order: location, doc type, one per fact, one per person (caller order).
    Duplicates after sanitization are written once.
    """
    candidates = [
        _folder(FOLDER_BY_LOCATION, location.category_segment),
        _folder(FOLDER_BY_DOC_TYPE, item.doc_type),
    ]
    candidates.extend(_folder(FOLDER_BY_FACT, fact) for fact in item.effective_facts)
    candidates.extend(_folder(FOLDER_BY_PERSON, person) for person in item.people)
    return tuple(dict.fromkeys(candidates))


def derive_export_paths(item: Extraction | SearchResult, location: SourceLocation) -> DerivedPaths:
    """Derive the file name and the four-taxonomy folder set for one extraction."""
    return DerivedPaths(
        file_name=build_file_name(item, location),
        folder_paths=derive_folder_paths(item, location),
    )


def archive_name(prefix: str, date_stamp: str, batch_number: int, total_batches: int) -> str:
    """
    Name of one delivered archive.

    The part suffix is present only for multi-part runs:
        Full_Case_2026-10-18.zip
        Full_Case_2026-10-18_Part_2_of_3.zip
    """
    suffix = f"_Part_{batch_number}_of_{total_batches}" if total_batches > 1 else ""
    return f"{prefix}_{date_stamp}{suffix}.zip"
