"""
Page-Range Slicer

Copies a 1-based inclusive page range out of a source PDF into a new,
minimal PDF. Out-of-bounds pages are dropped silently; an empty
intersection yields an empty result rather than an error, and the caller
decides to skip it.

Only page objects are copied. Document-level metadata of the source is not
carried over; the new file gets its own title/subject/keywords built from
the extraction's classification.

pypdf writes a classic cross-reference table without object streams. The
preview path shares the same writer without descriptive metadata.

Usage:
    reader = open_source(source.read_bytes(), source.file_id)
    sliced = slice_pages(reader, 3, 5, metadata=build_metadata(extraction))
    if not sliced.is_empty:
        archive.add(path, sliced.data)
"""

from __future__ import annotations

import io
from dataclasses import dataclass

from pypdf import PasswordType, PdfReader, PdfWriter

from case_bundler.errors import SourceUnavailableError
from case_bundler.logging_config import debug_log
from case_bundler.models import Extraction, SearchResult, SourceDocument


@dataclass(frozen=True)
class SlicedPdf:
    """
    Result of slicing one page range.

    Attributes:
        data: Serialized PDF bytes (empty when no page survived clamping).
        page_count: Number of pages copied.
    """
    data: bytes
    page_count: int

    @property
    def is_empty(self) -> bool:
        return self.page_count == 0


def open_source(data: bytes, file_id: str = "") -> PdfReader:
    """
    Parse a source PDF into a page-addressable reader.

    Encrypted files that open with an empty user password (permission
    restrictions only) are decrypted transparently.

    Raises:
        SourceUnavailableError: The binary is corrupt or password protected.
    """
    try:
        reader = PdfReader(io.BytesIO(data), strict=False)
        if reader.is_encrypted and reader.decrypt("") == PasswordType.NOT_DECRYPTED:
            raise SourceUnavailableError(file_id, "password protected")
        # Force the page tree to load so corrupt files fail here, not mid-batch
        page_count = len(reader.pages)
    except SourceUnavailableError:
        raise
    except Exception as e:
        raise SourceUnavailableError(file_id, f"unreadable PDF ({e})") from e

    debug_log(f"[SLICER] Opened source {file_id or '<memory>'}: {page_count} pages")
    return reader


def page_indices(start_page: int, end_page: int, page_count: int) -> range:
    """
    Zero-based page indices for a 1-based inclusive range, clamped to the document.

    Examples:
        page_indices(3, 5, 10)  -> range(2, 5)
        page_indices(8, 12, 10) -> range(7, 10)
        page_indices(11, 12, 10) -> range(10, 10)  (empty)
    """
    first = max(start_page - 1, 0)
    last = min(end_page, page_count)
    return range(first, max(first, last))


def build_metadata(item: Extraction | SearchResult) -> dict[str, str]:
    """Title/subject/keywords for a sliced PDF, taken from its classification."""
    title = f"{item.doc_type} - {item.display_number}"
    if item.summary:
        title += f" ({item.summary})"
    metadata = {"/Title": title}
    if item.people:
        metadata["/Subject"] = f"People: {', '.join(item.people)}"
        metadata["/Keywords"] = ", ".join(item.people)
    return metadata


def slice_pages(
    reader: PdfReader,
    start_page: int,
    end_page: int,
    metadata: dict[str, str] | None = None,
) -> SlicedPdf:
    """
    Copy pages [start_page, end_page] (1-based, inclusive) into a new PDF.

    Args:
        reader: Parsed source (see open_source()).
        start_page: First page, 1-based.
        end_page: Last page, 1-based, inclusive.
        metadata: Optional descriptive metadata for the new file.

    Returns:
        SlicedPdf; empty when the range does not intersect the document.
    """
    indices = page_indices(start_page, end_page, len(reader.pages))
    if not indices:
        debug_log(f"[SLICER] Range {start_page}-{end_page} outside {len(reader.pages)} pages")
        return SlicedPdf(data=b"", page_count=0)

    writer = PdfWriter()
    for index in indices:
        writer.add_page(reader.pages[index])
    if metadata:
        writer.add_metadata(metadata)

    buffer = io.BytesIO()
    writer.write(buffer)
    return SlicedPdf(data=buffer.getvalue(), page_count=len(indices))


def slice_pdf(
    source_data: bytes,
    start_page: int,
    end_page: int,
    metadata: dict[str, str] | None = None,
) -> SlicedPdf:
    """Parse source_data and slice one page range out of it."""
    return slice_pages(open_source(source_data), start_page, end_page, metadata)


def generate_preview(source: SourceDocument, start_page: int, end_page: int) -> bytes:
    """
    Slice a single range for immediate viewing (no archive, no manifest).

    Returns:
        PDF bytes; a valid zero-page PDF when the range is out of bounds.

    Raises:
        SourceUnavailableError: The source cannot be read.
    """
    reader = open_source(source.read_bytes(), source.file_id)
    sliced = slice_pages(reader, start_page, end_page)
    if sliced.is_empty:
        buffer = io.BytesIO()
        PdfWriter().write(buffer)
        return buffer.getvalue()
    return sliced.data
