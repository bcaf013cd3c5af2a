"""
Tests for the page-range slicer.
"""

import io

import pytest
from pypdf import PdfReader

from case_bundler.errors import SourceUnavailableError
from case_bundler.export import generate_preview, open_source, page_indices, slice_pages, slice_pdf
from case_bundler.export.pdf_slicer import build_metadata
from case_bundler.models import DocCategory, Extraction, SourceDocument, SourceLocation


class TestPageIndices:
    """Test 1-based inclusive range clamping."""

    def test_inside_bounds(self):
        assert list(page_indices(3, 5, 10)) == [2, 3, 4]

    def test_partially_outside(self):
        assert list(page_indices(8, 12, 10)) == [7, 8, 9]
        assert list(page_indices(0, 2, 10)) == [0, 1]

    def test_entirely_outside(self):
        assert list(page_indices(11, 12, 10)) == []


class TestSlicePages:
    """Test copying page ranges out of a source PDF."""

    def test_range_inside_bounds(self, make_pdf, page_widths):
        sliced = slice_pdf(make_pdf(10), 3, 5)
        assert sliced.page_count == 3
        assert page_widths(sliced.data) == [102, 103, 104]

    def test_single_page(self, make_pdf, page_widths):
        sliced = slice_pdf(make_pdf(4), 4, 4)
        assert page_widths(sliced.data) == [103]

    def test_range_partially_outside_is_clamped(self, make_pdf, page_widths):
        sliced = slice_pdf(make_pdf(5), 4, 9)
        assert sliced.page_count == 2
        assert page_widths(sliced.data) == [103, 104]

    def test_range_outside_is_empty(self, make_pdf):
        sliced = slice_pdf(make_pdf(5), 6, 8)
        assert sliced.is_empty
        assert sliced.data == b""

    def test_reader_reused_for_several_ranges(self, make_pdf, page_widths):
        reader = open_source(make_pdf(6))
        first = slice_pages(reader, 1, 2)
        second = slice_pages(reader, 5, 6)
        assert page_widths(first.data) == [100, 101]
        assert page_widths(second.data) == [104, 105]

    def test_metadata_written_to_new_file(self, make_pdf):
        extraction = Extraction(1, 1, display_number="12", doc_type="Order",
                                summary="bail hearing", people=["Jane Doe", "John Roe"])
        sliced = slice_pdf(make_pdf(2), 1, 1, build_metadata(extraction))
        metadata = PdfReader(io.BytesIO(sliced.data)).metadata
        assert metadata.title == "Order - 12 (bail hearing)"
        assert metadata.subject == "People: Jane Doe, John Roe"

    def test_no_people_no_subject(self):
        metadata = build_metadata(Extraction(1, 1, display_number="3", doc_type="Report"))
        assert metadata == {"/Title": "Report - 3"}


class TestOpenSource:
    """Test source parsing and its failure modes."""

    def test_corrupt_binary_is_unavailable(self):
        with pytest.raises(SourceUnavailableError):
            open_source(b"this is not a pdf", "broken")

    def test_empty_binary_is_unavailable(self):
        with pytest.raises(SourceUnavailableError):
            open_source(b"", "empty")

    def test_restricted_but_readable_encryption(self, make_pdf, page_widths):
        """Files that open with an empty user password are sliced normally."""
        data = make_pdf(4, user_password="")
        sliced = slice_pdf(data, 2, 3)
        assert page_widths(sliced.data) == [101, 102]

    def test_password_protected_is_unavailable(self, make_pdf):
        with pytest.raises(SourceUnavailableError, match="password"):
            open_source(make_pdf(2, user_password="secret"), "locked")


class TestPreview:
    """Test the single-document preview slice."""

    def test_preview_returns_sliced_pdf(self, make_pdf, page_widths):
        source = SourceDocument(file_id="f", location=SourceLocation(DocCategory.MAIN_RECORD), data=make_pdf(5))
        assert page_widths(generate_preview(source, 2, 3)) == [101, 102]

    def test_preview_out_of_range_is_empty_pdf(self, make_pdf, page_widths):
        source = SourceDocument(file_id="f", location=SourceLocation(DocCategory.MAIN_RECORD), data=make_pdf(2))
        assert page_widths(generate_preview(source, 5, 6)) == []

    def test_preview_of_unlinked_source_raises(self):
        source = SourceDocument(file_id="missing", location=SourceLocation(DocCategory.MAIN_RECORD))
        with pytest.raises(SourceUnavailableError):
            generate_preview(source, 1, 1)
