"""
Shared fixtures for the CaseBundler tests.

Test PDFs are built in memory with blank pages of increasing width
(base_width, base_width + 1, ...), so page order can be read back from
the media boxes of a sliced file.
"""

import io
import sys
from pathlib import Path

import pytest
from pypdf import PdfReader, PdfWriter

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from case_bundler.models import (  # noqa: E402
    CaseCollection,
    DocCategory,
    Extraction,
    SourceDocument,
    SourceLocation,
)


def build_pdf(page_count: int, base_width: int = 100, user_password: str | None = None) -> bytes:
    writer = PdfWriter()
    for i in range(page_count):
        writer.add_blank_page(width=base_width + i, height=200)
    if user_password is not None:
        writer.encrypt(user_password=user_password, owner_password="owner-secret")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def read_page_widths(data: bytes) -> list[int]:
    reader = PdfReader(io.BytesIO(data))
    return [int(float(page.mediabox.width)) for page in reader.pages]


@pytest.fixture
def make_pdf():
    """Factory: make_pdf(page_count, base_width=100, user_password=None) -> bytes."""
    return build_pdf


@pytest.fixture
def page_widths():
    """Reader: page_widths(pdf_bytes) -> list of page widths in order."""
    return read_page_widths


@pytest.fixture
def main_location():
    return SourceLocation(DocCategory.MAIN_RECORD, volume="1")


@pytest.fixture
def scenario_case():
    """One main-record volume with one extraction of pages 3-5."""
    document = SourceDocument(
        file_id="vol1",
        location=SourceLocation(DocCategory.MAIN_RECORD, volume="1"),
        file_name="vol1.pdf",
        data=build_pdf(8),
        extractions=[
            Extraction(
                start_page=3,
                end_page=5,
                display_number="0007",
                doc_type="Report",
                people=["Jane Doe"],
                facts=[],
            )
        ],
    )
    return CaseCollection(documents=[document], doc_types=["Report", "Order"], facts=["General evidence"])
