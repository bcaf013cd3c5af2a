"""
End-to-end tests for the export orchestrator.

Archives are delivered to an in-memory sink so their contents can be
inspected without touching the file system.
"""

import io
import json
import zipfile
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from case_bundler.errors import DeliveryError
from case_bundler.export.delivery import DirectoryDelivery
from case_bundler.export.orchestrator import ExportOrchestrator, ExportState
from case_bundler.models import CaseCollection, DocCategory, Extraction, SearchResult, SourceDocument, SourceLocation

from conftest import build_pdf

TODAY = date(2026, 10, 18)


class RecordingDelivery:
    """Keeps every delivered archive in memory; optionally fails on the n-th call."""

    def __init__(self, fail_on: int | None = None):
        self.archives: dict[str, bytes] = {}
        self.fail_on = fail_on

    def deliver(self, archive_name, data):
        if self.fail_on is not None and len(self.archives) + 1 == self.fail_on:
            raise DeliveryError(archive_name, "disk full")
        self.archives[archive_name] = data
        return Path(archive_name)

    def open(self, name) -> zipfile.ZipFile:
        return zipfile.ZipFile(io.BytesIO(self.archives[name]))


def _orchestrator(delivery, **kwargs):
    return ExportOrchestrator(
        delivery,
        source_pause_seconds=0,
        batch_pause_seconds=0,
        today=TODAY,
        **kwargs,
    )


def _large_case(total=85):
    """Three volumes holding `total` one-page extractions."""
    documents = []
    per_volume = [30, 30, total - 60]
    number = 0
    for volume, count in enumerate(per_volume, start=1):
        extractions = []
        for page in range(1, count + 1):
            number += 1
            extractions.append(Extraction(page, page, display_number=f"{number:04d}", doc_type="Order"))
        documents.append(SourceDocument(
            file_id=f"vol{volume}",
            location=SourceLocation(DocCategory.MAIN_RECORD, volume=str(volume)),
            data=build_pdf(30),
            extractions=extractions,
        ))
    return CaseCollection(documents=documents, doc_types=["Order"], facts=["General evidence"])


class TestFullExport:
    """Test whole-case exports."""

    def test_single_extraction_case(self, scenario_case, page_widths):
        delivery = RecordingDelivery()
        result = _orchestrator(delivery).export_case(scenario_case)

        assert list(delivery.archives) == ["Full_Case_2026-10-18.zip"]
        with delivery.open("Full_Case_2026-10-18.zip") as zf:
            names = set(zf.namelist())
            name = "0007.Main_Record.1.Report.General_evidence.pdf"
            assert {
                f"01_By_Location/Main_Record/{name}",
                f"02_By_Document_Type/Report/{name}",
                f"03_By_Fact/General evidence/{name}",
                f"04_By_Person/Jane Doe/{name}",
                "00_General_Index.docx",
                "00_General_Index.xlsx",
                "batch_1_data.json",
            } == names
            assert page_widths(zf.read(f"04_By_Person/Jane Doe/{name}")) == [102, 103, 104]
            manifest = json.loads(zf.read("batch_1_data.json").decode("utf-8"))

        assert len(manifest) == 1
        assert manifest[0]["facts"] == ["General evidence"]
        assert manifest[0]["location"]["originalPageRange"] == "3-5"
        assert result.files_written == 1
        assert result.batch_count == 1
        assert result.archives == [Path("Full_Case_2026-10-18.zip")]

    def test_85_extractions_three_parts(self):
        delivery = RecordingDelivery()
        result = _orchestrator(delivery, batch_size=40).export_case(_large_case())

        assert list(delivery.archives) == [
            "Full_Case_2026-10-18_Part_1_of_3.zip",
            "Full_Case_2026-10-18_Part_2_of_3.zip",
            "Full_Case_2026-10-18_Part_3_of_3.zip",
        ]
        manifest_sizes = []
        for number, name in enumerate(delivery.archives, start=1):
            with delivery.open(name) as zf:
                names = zf.namelist()
                manifest_sizes.append(len(json.loads(zf.read(f"batch_{number}_data.json"))))
                has_reports = "00_General_Index.docx" in names and "00_General_Index.xlsx" in names
                assert has_reports == (number == 1)
        assert manifest_sizes == [40, 40, 5]
        assert result.files_written == 85
        assert result.manifest_entries == 85

    def test_every_extraction_written_exactly_once_per_folder(self):
        delivery = RecordingDelivery()
        _orchestrator(delivery, batch_size=40).export_case(_large_case())
        location_files = []
        for name in delivery.archives:
            with delivery.open(name) as zf:
                location_files += [n for n in zf.namelist() if n.startswith("01_By_Location/")]
        assert len(location_files) == len(set(location_files)) == 85

    def test_unavailable_sources_do_not_abort(self, main_location):
        unlinked = SourceDocument(file_id="unlinked", location=main_location,
                                  extractions=[Extraction(1, 1, display_number="1")])
        corrupt = SourceDocument(file_id="corrupt", location=SourceLocation(DocCategory.MAIN_RECORD, volume="2"),
                                 data=b"%PDF-1.7 truncated", extractions=[Extraction(1, 1, display_number="2")])
        good = SourceDocument(file_id="good", location=SourceLocation(DocCategory.MAIN_RECORD, volume="3"),
                              data=build_pdf(1), extractions=[Extraction(1, 1, display_number="3")])
        case = CaseCollection(documents=[unlinked, corrupt, good])

        delivery = RecordingDelivery()
        result = _orchestrator(delivery).export_case(case)

        assert len(delivery.archives) == 1
        assert result.files_written == 1
        assert {s.file_id for s in result.skipped} == {"unlinked", "corrupt"}
        with delivery.open("Full_Case_2026-10-18.zip") as zf:
            pdfs = [n for n in zf.namelist() if n.endswith(".pdf")]
            assert pdfs and all(n.split("/")[-1].startswith("3.") for n in pdfs)
            assert "00_General_Index.docx" in zf.namelist()

    def test_empty_case_is_noop(self):
        delivery = RecordingDelivery()
        orchestrator = _orchestrator(delivery)
        result = orchestrator.export_case(CaseCollection())
        assert result.is_noop
        assert delivery.archives == {}
        assert orchestrator.state is ExportState.IDLE

    def test_missing_case_rejected(self):
        with pytest.raises(ValueError):
            _orchestrator(RecordingDelivery()).export_case(None)

    def test_report_failure_still_delivers(self, scenario_case):
        delivery = RecordingDelivery()
        with patch("case_bundler.export.orchestrator.generate_word_report", side_effect=RuntimeError("boom")):
            result = _orchestrator(delivery).export_case(scenario_case)
        assert result.report_failures == ["00_General_Index.docx"]
        with delivery.open("Full_Case_2026-10-18.zip") as zf:
            assert "00_General_Index.docx" not in zf.namelist()
            assert "00_General_Index.xlsx" in zf.namelist()

    def test_control_characters_keep_both_reports(self, scenario_case):
        scenario_case.documents[0].extractions[0].summary = "page one\x0cpage two"
        delivery = RecordingDelivery()
        result = _orchestrator(delivery).export_case(scenario_case)
        assert result.report_failures == []
        with delivery.open("Full_Case_2026-10-18.zip") as zf:
            assert {"00_General_Index.docx", "00_General_Index.xlsx"} <= set(zf.namelist())

    def test_progress_reported(self, scenario_case):
        updates = []
        _orchestrator(RecordingDelivery(), progress_callback=lambda pct, msg: updates.append(pct)).export_case(
            scenario_case)
        assert updates[0] == 0
        assert updates[-1] == 100


class TestDeliveryFailure:
    """Test a delivery failure mid-run."""

    def test_stops_and_reports_delivered_archives(self):
        delivery = RecordingDelivery(fail_on=2)
        orchestrator = _orchestrator(delivery, batch_size=40)

        with pytest.raises(DeliveryError) as exc_info:
            orchestrator.export_case(_large_case())

        assert exc_info.value.delivered == [Path("Full_Case_2026-10-18_Part_1_of_3.zip")]
        assert list(delivery.archives) == ["Full_Case_2026-10-18_Part_1_of_3.zip"]
        assert orchestrator.state is ExportState.IDLE

    def test_directory_delivery_writes_files(self, scenario_case, tmp_path):
        result = _orchestrator(DirectoryDelivery(tmp_path / "out")).export_case(scenario_case)
        assert result.archives == [tmp_path / "out" / "Full_Case_2026-10-18.zip"]
        assert zipfile.is_zipfile(result.archives[0])

    def test_directory_delivery_failure(self, scenario_case, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file in the way")
        with pytest.raises(DeliveryError):
            _orchestrator(DirectoryDelivery(blocker)).export_case(scenario_case)


class TestSearchExport:
    """Test filtered exports."""

    def test_single_folder_and_search_reports(self, scenario_case):
        source = scenario_case.documents[0]
        results = [SearchResult.from_extraction(source, source.extractions[0])]
        delivery = RecordingDelivery()

        result = _orchestrator(delivery).export_search_results(scenario_case, results)

        assert list(delivery.archives) == ["Search_Results_2026-10-18.zip"]
        with delivery.open("Search_Results_2026-10-18.zip") as zf:
            assert sorted(zf.namelist()) == [
                "00_Search_Report.docx",
                "00_Search_Report.xlsx",
                "Search_Documents/0007.Main_Record.1.Report.General_evidence.pdf",
                "batch_1_data.json",
            ]
        assert result.files_written == 1

    def test_no_results_is_noop(self, scenario_case):
        delivery = RecordingDelivery()
        result = _orchestrator(delivery).export_search_results(scenario_case, [])
        assert result.is_noop
        assert delivery.archives == {}
