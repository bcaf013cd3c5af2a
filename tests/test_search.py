"""
Tests for metadata search and fact grouping.
"""

from case_bundler.models import CaseCollection, DocCategory, Extraction, SourceDocument, SourceLocation
from case_bundler.search import SearchCriteria, group_by_fact, search_case


def _case():
    main = SourceDocument(
        file_id="main",
        location=SourceLocation(DocCategory.MAIN_RECORD, volume="1"),
        extractions=[
            Extraction(1, 2, display_number="0007", articles="55, 121", doc_type="Report",
                       summary="Police report", people=["Jane Doe"], facts=["Fact 2 - theft"]),
            Extraction(3, 3, display_number="0008", doc_type="Order", people=["John Roe"]),
        ],
    )
    appendix = SourceDocument(
        file_id="app",
        location=SourceLocation(DocCategory.APPENDIX, group_name="Phone records", volume="1"),
        extractions=[
            Extraction(1, 1, display_number="A1", doc_type="Report",
                       facts=["Fact 10 - fraud", "Fact 2 - theft"]),
        ],
    )
    return CaseCollection(documents=[main, appendix])


class TestSearchCase:
    """Test criteria matching."""

    def test_empty_criteria_matches_everything(self):
        results = search_case(_case(), SearchCriteria())
        assert [r.display_number for r in results] == ["0007", "0008", "A1"]

    def test_summary_is_case_insensitive(self):
        results = search_case(_case(), SearchCriteria(summary="POLICE"))
        assert [r.display_number for r in results] == ["0007"]

    def test_doc_type_and_article(self):
        results = search_case(_case(), SearchCriteria(doc_type="Report", article="121"))
        assert [r.display_number for r in results] == ["0007"]

    def test_person(self):
        assert [r.display_number for r in search_case(_case(), SearchCriteria(person="John Roe"))] == ["0008"]

    def test_sentinel_fact_matches_unclassified(self):
        results = search_case(_case(), SearchCriteria(fact="General evidence"))
        assert [r.display_number for r in results] == ["0008"]
        assert results[0].facts == ("General evidence",)

    def test_location_filter(self):
        appendix_only = SearchCriteria(category=DocCategory.APPENDIX, group_name="Phone records")
        assert [r.display_number for r in search_case(_case(), appendix_only)] == ["A1"]
        other_group = SearchCriteria(category=DocCategory.APPENDIX, group_name="Bank")
        assert search_case(_case(), other_group) == []

    def test_results_carry_location(self):
        [result] = search_case(_case(), SearchCriteria(display_number="a1"))
        assert result.file_id == "app"
        assert result.location.group_name == "Phone records"


class TestGroupByFact:
    """Test fact grouping of results."""

    def test_numeric_order_and_multi_fact_membership(self):
        results = search_case(_case(), SearchCriteria())
        groups = group_by_fact(results)
        assert [label for label, _ in groups] == ["Fact 2 - theft", "Fact 10 - fraud", "General evidence"]
        assert [r.display_number for r in groups[0][1]] == ["0007", "A1"]

    def test_alphabetical_order(self):
        groups = group_by_fact(search_case(_case(), SearchCriteria()), numeric=False)
        assert [label for label, _ in groups] == ["Fact 10 - fraud", "Fact 2 - theft", "General evidence"]
