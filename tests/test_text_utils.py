"""
Unit tests for the text utilities (sanitization and natural ordering).
"""

from case_bundler.utils import file_name_segment, first_number, natural_sort_key, sanitize_filename, xml_safe_text


class TestSanitizeFilename:
    """Test character replacement for archive paths."""

    def test_keeps_allowed_characters(self):
        """Letters, digits, whitespace, hyphen, underscore and dot survive."""
        assert sanitize_filename("Vol 2-a_b.c") == "Vol 2-a_b.c"

    def test_keeps_accented_letters(self):
        """Accented Latin letters are not replaced."""
        assert sanitize_filename("Certidão Judiciária") == "Certidão Judiciária"

    def test_replaces_unsafe_characters(self):
        """Path separators and punctuation become underscores."""
        assert sanitize_filename("a/b\\c:d*e?") == "a_b_c_d_e_"

    def test_trims_whitespace(self):
        assert sanitize_filename("  Jane Doe  ") == "Jane Doe"

    def test_none_and_empty(self):
        assert sanitize_filename("") == ""
        assert sanitize_filename(None) == ""


class TestFileNameSegment:
    """Test the dot-segment variant used inside file names."""

    def test_collapses_whitespace(self):
        assert file_name_segment("General evidence") == "General_evidence"
        assert file_name_segment("a   b\tc") == "a_b_c"

    def test_sanitizes_first(self):
        assert file_name_segment(" Fact #1 ") == "Fact__1"


class TestNaturalSort:
    """Test numeric-aware ordering."""

    def test_numeric_strings(self):
        assert sorted(["2", "10", "1"], key=natural_sort_key) == ["1", "2", "10"]

    def test_volume_labels(self):
        volumes = ["Vol. 10", "Vol. 2", "vol. 1"]
        assert sorted(volumes, key=natural_sort_key) == ["vol. 1", "Vol. 2", "Vol. 10"]

    def test_mixed_text_and_numbers(self):
        assert sorted(["55a", "55", "7"], key=natural_sort_key) == ["7", "55", "55a"]

    def test_first_number(self):
        assert first_number("Fact 12 - fraud") == 12
        assert first_number("no digits") is None


class TestLatinLetters:
    """Test which non-ASCII characters count as letters in file names."""

    def test_symbols_in_latin1_range_replaced(self):
        assert sanitize_filename("5×2") == "5_2"
        assert sanitize_filename("a÷b") == "a_b"

    def test_accented_letters_beyond_latin1_kept(self):
        assert sanitize_filename("Łódź Čapek Erdős") == "Łódź Čapek Erdős"

    def test_non_latin_scripts_and_digits_replaced(self):
        assert sanitize_filename("Ω²") == "__"


class TestXmlSafeText:
    """Test removal of characters Word and Excel cannot store."""

    def test_control_characters_become_spaces(self):
        assert xml_safe_text("page one\x0cpage two") == "page one page two"
        assert xml_safe_text("a\x00b\x1fc") == "a b c"

    def test_tab_and_newline_kept(self):
        assert xml_safe_text("a\tb\nc\r") == "a\tb\nc\r"

    def test_none(self):
        assert xml_safe_text(None) == ""
