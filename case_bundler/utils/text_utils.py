"""
Text Utility Functions

Common text helpers shared by the archive naming and report modules:
file-name sanitization, XML-safe report text and natural (numeric-aware)
ordering.
"""

import re
import unicodedata

_PATH_PUNCTUATION = "-_."
_WHITESPACE_RUN = re.compile(r"\s+")
_DIGIT_RUN = re.compile(r"(\d+)")
_FIRST_NUMBER = re.compile(r"\d+")

# Characters XML 1.0 cannot carry (C0 controls except tab/newline/CR,
# surrogates, U+FFFE/U+FFFF). Word and Excel files are XML packages.
_XML_ILLEGAL_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _is_safe_char(char: str) -> bool:
    """Latin letters (accented included), ASCII digits, whitespace, '-', '_', '.'."""
    if char.isspace() or char in _PATH_PUNCTUATION:
        return True
    if char.isascii():
        return char.isalnum()
    return char.isalpha() and unicodedata.name(char, '').startswith('LATIN')


def sanitize_filename(name: str) -> str:
    """
    Replace characters that are unsafe in archive paths with underscores.

    Keeps Latin letters (accented included), ASCII digits, whitespace,
    hyphen, underscore and dot, then trims surrounding whitespace.

    Example:
        >>> sanitize_filename("Jane/Doe: notes ")
        'Jane_Doe_ notes'
        >>> sanitize_filename("5×2 Łódź")
        '5_2 Łódź'
    """
    return ''.join(char if _is_safe_char(char) else '_' for char in name or '').strip()


def file_name_segment(name: str) -> str:
    """
    Sanitize a value for use as one dot-separated segment of a file name.

    Same as sanitize_filename() with internal whitespace runs collapsed to
    a single underscore.

    Example:
        >>> file_name_segment("General evidence")
        'General_evidence'
    """
    return _WHITESPACE_RUN.sub('_', sanitize_filename(name))


def natural_sort_key(value: str) -> tuple:
    """
    Sort key that compares digit runs numerically and text case-insensitively.

    "Vol. 2" sorts before "Vol. 10"; "1" < "2" < "10".
    """
    parts = _DIGIT_RUN.split((value or '').casefold())
    return tuple(
        (0, int(part), '') if part.isdigit() else (1, 0, part)
        for part in parts
        if part
    )


def first_number(value: str) -> int | None:
    """Return the first integer embedded in value, or None."""
    match = _FIRST_NUMBER.search(value or '')
    return int(match.group(0)) if match else None


def xml_safe_text(text: str) -> str:
    """
    Replace characters that cannot appear in a Word or Excel file with spaces.

    Covers form feeds and the other C0 controls that text copied out of
    PDFs often carries. Tab and newline are kept.
    """
    return _XML_ILLEGAL_CHARS.sub(' ', text or '')
