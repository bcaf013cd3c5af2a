"""
Utility Modules for CaseBundler

Shared helpers used across the export and report packages:
- File-name sanitization (sanitize_filename, file_name_segment)
- Natural ordering (natural_sort_key, first_number)
- XML-safe report text (xml_safe_text)
"""

from .text_utils import (
    file_name_segment,
    first_number,
    natural_sort_key,
    sanitize_filename,
    xml_safe_text,
)

__all__ = [
    'sanitize_filename',
    'file_name_segment',
    'natural_sort_key',
    'first_number',
    'xml_safe_text',
]
