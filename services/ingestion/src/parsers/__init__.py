"""
BibTeX extraction.

Splits bibliography text into entries and extracts Publication records.
"""

from .bibtex_parser import (
    BibParseError,
    EntryParseError,
    ErrorCode,
    extract_field,
    extract_timestamp,
    load_publications,
    parse_bibtex_content,
    parse_citations,
)

__all__ = [
    "BibParseError",
    "EntryParseError",
    "ErrorCode",
    "extract_field",
    "extract_timestamp",
    "load_publications",
    "parse_bibtex_content",
    "parse_citations",
]
