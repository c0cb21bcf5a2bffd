"""
BibTeX extractor.

Turns the raw text of a bibliography file into Publication records using
field-level pattern matching. This is not a full BibTeX parser:
a field value runs up to the first closing brace, so values containing nested
braces (``title = {The {LaTeX} Companion}``) are truncated at the inner brace.
Multi-line values and LaTeX escapes are kept as written.
"""

import re
from datetime import datetime, timedelta
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from shared.models import NO_URL, UNKNOWN_AUTHORS, UNKNOWN_YEAR, UNTITLED, Publication
from shared.utils import get_logger

logger = get_logger(__name__)

ENTRY_DELIMITER = "@"
BYTE_ORDER_MARK = "\ufeff"

# An entry starts with "@" at the beginning of a line.
_ENTRY_SPLIT_PATTERN = re.compile(r"^[ \t]*@", re.MULTILINE)
_ENTRY_HEADER_PATTERN = re.compile(r"^\s*([A-Za-z]+)\s*[{(]")
_CITATIONS_PATTERN = re.compile(r"Cited by (\d+|None)")
_WHITESPACE_PATTERN = re.compile(r"\s+")

# Entry types that carry no publication.
NON_PUBLICATION_TYPES = frozenset({"comment", "preamble", "string"})

MONTH_NAMES = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}


class ErrorCode(str, Enum):
    """Error kinds signalled by the extractor."""

    NO_VALID_PUBLICATIONS = "NO_VALID_PUBLICATIONS"
    MALFORMED_ENTRY = "MALFORMED_ENTRY"


class BibParseError(Exception):
    """Raised when a bibliography yields no usable publications."""

    def __init__(self, message: str, code: ErrorCode):
        super().__init__(message)
        self.code = code


class EntryParseError(BibParseError):
    """Raised for a single entry that cannot be extracted."""

    def __init__(self, message: str, index: int):
        super().__init__(message, ErrorCode.MALFORMED_ENTRY)
        self.index = index


@lru_cache(maxsize=None)
def _field_pattern(field_name: str) -> "re.Pattern[str]":
    """Compile (once) the ``name = {value}`` pattern for a field."""
    return re.compile(
        rf"(?<![\w-]){re.escape(field_name)}\s*=\s*{{([^}}]*)}}",
        re.IGNORECASE,
    )


def extract_field(entry: str, field_name: str) -> Optional[str]:
    """
    Extract the trimmed value of a braced field.

    The value ends at the first closing brace; nested braces are not supported.

    Args:
        entry: Raw text of one BibTeX entry
        field_name: Field to look up (case-insensitive)

    Returns:
        Trimmed field value, or None if the field is absent
    """
    match = _field_pattern(field_name).search(entry)
    return match.group(1).strip() if match else None


def parse_citations(note: Optional[str]) -> int:
    """
    Parse a citation count from a free-text note.

    Recognizes "Cited by N" and "Cited by None" (which counts as 0).

    Args:
        note: Content of the note field, if any

    Returns:
        Non-negative citation count, 0 when absent or unparsable
    """
    if not note:
        return 0
    match = _CITATIONS_PATTERN.search(note)
    if not match or match.group(1) == "None":
        return 0
    return int(match.group(1))


def _month_number(month: Optional[str]) -> int:
    if not month:
        return 1
    month = month.strip().lower()
    if month.isdecimal() and 1 <= int(month) <= 12:
        return int(month)
    return MONTH_NAMES.get(month, 1)


def _day_number(day: Optional[str]) -> int:
    if day and day.strip().isdecimal() and int(day) >= 1:
        return int(day)
    return 1


def extract_timestamp(entry: str) -> Optional[int]:
    """
    Derive a sortable timestamp from the year, month and day fields.

    The date is interpreted as local midnight. Month defaults to January and
    day to the 1st; a day past the end of the month rolls over into the next.

    Args:
        entry: Raw text of one BibTeX entry

    Returns:
        Epoch milliseconds, or None when there is no usable year
    """
    year = extract_field(entry, "year")
    if not year:
        return None

    try:
        year_number = int(year)
    except ValueError:
        logger.debug(f"Non-numeric year {year!r}, no timestamp derived")
        return None
    if not 1 <= year_number <= 9999:
        return None

    month_number = _month_number(extract_field(entry, "month"))
    day_number = _day_number(extract_field(entry, "day"))

    try:
        date = datetime(year_number, month_number, 1) + timedelta(days=day_number - 1)
        return int(date.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return None


def split_entries(content: str) -> List[str]:
    """
    Split bibliography text into raw entry chunks.

    Text before the first "@" is preamble and is dropped, as are chunks that
    are empty once trimmed. A leading byte-order mark is ignored. Returned
    chunks no longer carry the delimiter.
    """
    chunks = _ENTRY_SPLIT_PATTERN.split(content.lstrip(BYTE_ORDER_MARK))[1:]
    return [chunk for chunk in chunks if chunk.strip()]


def parse_entry(chunk: str, index: int) -> Optional[Publication]:
    """
    Build a Publication from one raw entry chunk.

    Args:
        chunk: Entry text following its "@" delimiter
        index: Position of the chunk in the file, for diagnostics

    Returns:
        The extracted Publication, or None for non-publication blocks
        such as ``@comment``

    Raises:
        EntryParseError: If the chunk has no ``type{`` header
    """
    header = _ENTRY_HEADER_PATTERN.match(chunk)
    if not header:
        raise EntryParseError(f"Entry {index} has no type header", index=index)

    entry_type = header.group(1).lower()
    if entry_type in NON_PUBLICATION_TYPES:
        logger.debug(f"Skipping @{entry_type} block at index {index}")
        return None

    authors = extract_field(chunk, "author") or UNKNOWN_AUTHORS

    return Publication(
        title=extract_field(chunk, "title") or UNTITLED,
        authors=_WHITESPACE_PATTERN.sub(" ", authors),
        year=extract_field(chunk, "year") or UNKNOWN_YEAR,
        journal=extract_field(chunk, "journal") or "",
        citations=parse_citations(extract_field(chunk, "note")),
        url=extract_field(chunk, "url") or NO_URL,
        bibtex=ENTRY_DELIMITER + chunk.rstrip(),
        timestamp=extract_timestamp(chunk),
    )


def parse_bibtex_content(content: str) -> List[Publication]:
    """
    Extract publications from the full text of a BibTeX file.

    Entries that fail extraction are logged and skipped. The result is
    ordered newest first; records without a timestamp count as 0.

    Args:
        content: Full bibliography text

    Returns:
        Publications sorted by timestamp descending

    Raises:
        BibParseError: With code NO_VALID_PUBLICATIONS if nothing was extracted
    """
    logger.info("Starting BibTeX parsing")

    publications: List[Publication] = []
    for index, chunk in enumerate(split_entries(content)):
        try:
            publication = parse_entry(chunk, index)
        except Exception as e:
            logger.warning(
                f"Error parsing entry at index {index}: {e}",
                extra={"entry_index": index},
            )
            continue
        if publication is not None:
            publications.append(publication)

    if not publications:
        logger.error("BibTeX parsing failed: no valid publications found")
        raise BibParseError(
            "No valid publications found in file", ErrorCode.NO_VALID_PUBLICATIONS
        )

    publications.sort(key=lambda pub: pub.timestamp or 0, reverse=True)

    logger.info(f"Successfully parsed {len(publications)} publications")
    return publications


def load_publications(source_path: Union[str, Path]) -> List[Publication]:
    """
    Read a bibliography file and extract its publications.

    Args:
        source_path: Path to a UTF-8 BibTeX file

    Returns:
        Publications sorted by timestamp descending

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
        BibParseError: If the file holds no valid publications
    """
    path = Path(source_path)
    logger.info("Loading bibliography", extra={"source_path": str(path)})
    content = path.read_text(encoding="utf-8-sig")
    return parse_bibtex_content(content)
