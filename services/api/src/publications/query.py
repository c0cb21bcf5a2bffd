"""
Filter, sort, paginate and group publication records.

Each step is a plain function over a list of records so the pipeline can be
composed and tested piece by piece.
"""

import math
import re
import unicodedata
from functools import cmp_to_key
from typing import Callable, Dict, List, Sequence, Tuple

from shared.models import (
    UNKNOWN_YEAR,
    Publication,
    SortDirection,
    SortKey,
    YearGroup,
)

Comparator = Callable[[Publication, Publication], int]

_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def year_number(year: str) -> int:
    """Leading integer of a year label, 0 when there is none."""
    match = _LEADING_INT_PATTERN.match(year or "")
    return int(match.group(1)) if match else 0


def collation_key(text: str) -> Tuple[str, str, str]:
    """
    Sort key approximating locale-aware string comparison.

    Compares accent- and case-insensitively first, then case-insensitively,
    then on the exact text, so "Émile" sorts next to "Emile" rather than
    after "Zoe".
    """
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, folded, text


def _compare(a, b) -> int:
    return (a > b) - (a < b)


def _compare_time(a: Publication, b: Publication) -> int:
    comparison = (b.timestamp or 0) - (a.timestamp or 0)
    if comparison == 0:
        comparison = year_number(b.year) - year_number(a.year)
    return comparison


def _compare_title(a: Publication, b: Publication) -> int:
    return _compare(collation_key(a.title), collation_key(b.title))


def _compare_author(a: Publication, b: Publication) -> int:
    return _compare(collation_key(a.authors), collation_key(b.authors))


def _compare_citations(a: Publication, b: Publication) -> int:
    return b.citations - a.citations


# Base comparisons: newest / most cited first, titles and authors A to Z.
BASE_COMPARATORS: Dict[SortKey, Comparator] = {
    SortKey.TIME: _compare_time,
    SortKey.TITLE: _compare_title,
    SortKey.AUTHOR: _compare_author,
    SortKey.CITATIONS: _compare_citations,
}


def make_comparator(sort: SortKey, direction: SortDirection) -> Comparator:
    """
    Build the comparison for a sort key and direction.

    ``desc`` keeps the key's base comparison; ``asc`` inverts it.
    """
    base = BASE_COMPARATORS[sort]
    if direction == SortDirection.ASC:
        return lambda a, b: -base(a, b)
    return base


def filter_publications(publications: Sequence[Publication], search: str) -> List[Publication]:
    """
    Keep publications matching every search term.

    Each whitespace-separated term must occur, case-insensitively, in the
    title, the authors or the journal; different terms may match different
    fields.
    """
    terms = search.casefold().split()
    if not terms:
        return list(publications)

    matches = []
    for pub in publications:
        haystacks = (pub.title.casefold(), pub.authors.casefold(), pub.journal.casefold())
        if all(any(term in field for field in haystacks) for term in terms):
            matches.append(pub)
    return matches


def sort_publications(
    publications: Sequence[Publication],
    sort: SortKey = SortKey.TIME,
    direction: SortDirection = SortDirection.DESC,
) -> List[Publication]:
    """Stable sort by key and direction."""
    return sorted(publications, key=cmp_to_key(make_comparator(sort, direction)))


def paginate(
    publications: Sequence[Publication], page: int, limit: int
) -> Tuple[List[Publication], int, int]:
    """
    Slice one page out of a result set.

    Args:
        publications: Filtered and sorted records
        page: 1-based page number
        limit: Page size

    Returns:
        Tuple of (page records, total items, total pages). Pages past the
        end are empty.
    """
    total_items = len(publications)
    total_pages = math.ceil(total_items / limit)
    start = (page - 1) * limit
    return list(publications[start:start + limit]), total_items, total_pages


def _compare_years(a: str, b: str) -> int:
    # Unknown Year last, then numeric years newest first, then other labels
    if a == b:
        return 0
    if a == UNKNOWN_YEAR:
        return 1
    if b == UNKNOWN_YEAR:
        return -1

    a_numeric = _LEADING_INT_PATTERN.match(a) is not None
    b_numeric = _LEADING_INT_PATTERN.match(b) is not None
    if a_numeric != b_numeric:
        return -1 if a_numeric else 1
    if a_numeric:
        comparison = year_number(b) - year_number(a)
        if comparison:
            return comparison
    return _compare(b, a)


def group_by_year(
    publications: Sequence[Publication],
    sort: SortKey = SortKey.TIME,
    direction: SortDirection = SortDirection.DESC,
) -> List[YearGroup]:
    """
    Bucket publications by their year label.

    Buckets are re-sorted with the same key and direction and ordered by
    year descending. "Unknown Year" always comes last, whatever the
    direction.
    """
    buckets: Dict[str, List[Publication]] = {}
    for pub in publications:
        buckets.setdefault(pub.year or UNKNOWN_YEAR, []).append(pub)

    return [
        YearGroup(year=year, publications=sort_publications(buckets[year], sort, direction))
        for year in sorted(buckets, key=cmp_to_key(_compare_years))
    ]
