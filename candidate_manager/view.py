"""
Derived view of the candidate collection: search, facet filters, pagination.

Every function here is pure; none of them touches the store or storage.
"""

import math
from typing import Iterable, List

from .catalog import FACETS
from .models import Candidate, FilterState, PageView
from .normalize import normalize_text


def matches_search(candidate: Candidate, term: str) -> bool:
    """Case-insensitive substring match against name, email and phone."""
    needle = term.strip().lower()
    if not needle:
        return True
    haystacks = [candidate.name, candidate.email, candidate.phone]
    return any(needle in h.lower() for h in haystacks)


def matches_filters(candidate: Candidate, filters: FilterState) -> bool:
    """AND across facets; a record passes a facet when it hits any selected value."""
    if filters.gender and candidate.gender not in filters.gender:
        return False
    if filters.experience and candidate.experience not in filters.experience:
        return False
    if filters.skills and not any(s in candidate.skills for s in filters.skills):
        return False
    return True


def filter_candidates(
    candidates: Iterable[Candidate],
    search_term: str = "",
    filters: FilterState | None = None,
) -> List[Candidate]:
    filters = filters or FilterState()
    return [
        c for c in candidates
        if matches_search(c, search_term) and matches_filters(c, filters)
    ]


def total_pages(count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, pages: int) -> int:
    return max(1, min(page, pages))


def paginate(records: List[Candidate], page: int, page_size: int) -> PageView:
    pages = total_pages(len(records), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return PageView(
        records=records[start:start + page_size],
        current_page=current,
        total_pages=pages,
        total_count=len(records),
    )


def derive_view(
    candidates: Iterable[Candidate],
    search_term: str,
    filters: FilterState,
    page: int,
    page_size: int,
) -> PageView:
    return paginate(filter_candidates(candidates, search_term, filters), page, page_size)


def describe_filters(search_term: str, filters: FilterState) -> str:
    """Short human summary of the active search and filters, for log lines."""
    parts = []
    if normalize_text(search_term):
        parts.append(f"search={normalize_text(search_term)!r}")
    for facet in FACETS:
        values = getattr(filters, facet)
        if values:
            parts.append(f"{facet}={','.join(values)}")
    return " ".join(parts) or "none"
