"""
Query criteria compiler.

Turns raw, untrusted list parameters into bounded paging plus pass-through
filters. Pure and total: any input produces criteria.

    page_number < 1 or missing  -> 1
    page_size  <= 0 or missing  -> DEFAULT_PAGE_SIZE (no upper cap here)
    skip = (page - 1) * size, take = size

Filter values (empty strings included) and sort strings pass through
verbatim; deciding what an empty filter means is the repository's job.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DEFAULT_PAGE_SIZE = 50


@dataclass
class ResourceQuery:
    """Raw list parameters as bound from the query string."""
    type: Optional[str] = None
    owner_id: Optional[str] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    page_number: Optional[int] = None
    page_size: Optional[int] = None
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = None
    search_text: Optional[str] = None


@dataclass(frozen=True)
class ResourceCriteria:
    skip: int
    take: int
    type: Optional[str] = None
    owner_id: Optional[str] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    search_text: Optional[str] = None
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = None


def compile_criteria(query: ResourceQuery) -> ResourceCriteria:
    page_number = query.page_number if query.page_number is not None and query.page_number >= 1 else 1
    page_size = query.page_size if query.page_size is not None and query.page_size > 0 else DEFAULT_PAGE_SIZE

    return ResourceCriteria(
        skip=(page_number - 1) * page_size,
        take=page_size,
        type=query.type,
        owner_id=query.owner_id,
        created_after=query.created_after,
        created_before=query.created_before,
        search_text=query.search_text,
        sort_by=query.sort_by,
        sort_direction=query.sort_direction,
    )
