"""Pagination — page/limit arithmetic shared by every list and search endpoint.

Invariants:
    - offset = (page - 1) * limit; the window holds at most `limit` rows
    - pages = ceil(total / limit), so an empty collection has 0 pages
    - has_next iff page < pages; has_prev iff page > 1
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def page_offset(page: int, limit: int) -> int:
    """First row index of `page` (1-based)."""
    return (page - 1) * limit


def compute_pagination(page: int, limit: int, total: int) -> Pagination:
    """Build pagination metadata for one page of `total` rows. Pure, no IO."""
    pages = math.ceil(total / limit) if limit > 0 else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=pages,
        has_next=page < pages,
        has_prev=page > 1,
    )
