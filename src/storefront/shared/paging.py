"""Helpers for paginated reads through Protean DAOs."""

import math
from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

_BATCH = 100


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @classmethod
    def of(cls, page: int | None, limit: int | None, default_limit: int = DEFAULT_PAGE_SIZE) -> "Page":
        page = max(int(page or 1), 1)
        limit = min(max(int(limit or default_limit), 1), MAX_PAGE_SIZE)
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "total_pages": math.ceil(total / self.limit) if total else 0,
        }


def fetch_page(query, page: Page):
    """Apply offset/limit to a queryset and return its ResultSet."""
    return query.offset(page.offset).limit(page.limit).all()


def iterate_all(query, batch_size: int = _BATCH):
    """Yield every record matched by ``query``.

    DAO querysets cap results at a default limit, so large scans walk the
    result set in fixed-size batches.
    """
    offset = 0
    while True:
        result = query.offset(offset).limit(batch_size).all()
        yield from result.items
        if len(result.items) < batch_size:
            return
        offset += batch_size
