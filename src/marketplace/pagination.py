"""Page arithmetic shared by every listing in the marketplace."""

import math
from dataclasses import dataclass, field
from typing import Any

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def normalize_window(page: int | None, page_size: int | None, default_size: int = DEFAULT_PAGE_SIZE) -> tuple[int, int]:
    """Clamp a requested page and page size to usable values.

    Missing or non-positive values fall back to page 1 and the default size.
    """
    page = page if isinstance(page, int) and page >= 1 else 1
    page_size = page_size if isinstance(page_size, int) and page_size >= 1 else default_size
    return page, min(page_size, MAX_PAGE_SIZE)


@dataclass(frozen=True)
class Page:
    """One page of a listing plus the totals needed for the pagination envelope."""

    items: list[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return math.ceil(self.total / self.page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def envelope(self) -> dict:
        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            "totalItems": self.total,
            "itemsPerPage": self.page_size,
        }
