"""Fixed-size paging over ordered event lists (killfeed, chat)."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from tfsight.core.constants import PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One window of a sequence."""

    items: tuple[T, ...]
    page: int  # 0-based, already clamped
    total_pages: int
    total_items: int
    start: int
    stop: int

    @property
    def has_prev(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1

    def __len__(self) -> int:
        return len(self.items)


def page_count(total_items: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages for ``total_items``; an empty list still has one page."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(1, -(-total_items // page_size))


def clamp_page(page: int, total_items: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(page, 0), page_count(total_items, page_size) - 1)


def paginate(items: Sequence[T], page: int = 0, page_size: int = PAGE_SIZE) -> Page[T]:
    """
    Return the window ``[page * page_size, min((page + 1) * page_size, n))``.

    Out-of-range page indexes are clamped to the first or last page.
    """
    total = len(items)
    total_pages = page_count(total, page_size)
    page = clamp_page(page, total, page_size)
    start = page * page_size
    stop = min(start + page_size, total)
    return Page(
        items=tuple(items[start:stop]),
        page=page,
        total_pages=total_pages,
        total_items=total,
        start=start,
        stop=stop,
    )
