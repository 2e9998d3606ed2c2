# Standard library imports
from collections.abc import Sequence
from dataclasses import dataclass
import math
from typing import Generic, TypeVar

ItemT = TypeVar("ItemT")


@dataclass(frozen=True)
class Page(Generic[ItemT]):
    items: list[ItemT]
    page: int
    total_pages: int
    total: int
    per_page: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def count_pages(total: int, per_page: int) -> int:
    """ceil(total / per_page), but never less than one page."""
    if per_page <= 0:
        raise ValueError("per_page must be a positive integer")
    return max(1, math.ceil(total / per_page))


def paginate(items: Sequence[ItemT], per_page: int, requested_page: int = 1) -> Page[ItemT]:
    """
    Slice ``items`` into 1-based pages.

    A requested page past the end is clamped to the last page and one below 1 is
    treated as page 1; the returned ``page`` is the effective page the caller
    should store.
    """
    total_pages = count_pages(len(items), per_page)
    page = min(max(requested_page, 1), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=list(items[start : start + per_page]),
        page=page,
        total_pages=total_pages,
        total=len(items),
        per_page=per_page,
    )


def visible_page_numbers(page: int, total_pages: int) -> list[int]:
    """Page links to render: first, last, and the pages around the current one."""
    return [n for n in range(1, total_pages + 1) if n == 1 or n == total_pages or page - 1 <= n <= page + 1]
