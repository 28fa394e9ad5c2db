"""Fixed-size page slicing and page-count metadata.

Pages are 1-based. :func:`paginate` assumes ``page`` is already valid; callers
clamp it first with :func:`clamp_page` (the state reducer does this on every
recompute).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Generic, NamedTuple, TypeVar

T = TypeVar("T")

PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 25, 50)


class Page(NamedTuple, Generic[T]):
    rows: list[T]
    total_pages: int


def _check_page_size(page_size: int) -> None:
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ValueError("page_size must be a positive integer")


def total_pages(count: int, page_size: int) -> int:
    """Return ``ceil(count / page_size)``; ``0`` when there is nothing to show."""

    _check_page_size(page_size)
    return math.ceil(count / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Clamp ``page`` into ``[1, pages]``, or ``1`` when there are no pages."""

    if pages == 0:
        return 1
    return min(max(1, page), pages)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` to the rows on ``page`` and report the page count."""

    pages = total_pages(len(items), page_size)
    start = (page - 1) * page_size
    return Page(list(items[start : start + page_size]), pages)


def row_range(page: int, page_size: int, total: int) -> tuple[int, int]:
    """Return the 1-based ``(first_row, last_row)`` shown on ``page``.

    ``(0, 0)`` when ``total`` is zero.
    """

    if total == 0:
        return 0, 0
    return (page - 1) * page_size + 1, min(page * page_size, total)


__all__ = ["PAGE_SIZE_OPTIONS", "Page", "clamp_page", "paginate", "row_range", "total_pages"]
