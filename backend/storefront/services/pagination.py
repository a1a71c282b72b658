"""In-process pagination over an already ordered result set."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: list[T]
    total_count: int
    total_pages: int
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.page + 1 < self.total_pages


def paginate(items: Sequence[T], page: int, page_size: int) -> PageResult[T]:
    """Slice ``items`` for a zero-indexed ``page``.

    ``total_count`` is ``len(items)``. For the catalogue that is the number
    of variants left after the capped fetch, so it under-reports once the
    fetch cap is reached. Pages past the end are empty rather than errors.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    page = max(0, page)

    total_count = len(items)
    offset = page * page_size
    return PageResult(
        items=list(items[offset : offset + page_size]),
        total_count=total_count,
        total_pages=math.ceil(total_count / page_size),
        page=page,
        page_size=page_size,
    )
