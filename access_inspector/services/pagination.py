from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    effective_page: int
    total_pages: int
    page_size: int
    total_items: int
    items: tuple[T, ...]
    summary: str

    @property
    def can_go_previous(self) -> bool:
        return self.effective_page > 1

    @property
    def can_go_next(self) -> bool:
        return self.effective_page < self.total_pages


def count_pages(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page size must be positive")
    return max(1, math.ceil(total_items / page_size))


def build_page_summary(total_items: int, effective_page: int, page_size: int) -> str:
    if total_items == 0:
        return "0 users"
    start = (effective_page - 1) * page_size + 1
    end = min(start + page_size - 1, total_items)
    return f"Showing {start}-{end} of {total_items} users"


def paginate(records: Sequence[T], page_size: int, requested_page: int) -> Page[T]:
    total_items = len(records)
    total_pages = count_pages(total_items, page_size)
    effective_page = max(1, min(requested_page, total_pages))
    start_index = (effective_page - 1) * page_size
    return Page(
        effective_page=effective_page,
        total_pages=total_pages,
        page_size=page_size,
        total_items=total_items,
        items=tuple(records[start_index : start_index + page_size]),
        summary=build_page_summary(total_items, effective_page, page_size),
    )
