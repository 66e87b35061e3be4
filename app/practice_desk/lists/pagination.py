from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Sequence

from practice_desk.core.defaults import DEFAULT_PAGE_SIZE, PAGE_LINKS_MAX_VISIBLE

PAGE_GAP = "..."


def page_count(total_items: int, items_per_page: int) -> int:
    if items_per_page <= 0:
        raise ValueError("items_per_page must be positive.")
    return math.ceil(max(0, int(total_items)) / int(items_per_page))


@dataclass(frozen=True)
class PaginationState:
    current_page: int = 1
    items_per_page: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if int(self.items_per_page) <= 0:
            raise ValueError("items_per_page must be positive.")
        if int(self.current_page) < 1:
            object.__setattr__(self, "current_page", 1)

    def total_pages(self, total_items: int) -> int:
        return page_count(total_items, self.items_per_page)

    def first_page(self) -> "PaginationState":
        return replace(self, current_page=1)

    def clamped(self, total_items: int) -> "PaginationState":
        last_page = max(1, self.total_pages(total_items))
        return replace(self, current_page=min(max(1, self.current_page), last_page))

    def with_page(self, page: int) -> "PaginationState":
        return replace(self, current_page=max(1, int(page or 1)))

    def with_page_size(self, items_per_page: int, total_items: int) -> "PaginationState":
        return replace(self, items_per_page=int(items_per_page)).clamped(total_items)


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total_items: int
    current_page: int
    items_per_page: int

    @property
    def total_pages(self) -> int:
        return page_count(self.total_items, self.items_per_page)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def start_item(self) -> int:
        if not self.items:
            return 0
        return (self.current_page - 1) * self.items_per_page + 1

    @property
    def end_item(self) -> int:
        return min(self.current_page * self.items_per_page, self.total_items)

    def summary_text(self) -> str:
        noun = "result" if self.total_items == 1 else "results"
        return f"Showing {self.start_item} to {self.end_item} of {self.total_items} {noun}"


def paginate(records: Sequence[Any], state: PaginationState) -> Page:
    start = (state.current_page - 1) * state.items_per_page
    end = state.current_page * state.items_per_page
    return Page(
        items=list(records[start:end]),
        total_items=len(records),
        current_page=state.current_page,
        items_per_page=state.items_per_page,
    )


def page_numbers(
    current_page: int,
    total_pages: int,
    *,
    max_visible: int = PAGE_LINKS_MAX_VISIBLE,
) -> list[int | str]:
    """Page links for a pager, collapsing long runs into ``"..."`` gaps."""
    if total_pages <= max_visible + 2:
        return list(range(1, total_pages + 1))

    pages: list[int | str] = [1]
    start = max(2, current_page - max_visible // 2)
    end = min(total_pages - 1, start + max_visible - 1)
    if end == total_pages - 1:
        start = max(2, end - max_visible + 1)
    if start > 2:
        pages.append(PAGE_GAP)
    pages.extend(range(start, end + 1))
    if end < total_pages - 1:
        pages.append(PAGE_GAP)
    pages.append(total_pages)
    return pages
