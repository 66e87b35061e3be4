from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable, Sequence

from practice_desk.core.defaults import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from practice_desk.lists.config import ListConfig
from practice_desk.lists.filters import FilterState, apply_filters
from practice_desk.lists.pagination import Page, PaginationState, page_numbers, paginate
from practice_desk.lists.sorting import SortState, apply_sort, next_sort_state

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListView:
    page: Page
    filtered_total: int
    unfiltered_total: int
    filters: FilterState
    sort: SortState
    page_links: list[int | str]

    @property
    def items(self) -> list[Any]:
        return self.page.items

    @property
    def total_pages(self) -> int:
        # Pagers always render at least one page.
        return max(1, self.page.total_pages)

    def to_payload(self) -> dict[str, Any]:
        return {
            "items": list(self.page.items),
            "totalItems": self.filtered_total,
            "unfilteredTotal": self.unfiltered_total,
            "currentPage": self.page.current_page,
            "itemsPerPage": self.page.items_per_page,
            "totalPages": self.total_pages,
            "pageNumbers": list(self.page_links),
            "summary": self.page.summary_text() if self.filtered_total else "",
            "sortKey": self.sort.key,
            "sortDirection": self.sort.direction,
        }


class ListManager:
    """Filter, sort and paginate one in-memory collection.

    Every filter or sort change sends the pager back to page 1; a page-size
    change keeps the current page when it still exists.
    """

    def __init__(
        self,
        config: ListConfig,
        records: Sequence[Any] | None = None,
        *,
        items_per_page: int = DEFAULT_PAGE_SIZE,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self.config = config
        self._records: list[Any] = list(records or [])
        self._filters = FilterState()
        self._sort = SortState()
        self._pagination = PaginationState(current_page=1, items_per_page=int(items_per_page))
        self._today_provider = today_provider or date.today
        self._page_reset_listeners: list[Callable[[], None]] = []

    @property
    def records(self) -> list[Any]:
        return list(self._records)

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def sort(self) -> SortState:
        return self._sort

    @property
    def pagination(self) -> PaginationState:
        return self._pagination

    def on_page_reset(self, listener: Callable[[], None]) -> None:
        self._page_reset_listeners.append(listener)

    def _reset_page(self) -> None:
        self._pagination = self._pagination.first_page()
        for listener in list(self._page_reset_listeners):
            listener()

    def _set_filters(self, filters: FilterState) -> None:
        self._filters = filters
        self._reset_page()

    def set_query(self, query: str) -> None:
        self._set_filters(self._filters.with_query(query))

    def set_categories(self, key: str, values: Sequence[str] | str | None) -> None:
        self._set_filters(self._filters.with_categories(key, values))

    def set_date_preset(self, preset: str) -> None:
        self._set_filters(self._filters.with_date_preset(preset))

    def set_date_range(self, date_from: date | None, date_to: date | None) -> None:
        self._set_filters(self._filters.with_date_range(date_from, date_to))

    def clear_filters(self) -> None:
        self._set_filters(FilterState())

    def toggle_sort(self, key: str) -> SortState:
        self._sort = next_sort_state(self._sort, key)
        self._reset_page()
        return self._sort

    def set_sort(self, sort: SortState) -> None:
        self._sort = sort
        self._reset_page()

    def set_page(self, page: int) -> None:
        self._pagination = self._pagination.with_page(page).clamped(len(self.filtered()))

    def set_page_size(self, items_per_page: int) -> None:
        size = int(items_per_page)
        if size not in PAGE_SIZE_OPTIONS:
            LOGGER.debug("Non-standard page size requested: %s", size)
        self._pagination = self._pagination.with_page_size(size, len(self.filtered()))

    def replace_records(self, records: Sequence[Any]) -> None:
        """Swap in a refetched collection, keeping filters, sort and a valid page."""
        self._records = list(records or [])
        self._pagination = self._pagination.clamped(len(self.filtered()))

    def filtered(self) -> list[Any]:
        return apply_filters(self._records, self._filters, self.config, today=self._today_provider())

    def ordered(self) -> list[Any]:
        return apply_sort(self.filtered(), self._sort, self.config)

    def view(self) -> ListView:
        ordered = self.ordered()
        state = self._pagination.clamped(len(ordered))
        page = paginate(ordered, state)
        return ListView(
            page=page,
            filtered_total=len(ordered),
            unfiltered_total=len(self._records),
            filters=self._filters,
            sort=self._sort,
            page_links=page_numbers(state.current_page, max(1, page.total_pages)),
        )

    def restore(
        self,
        *,
        filters: FilterState | None = None,
        sort: SortState | None = None,
        pagination: PaginationState | None = None,
    ) -> None:
        """Load a full state at once, as a stateless request does; no page reset."""
        if filters is not None:
            self._filters = filters
        if sort is not None:
            self._sort = sort
        if pagination is not None:
            self._pagination = replace(pagination)
