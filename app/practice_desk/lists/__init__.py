from practice_desk.lists.config import (
    BULK_CONTACT_LIST,
    FIELD_CODE,
    FIELD_DATE,
    FIELD_NUMBER,
    FIELD_TEXT,
    INVOICE_LIST,
    LEAVE_LIST,
    MATTER_LIST,
    USER_LIST,
    ListConfig,
)
from practice_desk.lists.filters import FilterState, apply_filters, date_window
from practice_desk.lists.manager import ListManager, ListView
from practice_desk.lists.pagination import Page, PaginationState, page_count, page_numbers, paginate
from practice_desk.lists.sorting import SortState, apply_sort, next_sort_state

__all__ = [
    "BULK_CONTACT_LIST",
    "FIELD_CODE",
    "FIELD_DATE",
    "FIELD_NUMBER",
    "FIELD_TEXT",
    "FilterState",
    "INVOICE_LIST",
    "LEAVE_LIST",
    "ListConfig",
    "ListManager",
    "ListView",
    "MATTER_LIST",
    "Page",
    "PaginationState",
    "SortState",
    "USER_LIST",
    "apply_filters",
    "apply_sort",
    "date_window",
    "next_sort_state",
    "page_count",
    "page_numbers",
    "paginate",
]
