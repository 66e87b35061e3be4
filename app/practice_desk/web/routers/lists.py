from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Query

from practice_desk.core.defaults import DATE_PRESET_ALL_TIME
from practice_desk.lists import (
    MATTER_LIST,
    USER_LIST,
    FilterState,
    ListConfig,
    ListManager,
    PaginationState,
    SortState,
)
from practice_desk.web.runtime import get_backend, get_config

router = APIRouter(prefix="/api")


def list_view_payload(
    records: list[dict[str, Any]],
    config: ListConfig,
    *,
    q: str,
    categories: dict[str, list[str] | None],
    date_preset: str,
    date_from: date | None,
    date_to: date | None,
    sort_by: str | None,
    sort_dir: str | None,
    page: int,
    page_size: int | None,
) -> dict[str, Any]:
    filters = FilterState().with_query(q)
    for key, values in categories.items():
        if values:
            filters = filters.with_categories(key, values)
    if date_from is not None or date_to is not None:
        filters = filters.with_date_range(date_from, date_to)
    else:
        filters = filters.with_date_preset(date_preset)

    manager = ListManager(config, records)
    manager.restore(
        filters=filters,
        sort=SortState.from_params(sort_by, sort_dir),
        pagination=PaginationState(
            current_page=max(1, int(page)),
            items_per_page=int(page_size or get_config().default_page_size),
        ),
    )
    return {"ok": True, **manager.view().to_payload()}


@router.get("/matters")
def api_matters(
    q: str = "",
    status: list[str] | None = Query(default=None),
    practice_area: list[str] | None = Query(default=None, alias="practiceArea"),
    date_preset: str = Query(default=DATE_PRESET_ALL_TIME, alias="datePreset"),
    date_from: date | None = Query(default=None, alias="dateFrom"),
    date_to: date | None = Query(default=None, alias="dateTo"),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_dir: str | None = Query(default=None, alias="sortDir"),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, alias="pageSize", ge=1, le=100),
):
    records = get_backend().list_matters()
    return list_view_payload(
        records,
        MATTER_LIST,
        q=q,
        categories={"status": status, "practiceArea": practice_area},
        date_preset=date_preset,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_dir=sort_dir,
        page=page,
        page_size=page_size,
    )


@router.get("/users")
def api_users(
    q: str = "",
    role: list[str] | None = Query(default=None),
    status: list[str] | None = Query(default=None),
    location: list[str] | None = Query(default=None),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_dir: str | None = Query(default=None, alias="sortDir"),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, alias="pageSize", ge=1, le=100),
):
    records = get_backend().list_users()
    return list_view_payload(
        records,
        USER_LIST,
        q=q,
        categories={"role": role, "status": status, "location": location},
        date_preset=DATE_PRESET_ALL_TIME,
        date_from=None,
        date_to=None,
        sort_by=sort_by,
        sort_dir=sort_dir,
        page=page,
        page_size=page_size,
    )
