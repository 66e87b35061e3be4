from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Sequence

import pandas as pd

from practice_desk.core.defaults import (
    DATE_PRESET_ALL_TIME,
    DATE_PRESET_THIS_MONTH,
    DATE_PRESET_THIS_WEEK,
    DATE_PRESET_TODAY,
    DATE_PRESETS,
    FILTER_OPTION_ALL,
)
from practice_desk.lists.config import ListConfig
from practice_desk.lists.frames import column, is_blank, records_frame, select, to_timestamps


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    categories: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    date_preset: str = DATE_PRESET_ALL_TIME
    date_from: date | None = None
    date_to: date | None = None

    @property
    def normalized_query(self) -> str:
        return str(self.query or "").strip().lower()

    def active_categories(self) -> dict[str, set[str]]:
        active: dict[str, set[str]] = {}
        for key, values in dict(self.categories or {}).items():
            selected = {str(value) for value in values or () if str(value) and str(value) != FILTER_OPTION_ALL}
            if selected:
                active[str(key)] = selected
        return active

    @property
    def is_default(self) -> bool:
        return (
            not self.normalized_query
            and not self.active_categories()
            and date_window(self) is None
        )

    def with_query(self, query: str) -> "FilterState":
        return replace(self, query=str(query or ""))

    def with_categories(self, key: str, values: Sequence[str] | str | None) -> "FilterState":
        updated = dict(self.categories or {})
        if values is None:
            selected: tuple[str, ...] = ()
        elif isinstance(values, str):
            selected = (values,)
        else:
            selected = tuple(str(value) for value in values)
        updated[str(key)] = selected
        return replace(self, categories=updated)

    def with_date_preset(self, preset: str) -> "FilterState":
        cleaned = str(preset or "").strip()
        if cleaned not in DATE_PRESETS:
            cleaned = DATE_PRESET_ALL_TIME
        return replace(self, date_preset=cleaned, date_from=None, date_to=None)

    def with_date_range(self, date_from: date | None, date_to: date | None) -> "FilterState":
        return replace(self, date_preset=DATE_PRESET_ALL_TIME, date_from=date_from, date_to=date_to)


def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min)


def _day_end(value: date) -> datetime:
    return datetime.combine(value, time.max)


def date_window(state: FilterState, *, today: date | None = None) -> tuple[datetime | None, datetime | None] | None:
    """Return the inclusive ``[from, to]`` window for the state, or None when unbounded."""
    if state.date_from is not None or state.date_to is not None:
        lower = _day_start(state.date_from) if state.date_from is not None else None
        upper = _day_end(state.date_to) if state.date_to is not None else None
        return lower, upper

    current = today or date.today()
    preset = state.date_preset
    if preset == DATE_PRESET_TODAY:
        return _day_start(current), _day_end(current)
    if preset == DATE_PRESET_THIS_WEEK:
        # Weeks run Sunday through Saturday.
        week_start = current - timedelta(days=(current.weekday() + 1) % 7)
        return _day_start(week_start), _day_end(week_start + timedelta(days=6))
    if preset == DATE_PRESET_THIS_MONTH:
        month_start = current.replace(day=1)
        next_month = (month_start + timedelta(days=32)).replace(day=1)
        return _day_start(month_start), _day_end(next_month - timedelta(days=1))
    return None


def _text_mask(frame: pd.DataFrame, fields: Sequence[str], query: str) -> pd.Series:
    mask = pd.Series(False, index=frame.index)
    for name in fields:
        values = column(frame, name).map(lambda value: "" if is_blank(value) else str(value))
        mask |= values.str.lower().str.contains(query, regex=False, na=False)
    return mask


def _category_mask(frame: pd.DataFrame, name: str, selected: set[str]) -> pd.Series:
    values = column(frame, name)
    return values.map(lambda value: not is_blank(value) and str(value) in selected).astype(bool)


def _date_mask(
    frame: pd.DataFrame,
    name: str | None,
    window: tuple[datetime | None, datetime | None],
) -> pd.Series:
    stamps = to_timestamps(column(frame, name))
    lower, upper = window
    mask = stamps.notna()
    if lower is not None:
        mask &= stamps >= pd.Timestamp(lower)
    if upper is not None:
        mask &= stamps <= pd.Timestamp(upper)
    return mask.fillna(False).astype(bool)


def filter_mask(
    frame: pd.DataFrame,
    state: FilterState,
    config: ListConfig,
    *,
    today: date | None = None,
) -> pd.Series:
    mask = pd.Series(True, index=frame.index)
    query = state.normalized_query
    if query:
        mask &= _text_mask(frame, config.search_fields, query)
    for name, selected in state.active_categories().items():
        mask &= _category_mask(frame, name, selected)
    window = date_window(state, today=today)
    if window is not None:
        mask &= _date_mask(frame, config.date_field, window)
    return mask


def apply_filters(
    records: Sequence[Any],
    state: FilterState,
    config: ListConfig,
    *,
    today: date | None = None,
) -> list[Any]:
    if not records or state.is_default:
        return list(records)
    frame = records_frame(records)
    mask = filter_mask(frame, state, config, today=today)
    return select(records, frame.index[mask.to_numpy()].tolist())
