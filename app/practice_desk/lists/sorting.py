from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import pandas as pd

from practice_desk.lists.config import FIELD_CODE, FIELD_DATE, FIELD_NUMBER, ListConfig
from practice_desk.lists.frames import column, is_blank, records_frame, select, to_timestamps

SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)


@dataclass(frozen=True)
class SortState:
    key: str | None = None
    direction: str | None = None

    @property
    def is_active(self) -> bool:
        return bool(self.key) and self.direction in SORT_DIRECTIONS

    @classmethod
    def from_params(cls, sort_by: str | None, sort_dir: str | None) -> "SortState":
        key = str(sort_by or "").strip()
        direction = str(sort_dir or "").strip().lower()
        if not key or direction not in SORT_DIRECTIONS:
            return cls()
        return cls(key=key, direction=direction)


def next_sort_state(current: SortState, key: str) -> SortState:
    """Advance the column header cycle: unsorted -> asc -> desc -> unsorted."""
    if current.key == key:
        if current.direction == SORT_ASC:
            return SortState(key=key, direction=SORT_DESC)
        if current.direction == SORT_DESC:
            return SortState()
    return SortState(key=key, direction=SORT_ASC)


def _code_number(value: Any) -> Any:
    if is_blank(value):
        return None
    text = str(value).strip()
    if "-" in text:
        parts = text.split("-")
        text = parts[1] if len(parts) > 1 else ""
    return text or None


def _text_key(value: Any) -> Any:
    if is_blank(value):
        return None
    return str(value).casefold()


def sort_key_series(values: pd.Series, kind: str) -> pd.Series:
    if kind == FIELD_NUMBER:
        return pd.to_numeric(values, errors="coerce")
    if kind == FIELD_CODE:
        return pd.to_numeric(values.map(_code_number), errors="coerce")
    if kind == FIELD_DATE:
        return to_timestamps(values)
    return values.map(_text_key)


def apply_sort(records: Sequence[Any], state: SortState, config: ListConfig) -> list[Any]:
    if not records or not state.is_active:
        return list(records)
    frame = records_frame(records)
    if state.key not in frame.columns:
        return list(records)
    keys = sort_key_series(column(frame, state.key), config.kind_of(str(state.key)))
    ordered = keys.sort_values(
        ascending=state.direction == SORT_ASC,
        kind="mergesort",
        na_position="last",
    )
    return select(records, ordered.index.tolist())
