from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Mapping, Sequence

import pandas as pd

from practice_desk.core.defaults import NO_DATE_MARKERS


def _as_row(record: Any) -> dict[str, Any]:
    if isinstance(record, Mapping):
        return dict(record)
    if is_dataclass(record) and not isinstance(record, type):
        return asdict(record)
    return dict(getattr(record, "__dict__", {}) or {})


def records_frame(records: Sequence[Any]) -> pd.DataFrame:
    """Build a positional frame; row ``i`` always maps back to ``records[i]``.

    Columns stay ``object`` so an int field missing on some records is not
    upcast to float (``1`` must still read as ``"1"``, not ``"1.0"``).
    """
    rows = [_as_row(record) for record in records]
    return pd.DataFrame(rows, index=pd.RangeIndex(len(rows)), dtype=object)


def column(frame: pd.DataFrame, name: str | None) -> pd.Series:
    if name and name in frame.columns:
        return frame[name]
    return pd.Series([None] * len(frame.index), index=frame.index, dtype="object")


def to_timestamps(values: pd.Series) -> pd.Series:
    cleaned = values.map(_blank_date_to_none)
    parsed = pd.to_datetime(cleaned, errors="coerce", utc=True, format="mixed")
    return parsed.dt.tz_localize(None)


def _blank_date_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text or text.lower() in NO_DATE_MARKERS:
            return None
        return text
    return value


def select(records: Sequence[Any], positions: Sequence[int]) -> list[Any]:
    return [records[int(position)] for position in positions]


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and bool(pd.isna(value))
