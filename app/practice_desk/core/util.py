from __future__ import annotations

import math
from typing import Any

TRUE_LIKE_VALUES = {"1", "true", "yes", "y", "on"}


def as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_LIKE_VALUES


def to_number(value: Any) -> float | None:
    """Read JSON numbers, env strings and grouped amounts like ``"12,34,567.89"``."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _bounded(parsed: float, min_value: float | None, max_value: float | None) -> float:
    if min_value is not None:
        parsed = max(min_value, parsed)
    if max_value is not None:
        parsed = min(max_value, parsed)
    return parsed


def as_int(
    value: Any,
    *,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    number = to_number(value)
    parsed = int(default) if number is None else int(number)
    return int(_bounded(parsed, min_value, max_value))


def as_float(
    value: Any,
    *,
    default: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    number = to_number(value)
    parsed = float(default) if number is None else number
    return float(_bounded(parsed, min_value, max_value))


def clean_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
