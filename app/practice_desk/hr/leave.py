from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from practice_desk.core.errors import LeaveValidationError
from practice_desk.core.util import as_float

LOGGER = logging.getLogger(__name__)

LEAVE_SICK = "sick"


@dataclass(frozen=True)
class LeaveType:
    value: str
    total_days: int
    applicable_to: tuple[str, ...]
    auto_calculate: bool = False


LEAVE_TYPES: dict[str, LeaveType] = {
    "privilege": LeaveType("privilege", 15, ("male", "female")),
    "maternity": LeaveType("maternity", 182, ("female",), auto_calculate=True),
    "paternity": LeaveType("paternity", 15, ("male",), auto_calculate=True),
    "sick": LeaveType("sick", 999, ("male", "female")),
}


@dataclass(frozen=True)
class LeaveBalance:
    leave_type: str
    balance: float
    total_allocated: float = 0.0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LeaveBalance":
        return cls(
            leave_type=str(payload.get("leaveType") or payload.get("leave_type") or "").strip().lower(),
            balance=as_float(payload.get("balance"), default=0.0),
            total_allocated=as_float(payload.get("totalAllocated", payload.get("total_allocated")), default=0.0),
        )


@dataclass(frozen=True)
class WorkingDays:
    start_date: date
    end_date: date
    working_days: int
    total_days: int

    def describe(self) -> str:
        return (
            f"{self.working_days} working days out of {self.total_days} total days "
            "(excluding weekends and holidays)"
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "workingDays": self.working_days,
            "totalDays": self.total_days,
        }


def parse_date(value: Any, *, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise LeaveValidationError(f"Invalid {field}: {text or 'missing'}") from exc


def _holiday_dates(holidays: Iterable[Any] | None) -> list[date]:
    parsed: list[date] = []
    for item in holidays or ():
        raw = item.get("date") if isinstance(item, Mapping) else item
        try:
            parsed.append(parse_date(raw, field="holiday"))
        except LeaveValidationError:
            LOGGER.warning("Ignoring unparseable holiday date: %r", raw)
    return parsed


def calculate_working_days(start: Any, end: Any, holidays: Iterable[Any] | None = None) -> int:
    """Inclusive count of Monday-Friday dates that are not holidays."""
    first = parse_date(start, field="start date")
    last = parse_date(end, field="end date")
    if first > last:
        return 0
    days = pd.bdate_range(first, last, freq="C", holidays=_holiday_dates(holidays))
    return len(days)


def calculate_end_date(start: Any, working_days: int, holidays: Iterable[Any] | None = None) -> date:
    """Date on which the ``working_days``-th working day from ``start`` falls."""
    first = parse_date(start, field="start date")
    if int(working_days) <= 0:
        return first
    offset = pd.offsets.CustomBusinessDay(holidays=_holiday_dates(holidays))
    landing = offset.rollforward(pd.Timestamp(first))
    if int(working_days) > 1:
        landing = landing + pd.offsets.CustomBusinessDay(n=int(working_days) - 1, holidays=_holiday_dates(holidays))
    return landing.date()


def working_days_between(start: Any, end: Any, holidays: Iterable[Any] | None = None) -> WorkingDays:
    first = parse_date(start, field="start date")
    last = parse_date(end, field="end date")
    if first > last:
        raise LeaveValidationError("Start date cannot be after end date")
    return WorkingDays(
        start_date=first,
        end_date=last,
        working_days=calculate_working_days(first, last, holidays),
        total_days=(last - first).days + 1,
    )


def check_leave_balance(balances: Sequence[LeaveBalance], leave_type: str, required_days: float) -> None:
    kind = str(leave_type or "").strip().lower()
    if kind == LEAVE_SICK:
        return
    balance = next((item for item in balances if item.leave_type == kind), None)
    if balance is None:
        raise LeaveValidationError("Leave balance not found. Please contact HR.")
    if balance.balance < float(required_days):
        raise LeaveValidationError(
            f"Insufficient leave balance. Available: {balance.balance:g} days, Required: {float(required_days):g} days"
        )
