from __future__ import annotations

from fastapi import APIRouter

from practice_desk.hr.leave import (
    LEAVE_TYPES,
    LeaveBalance,
    calculate_end_date,
    check_leave_balance,
    working_days_between,
)
from practice_desk.web.schemas import BalanceCheckRequest, EndDateRequest, WorkingDaysRequest

router = APIRouter(prefix="/api/leaves")


@router.get("/types")
def api_leave_types():
    return {
        "ok": True,
        "types": [
            {
                "value": leave_type.value,
                "totalDays": leave_type.total_days,
                "applicableTo": list(leave_type.applicable_to),
                "autoCalculate": leave_type.auto_calculate,
            }
            for leave_type in LEAVE_TYPES.values()
        ],
    }


@router.post("/working-days")
def api_working_days(body: WorkingDaysRequest):
    result = working_days_between(body.start_date, body.end_date, [item.date for item in body.holidays])
    return {"ok": True, **result.to_payload(), "info": result.describe()}


@router.post("/end-date")
def api_end_date(body: EndDateRequest):
    end_date = calculate_end_date(body.start_date, body.working_days, [item.date for item in body.holidays])
    return {
        "ok": True,
        "startDate": body.start_date,
        "endDate": end_date.isoformat(),
        "workingDays": body.working_days,
        "info": f"{body.working_days} working days (excluding weekends and holidays)",
    }


@router.post("/balance-check")
def api_balance_check(body: BalanceCheckRequest):
    balances = [
        LeaveBalance(leave_type=item.leave_type.strip().lower(), balance=item.balance, total_allocated=item.total_allocated)
        for item in body.balances
    ]
    check_leave_balance(balances, body.leave_type, body.required_days)
    return {"ok": True}
