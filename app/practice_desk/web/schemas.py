from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactPatch(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    designation: str | None = None
    is_primary: bool | None = None
    notes: str | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None


class ClientPatch(CamelModel):
    name: str | None = None
    industry: str | None = None
    website: str | None = None
    address: str | None = None
    code: str | None = None
    notes: str | None = None


class TspContactIn(CamelModel):
    id: int
    name: str = ""
    email: str = ""


class HolidayIn(CamelModel):
    date: str
    name: str | None = None


class WorkingDaysRequest(CamelModel):
    start_date: str
    end_date: str
    holidays: list[HolidayIn] = Field(default_factory=list)


class EndDateRequest(CamelModel):
    start_date: str
    working_days: int = Field(..., ge=0)
    holidays: list[HolidayIn] = Field(default_factory=list)


class LeaveBalanceIn(CamelModel):
    leave_type: str
    balance: float
    total_allocated: float = 0.0


class BalanceCheckRequest(CamelModel):
    leave_type: str
    required_days: float = Field(..., ge=0)
    balances: list[LeaveBalanceIn] = Field(default_factory=list)


class AddWidgetRequest(CamelModel):
    widget_id: str


class LayoutChangeRequest(CamelModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
