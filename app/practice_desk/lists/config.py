"""
Per-table configuration for the list manager.

A ``ListConfig`` names the fields the pipeline is allowed to look at:
which fields the free-text query searches, which fields act as category
filters, which field the date presets apply to and how each sortable
field compares. Records themselves stay opaque mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

FIELD_TEXT = "text"
FIELD_NUMBER = "number"
FIELD_CODE = "code"
FIELD_DATE = "date"
FIELD_KINDS = (FIELD_TEXT, FIELD_NUMBER, FIELD_CODE, FIELD_DATE)


@dataclass(frozen=True)
class ListConfig:
    id_field: str
    search_fields: tuple[str, ...]
    category_fields: tuple[str, ...] = ()
    date_field: str | None = None
    field_kinds: Mapping[str, str] = field(default_factory=dict)

    def kind_of(self, key: str) -> str:
        kind = str(self.field_kinds.get(key) or FIELD_TEXT)
        return kind if kind in FIELD_KINDS else FIELD_TEXT


MATTER_LIST = ListConfig(
    id_field="matterId",
    search_fields=("matterTitle", "clientName", "matterId", "matterCode"),
    category_fields=("status", "practiceArea"),
    date_field="startDate",
    field_kinds={
        "matterId": FIELD_NUMBER,
        "matterCode": FIELD_CODE,
        "deadline": FIELD_DATE,
        "startDate": FIELD_DATE,
        "estimatedValue": FIELD_NUMBER,
    },
)

USER_LIST = ListConfig(
    id_field="id",
    search_fields=("name", "email", "phone", "designation"),
    category_fields=("role", "status", "location"),
    date_field="createdAt",
    field_kinds={
        "id": FIELD_NUMBER,
        "createdAt": FIELD_DATE,
        "lastLogin": FIELD_DATE,
    },
)

INVOICE_LIST = ListConfig(
    id_field="id",
    search_fields=("invoiceNumber", "clientName", "matterTitle"),
    category_fields=("status", "invoiceCurrency"),
    date_field="invoiceDate",
    field_kinds={
        "id": FIELD_NUMBER,
        "invoiceDate": FIELD_DATE,
        "dueDate": FIELD_DATE,
        "finalAmount": FIELD_NUMBER,
        "amountPaid": FIELD_NUMBER,
    },
)

LEAVE_LIST = ListConfig(
    id_field="id",
    search_fields=("userName", "leaveType", "reason"),
    category_fields=("status", "leaveType"),
    date_field="startDate",
    field_kinds={
        "id": FIELD_NUMBER,
        "startDate": FIELD_DATE,
        "endDate": FIELD_DATE,
        "totalDays": FIELD_NUMBER,
    },
)

BULK_CONTACT_LIST = ListConfig(
    id_field="row_number",
    search_fields=("name", "email", "phone", "client_name", "group_name"),
    category_fields=("group_name", "client_name"),
    field_kinds={"row_number": FIELD_NUMBER},
)
