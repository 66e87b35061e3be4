from __future__ import annotations

from copy import deepcopy
from typing import Any

import pytest

_MATTERS: list[dict[str, Any]] = [
    {
        "matterId": 1,
        "matterTitle": "Acme Corp merger",
        "clientName": "Acme Corp",
        "matterCode": "0086-0014",
        "status": "Active",
        "practiceArea": "Corporate",
        "startDate": "2025-01-06",
        "deadline": "2025-03-01",
    },
    {
        "matterId": 2,
        "matterTitle": "Lease review",
        "clientName": "Acme, Inc.",
        "matterCode": "0086-0002",
        "status": "Closed",
        "practiceArea": "Real Estate",
        "startDate": "2025-01-15",
        "deadline": "No deadline",
    },
    {
        "matterId": 3,
        "matterTitle": "Patent filing",
        "clientName": "Globex",
        "matterCode": "0100-0100",
        "status": "Active",
        "practiceArea": "IP",
        "startDate": "2024-12-30",
        "deadline": "2025-01-15",
    },
    {
        "matterId": 4,
        "matterTitle": "Untitled",
        "clientName": None,
        "matterCode": None,
        "status": "On Hold",
        "practiceArea": "Corporate",
        "startDate": "not a date",
        "deadline": None,
    },
]

_PREVIEW: dict[str, Any] = {
    "groups": [
        {"name": "North", "description": None, "exists": False, "existingId": None},
        {"name": "South", "description": "Southern accounts", "exists": True, "existingId": 7},
    ],
    "clients": [
        {
            "name": "Acme Corp",
            "industry": "Manufacturing",
            "website": "acme.com",
            "groupName": "North",
            "exists": False,
        },
        {
            "name": "Globex",
            "industry": "",
            "groupName": "North",
            "exists": True,
            "existingId": 3,
        },
        {
            "name": "Initech",
            "industry": "Software",
            "groupName": "South",
            "exists": False,
        },
    ],
    "contacts": [
        {
            "rowNumber": 2,
            "name": "Jane",
            "email": "jane@acme.com",
            "phone": "+1 555 123 4567",
            "clientName": "Acme Corp",
            "groupName": "North",
            "isPrimary": True,
        },
        {
            "rowNumber": 3,
            "name": "",
            "email": "bad-email",
            "clientName": "Acme Corp",
            "groupName": "North",
        },
        {
            "rowNumber": 4,
            "name": "Hank",
            "email": "hank@globex.com",
            "clientName": "Globex",
            "groupName": "North",
        },
        {
            "rowNumber": 5,
            "name": "Peter",
            "email": "peter@initech.com",
            "clientName": "Initech",
            "groupName": "South",
        },
    ],
    "errors": [
        {"row": 3, "field": "Contact Name", "message": "Contact name is required when contact data is present"},
        {"row": 3, "field": "Contact Email", "message": "Invalid email format"},
        {"row": 4, "field": "Client Industry", "message": "Client industry is required"},
    ],
    "warnings": [
        {"row": 4, "message": "Client already exists and will be reused"},
        {"row": 2, "message": "Duplicate email in file"},
    ],
}


@pytest.fixture()
def matter_records() -> list[dict[str, Any]]:
    return deepcopy(_MATTERS)


@pytest.fixture()
def preview_payload() -> dict[str, Any]:
    return deepcopy(_PREVIEW)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("PDESK_ENV", "dev")
    monkeypatch.setenv("PDESK_BACKEND_URL", "http://backend.test")
    monkeypatch.setenv("PDESK_LAYOUT_DIR", str(tmp_path / "layouts"))
    monkeypatch.delenv("PDESK_BACKEND_TOKEN", raising=False)
    monkeypatch.delenv("PDESK_DEFAULT_PAGE_SIZE", raising=False)
