from __future__ import annotations

import sys
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.imports import (  # noqa: E402
    PreviewClient,
    PreviewContact,
    RowError,
    is_valid_email,
    is_valid_phone,
    is_valid_url,
    validate_client_row,
    validate_contact_row,
)
from practice_desk.imports.validation import without_client_field_errors  # noqa: E402


@pytest.mark.parametrize(
    ("email", "expected"),
    [
        ("jane.doe@example.com", True),
        ("a@b", True),
        ("bad@", False),
        ("no-at-sign", False),
        ("x" * 250 + "@example.com", False),
    ],
)
def test_email_rule(email: str, expected: bool) -> None:
    assert is_valid_email(email) is expected


@pytest.mark.parametrize(
    ("phone", "expected"),
    [
        ("+91 98765 43210", True),
        ("(555) 123-4567", True),
        ("123", False),
        ("12ab3456789", False),
        ("1" * 21, False),
    ],
)
def test_phone_rule(phone: str, expected: bool) -> None:
    assert is_valid_phone(phone) is expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("example.com", True),
        ("https://example.com/path?q=1", True),
        ("http://exa mple.com", False),
        ("", False),
        ("example.com/" + "a" * 500, False),
    ],
)
def test_website_rule(url: str, expected: bool) -> None:
    assert is_valid_url(url) is expected


def test_contact_without_any_data_is_not_an_error() -> None:
    contact = PreviewContact(row_number=7, name="", email="", phone=None)

    assert validate_contact_row(contact) == []


def test_contact_with_name_and_bad_email_has_exactly_one_error() -> None:
    contact = PreviewContact(row_number=7, name="Jane", email="not-an-email")

    errors = validate_contact_row(contact)

    assert errors == [RowError(7, "Contact Email", "Invalid email format")]


def test_contact_data_without_name_requires_name() -> None:
    errors = validate_contact_row(PreviewContact(row_number=3, phone="+1 555 123 4567"))

    assert [error.field for error in errors] == ["Contact Name"]


def test_contact_name_length_and_phone_format() -> None:
    errors = validate_contact_row(PreviewContact(row_number=3, name="n" * 256, phone="call me"))

    assert [error.field for error in errors] == ["Contact Name", "Contact Phone"]
    assert "255" in errors[0].message


def test_client_errors_land_on_first_contact_row() -> None:
    client = PreviewClient(name="", industry=None, website="bad url")

    errors = validate_client_row(client, 12)

    assert {error.row for error in errors} == {12}
    assert [error.field for error in errors] == ["Client Name", "Client Industry", "Client Website"]


def test_client_without_contact_rows_reports_nothing() -> None:
    client = PreviewClient(name="", industry=None)

    assert validate_client_row(client, None) == []
    assert validate_client_row(client, 0) == []


def test_without_client_field_errors_keeps_contact_entries() -> None:
    errors = [
        RowError(4, "Client Industry", "Client industry is required"),
        RowError(4, "Contact Email", "Invalid email format"),
        RowError(5, "Client Name", "Client name is required"),
    ]

    kept = without_client_field_errors(errors, {4})

    assert kept == [errors[1], errors[2]]
