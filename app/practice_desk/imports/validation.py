"""
Row rules shared by live editing and the confirm gate.

These mirror the backend's bulk-upload checks so an operator sees the same
ledger entries locally that the server would report. Validators return
``RowError`` lists; they never raise.
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import urlsplit

from practice_desk.core.defaults import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_WEBSITE_LENGTH,
    MIN_PHONE_LENGTH,
)
from practice_desk.core.util import clean_text
from practice_desk.imports.models import PreviewClient, PreviewContact, RowError

FIELD_CONTACT_NAME = "Contact Name"
FIELD_CONTACT_EMAIL = "Contact Email"
FIELD_CONTACT_PHONE = "Contact Phone"
FIELD_CLIENT_NAME = "Client Name"
FIELD_CLIENT_INDUSTRY = "Client Industry"
FIELD_CLIENT_WEBSITE = "Client Website"
FIELD_CLIENT_CODE = "Client Code"

CLIENT_FIELD_NAMES = frozenset(
    {FIELD_CLIENT_NAME, FIELD_CLIENT_INDUSTRY, FIELD_CLIENT_WEBSITE, FIELD_CLIENT_CODE}
)

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
PHONE_PATTERN = re.compile(r"^[\d\s+\-().]+$")
_WHITESPACE = re.compile(r"\s")
_HOST_PATTERN = re.compile(r"^[A-Za-z0-9._~%!$&'()*+,;=:-]+$")


def is_valid_email(email: str | None) -> bool:
    value = str(email or "")
    return bool(EMAIL_PATTERN.fullmatch(value)) and len(value) <= MAX_EMAIL_LENGTH


def is_valid_phone(phone: str | None) -> bool:
    value = str(phone or "")
    if not value:
        return False
    digits = _WHITESPACE.sub("", value)
    return bool(PHONE_PATTERN.fullmatch(value)) and MIN_PHONE_LENGTH <= len(digits) <= MAX_PHONE_LENGTH


def normalize_website(url: str | None) -> str:
    value = str(url or "")
    if value.startswith("http://") or value.startswith("https://"):
        return value
    return f"https://{value}"


def is_valid_url(url: str | None) -> bool:
    value = str(url or "")
    if not value:
        return False
    candidate = normalize_website(value.strip())
    try:
        parts = urlsplit(candidate)
        # Reading the port validates it.
        _ = parts.port
    except ValueError:
        return False
    host = parts.hostname or ""
    if not host or _WHITESPACE.search(candidate) or not _HOST_PATTERN.match(host):
        return False
    return len(value) <= MAX_WEBSITE_LENGTH


def validate_contact_row(contact: PreviewContact) -> list[RowError]:
    row = contact.row_number
    if not contact.has_data:
        return []

    errors: list[RowError] = []
    name = str(contact.name or "")
    if not name.strip():
        errors.append(RowError(row, FIELD_CONTACT_NAME, "Contact name is required when contact data is present"))
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(
            RowError(row, FIELD_CONTACT_NAME, f"Contact name exceeds maximum length of {MAX_NAME_LENGTH} characters")
        )
    if clean_text(contact.email) and not is_valid_email(contact.email):
        errors.append(RowError(row, FIELD_CONTACT_EMAIL, "Invalid email format"))
    if clean_text(contact.phone) and not is_valid_phone(contact.phone):
        errors.append(RowError(row, FIELD_CONTACT_PHONE, "Invalid phone number format"))
    return errors


def validate_client_row(client: PreviewClient, first_row_number: int | None) -> list[RowError]:
    """Client errors land on the client's first contact row; none without one."""
    if not first_row_number or first_row_number <= 0:
        return []

    row = int(first_row_number)
    errors: list[RowError] = []
    name = str(client.name or "")
    if not name.strip():
        errors.append(RowError(row, FIELD_CLIENT_NAME, "Client name is required"))
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(
            RowError(row, FIELD_CLIENT_NAME, f"Client name exceeds maximum length of {MAX_NAME_LENGTH} characters")
        )
    if not clean_text(client.industry):
        errors.append(RowError(row, FIELD_CLIENT_INDUSTRY, "Client industry is required"))
    if clean_text(client.website) and not is_valid_url(client.website):
        errors.append(RowError(row, FIELD_CLIENT_WEBSITE, "Invalid website URL format"))
    return errors


def without_client_field_errors(errors: Iterable[RowError], rows: set[int]) -> list[RowError]:
    return [error for error in errors if not (error.row in rows and error.field in CLIENT_FIELD_NAMES)]
