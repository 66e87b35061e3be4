"""
Bulk-upload preview batch.

The backend sends the parsed spreadsheet as camelCase JSON. These dataclasses
hold it in snake_case while the operator edits it; ``to_payload`` writes the
exact wire shape back so the batch can be posted for confirmation or for the
corrected spreadsheet download.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping

from practice_desk.core.errors import BackendApiError
from practice_desk.core.util import as_bool, as_int, clean_text


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> int | None:
    if value is None or str(value).strip() == "":
        return None
    return as_int(value, default=0)


@dataclass
class TspContactUser:
    id: int
    name: str = ""
    email: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TspContactUser":
        return cls(
            id=as_int(payload.get("id"), default=0),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass
class PreviewGroup:
    name: str
    description: str | None = None
    exists: bool = False
    existing_id: int | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PreviewGroup":
        return cls(
            name=str(payload.get("name") or ""),
            description=_optional_text(payload.get("description")),
            exists=as_bool(payload.get("exists")),
            existing_id=_optional_int(payload.get("existingId")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "exists": self.exists,
            "existingId": self.existing_id,
        }


@dataclass
class PreviewClient:
    name: str
    industry: str | None = None
    website: str | None = None
    address: str | None = None
    code: str | None = None
    notes: str | None = None
    tsp_contact: str | None = None
    tsp_contact_users: list[TspContactUser] = field(default_factory=list)
    group_name: str = ""
    exists: bool = False
    existing_id: int | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.group_name, self.name)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PreviewClient":
        users = [TspContactUser.from_payload(item) for item in payload.get("tspContactUsers") or []]
        return cls(
            name=str(payload.get("name") or ""),
            industry=_optional_text(payload.get("industry")),
            website=_optional_text(payload.get("website")),
            address=_optional_text(payload.get("address")),
            code=_optional_text(payload.get("code")),
            notes=_optional_text(payload.get("notes")),
            tsp_contact=_optional_text(payload.get("tspContact")),
            tsp_contact_users=users,
            group_name=str(payload.get("groupName") or ""),
            exists=as_bool(payload.get("exists")),
            existing_id=_optional_int(payload.get("existingId")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "industry": self.industry,
            "website": self.website,
            "address": self.address,
            "code": self.code,
            "notes": self.notes,
            "tspContact": self.tsp_contact,
            "tspContactUsers": [user.to_payload() for user in self.tsp_contact_users],
            "groupName": self.group_name,
            "exists": self.exists,
            "existingId": self.existing_id,
        }


@dataclass
class PreviewContact:
    row_number: int
    name: str = ""
    email: str | None = None
    phone: str | None = None
    designation: str | None = None
    is_primary: bool = False
    notes: str | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None
    client_name: str = ""
    group_name: str = ""

    @property
    def client_key(self) -> tuple[str, str]:
        return (self.group_name, self.client_name)

    @property
    def has_data(self) -> bool:
        return bool(clean_text(self.name) or clean_text(self.email) or clean_text(self.phone))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PreviewContact":
        return cls(
            row_number=as_int(payload.get("rowNumber"), default=0),
            name=str(payload.get("name") or ""),
            email=_optional_text(payload.get("email")),
            phone=_optional_text(payload.get("phone")),
            designation=_optional_text(payload.get("designation")),
            is_primary=as_bool(payload.get("isPrimary")),
            notes=_optional_text(payload.get("notes")),
            linkedin_url=_optional_text(payload.get("linkedinUrl")),
            twitter_handle=_optional_text(payload.get("twitterHandle")),
            client_name=str(payload.get("clientName") or ""),
            group_name=str(payload.get("groupName") or ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "designation": self.designation,
            "isPrimary": self.is_primary,
            "notes": self.notes,
            "linkedinUrl": self.linkedin_url,
            "twitterHandle": self.twitter_handle,
            "clientName": self.client_name,
            "groupName": self.group_name,
            "rowNumber": self.row_number,
        }


@dataclass(frozen=True)
class RowError:
    row: int
    field: str
    message: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RowError":
        return cls(
            row=as_int(payload.get("row"), default=0),
            field=str(payload.get("field") or ""),
            message=str(payload.get("message") or ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {"row": self.row, "field": self.field, "message": self.message}


@dataclass(frozen=True)
class RowWarning:
    row: int
    message: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RowWarning":
        return cls(row=as_int(payload.get("row"), default=0), message=str(payload.get("message") or ""))

    def to_payload(self) -> dict[str, Any]:
        return {"row": self.row, "message": self.message}


@dataclass
class PreviewBatch:
    groups: list[PreviewGroup] = field(default_factory=list)
    clients: list[PreviewClient] = field(default_factory=list)
    contacts: list[PreviewContact] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    warnings: list[RowWarning] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PreviewBatch":
        contacts = [PreviewContact.from_payload(item) for item in payload.get("contacts") or []]
        counts = Counter(contact.row_number for contact in contacts)
        duplicates = sorted(row for row, count in counts.items() if count > 1)
        if duplicates:
            # Row errors are keyed by row number, so rows must be unique.
            raise BackendApiError(
                "The upload preview lists the same spreadsheet row more than once "
                f"(rows {', '.join(str(row) for row in duplicates)}). Please upload the file again."
            )
        return cls(
            groups=[PreviewGroup.from_payload(item) for item in payload.get("groups") or []],
            clients=[PreviewClient.from_payload(item) for item in payload.get("clients") or []],
            contacts=contacts,
            errors=[RowError.from_payload(item) for item in payload.get("errors") or []],
            warnings=[RowWarning.from_payload(item) for item in payload.get("warnings") or []],
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "groups": [item.to_payload() for item in self.groups],
            "clients": [item.to_payload() for item in self.clients],
            "contacts": [item.to_payload() for item in self.contacts],
            "errors": [item.to_payload() for item in self.errors],
            "warnings": [item.to_payload() for item in self.warnings],
        }

    def row_numbers(self) -> set[int]:
        return {contact.row_number for contact in self.contacts}

    def contacts_for(self, client: PreviewClient) -> list[PreviewContact]:
        return [contact for contact in self.contacts if contact.client_key == client.key]


@dataclass
class UploadResult:
    groups_created: int = 0
    groups_existing: int = 0
    clients_created: int = 0
    clients_existing: int = 0
    contacts_created: int = 0
    errors: list[RowError] = field(default_factory=list)
    warnings: list[RowWarning] = field(default_factory=list)
    created_groups: list[dict[str, Any]] = field(default_factory=list)
    created_clients: list[dict[str, Any]] = field(default_factory=list)
    created_contacts: list[dict[str, Any]] = field(default_factory=list)
    results_file: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UploadResult":
        return cls(
            groups_created=as_int(payload.get("groupsCreated"), default=0),
            groups_existing=as_int(payload.get("groupsExisting"), default=0),
            clients_created=as_int(payload.get("clientsCreated"), default=0),
            clients_existing=as_int(payload.get("clientsExisting"), default=0),
            contacts_created=as_int(payload.get("contactsCreated"), default=0),
            errors=[RowError.from_payload(item) for item in payload.get("errors") or []],
            warnings=[RowWarning.from_payload(item) for item in payload.get("warnings") or []],
            created_groups=[dict(item) for item in payload.get("createdGroups") or []],
            created_clients=[dict(item) for item in payload.get("createdClients") or []],
            created_contacts=[dict(item) for item in payload.get("createdContacts") or []],
            results_file=_optional_text(payload.get("resultsFile")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "groupsCreated": self.groups_created,
            "groupsExisting": self.groups_existing,
            "clientsCreated": self.clients_created,
            "clientsExisting": self.clients_existing,
            "contactsCreated": self.contacts_created,
            "errors": [item.to_payload() for item in self.errors],
            "warnings": [item.to_payload() for item in self.warnings],
            "createdGroups": list(self.created_groups),
            "createdClients": list(self.created_clients),
            "createdContacts": list(self.created_contacts),
            "resultsFile": self.results_file,
        }
