"""
Bulk reconciliation session over one preview batch.

States::

    reviewing -> editing(row) -> reviewing -> confirming -> committed | failed
    reviewing | editing -> cancelled

The error ledger is kept accurate after every change: saving a row replaces
that row's entries, removals cascade, and orphaned entries are dropped before
the confirm gate is evaluated.
"""

from __future__ import annotations

import logging
import threading
from copy import deepcopy
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any

from practice_desk.core.defaults import BULK_CORRECTED_FILE_PREFIX, TSP_CONTACT_DELIMITER
from practice_desk.core.errors import BackendApiError, WorkflowStateError
from practice_desk.imports.models import (
    PreviewBatch,
    PreviewClient,
    PreviewContact,
    RowError,
    TspContactUser,
    UploadResult,
)
from practice_desk.imports.validation import (
    validate_client_row,
    validate_contact_row,
    without_client_field_errors,
)

LOGGER = logging.getLogger(__name__)

STATE_REVIEWING = "reviewing"
STATE_EDITING = "editing"
STATE_CONFIRMING = "confirming"
STATE_COMMITTED = "committed"
STATE_FAILED = "failed"
STATE_CANCELLED = "cancelled"
TERMINAL_STATES = {STATE_COMMITTED, STATE_CANCELLED}

ROW_CONTACT = "contact"
ROW_CLIENT = "client"

_CONTACT_FIELDS = {item.name for item in fields(PreviewContact)} - {"row_number"}
_CLIENT_FIELDS = {item.name for item in fields(PreviewClient)} - {"tsp_contact", "tsp_contact_users"}


@dataclass(frozen=True)
class BatchSummary:
    groups: int
    groups_new: int
    groups_existing: int
    clients: int
    clients_new: int
    clients_existing: int
    contacts: int
    errors: int
    warnings: int

    def to_payload(self) -> dict[str, int]:
        return {
            "groups": self.groups,
            "groupsNew": self.groups_new,
            "groupsExisting": self.groups_existing,
            "clients": self.clients,
            "clientsNew": self.clients_new,
            "clientsExisting": self.clients_existing,
            "contacts": self.contacts,
            "errors": self.errors,
            "warnings": self.warnings,
        }


@dataclass(frozen=True)
class CorrectedFile:
    filename: str
    content: bytes


def corrected_file_name(today: date | None = None) -> str:
    return f"{BULK_CORRECTED_FILE_PREFIX}_{(today or date.today()).isoformat()}.xlsx"


def tsp_contact_value(users: list[TspContactUser]) -> str | None:
    if not users:
        return None
    return TSP_CONTACT_DELIMITER.join(str(user.id) for user in users)


class BulkReconciliation:
    def __init__(self, batch: PreviewBatch) -> None:
        self._initial = deepcopy(batch)
        self.batch = deepcopy(batch)
        # Position of each current client in the initial snapshot.
        self._client_origins: list[int] = list(range(len(self.batch.clients)))
        self.state = STATE_REVIEWING
        self.editing: tuple[str, int] | None = None
        self.result: UploadResult | None = None
        self.last_error: str | None = None
        # Guards the confirm gate so one batch reaches the backend at most once at a time.
        self._confirm_lock = threading.Lock()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "BulkReconciliation":
        return cls(PreviewBatch.from_payload(payload))

    def _require_open(self) -> None:
        if self.state in TERMINAL_STATES or self.state == STATE_CONFIRMING:
            raise WorkflowStateError(f"Bulk upload is {self.state}; no further edits are allowed.")

    def _contact(self, index: int) -> PreviewContact:
        if index < 0 or index >= len(self.batch.contacts):
            raise IndexError(f"No contact at position {index}.")
        return self.batch.contacts[index]

    def _client(self, index: int) -> PreviewClient:
        if index < 0 or index >= len(self.batch.clients):
            raise IndexError(f"No client at position {index}.")
        return self.batch.clients[index]

    def _finish_edit(self) -> None:
        self.editing = None
        self.state = STATE_REVIEWING

    # Contacts

    def start_edit_contact(self, index: int) -> PreviewContact:
        self._require_open()
        contact = self._contact(index)
        self.editing = (ROW_CONTACT, index)
        self.state = STATE_EDITING
        return contact

    def update_contact(self, index: int, **changes: Any) -> PreviewContact:
        self._require_open()
        unknown = set(changes) - _CONTACT_FIELDS
        if unknown:
            raise ValueError(f"Unknown contact fields: {', '.join(sorted(unknown))}")
        updated = replace(self._contact(index), **changes)
        self.batch.contacts[index] = updated
        return updated

    def save_contact(self, index: int) -> list[RowError]:
        self._require_open()
        contact = self._contact(index)
        row = contact.row_number
        new_errors = validate_contact_row(contact)
        self.batch.errors = [error for error in self.batch.errors if error.row != row] + new_errors
        self._finish_edit()
        return new_errors

    def cancel_contact_edit(self, index: int) -> PreviewContact:
        self._require_open()
        current = self._contact(index)
        original = next(
            (item for item in self._initial.contacts if item.row_number == current.row_number),
            None,
        )
        if original is not None:
            self.batch.contacts[index] = deepcopy(original)
        self._finish_edit()
        return self.batch.contacts[index]

    def remove_contact(self, index: int) -> PreviewContact:
        self._require_open()
        removed = self.batch.contacts.pop(self._resolve_index(index, len(self.batch.contacts)))
        row = removed.row_number
        self.batch.errors = [error for error in self.batch.errors if error.row != row]
        self.batch.warnings = [warning for warning in self.batch.warnings if warning.row != row]
        self.reconcile_orphans()
        return removed

    # Clients

    def start_edit_client(self, index: int) -> PreviewClient:
        self._require_open()
        client = self._client(index)
        self.editing = (ROW_CLIENT, index)
        self.state = STATE_EDITING
        return client

    def update_client(self, index: int, **changes: Any) -> PreviewClient:
        self._require_open()
        unknown = set(changes) - _CLIENT_FIELDS
        if unknown:
            raise ValueError(f"Unknown client fields: {', '.join(sorted(unknown))}")
        updated = replace(self._client(index), **changes)
        self.batch.clients[index] = updated
        return updated

    def save_client(self, index: int) -> list[RowError]:
        self._require_open()
        client = self._client(index)
        rows = [contact.row_number for contact in self.batch.contacts_for(client)]
        first_row = rows[0] if rows else None
        new_errors = validate_client_row(client, first_row)
        self.batch.errors = without_client_field_errors(self.batch.errors, set(rows)) + new_errors
        self._finish_edit()
        return new_errors

    def cancel_client_edit(self, index: int) -> PreviewClient:
        self._require_open()
        self._client(index)
        origin = self._client_origins[index]
        self.batch.clients[index] = deepcopy(self._initial.clients[origin])
        self._finish_edit()
        return self.batch.clients[index]

    def remove_client(self, index: int) -> PreviewClient:
        self._require_open()
        position = self._resolve_index(index, len(self.batch.clients))
        removed = self.batch.clients.pop(position)
        self._client_origins.pop(position)
        doomed = {contact.row_number for contact in self.batch.contacts_for(removed)}
        self.batch.contacts = [contact for contact in self.batch.contacts if contact.client_key != removed.key]
        self.batch.errors = [error for error in self.batch.errors if error.row not in doomed]
        self.batch.warnings = [warning for warning in self.batch.warnings if warning.row not in doomed]
        self.reconcile_orphans()
        return removed

    def add_tsp_contact(self, client_index: int, user: TspContactUser) -> PreviewClient:
        self._require_open()
        client = self._client(client_index)
        if any(existing.id == user.id for existing in client.tsp_contact_users):
            return client
        users = [*client.tsp_contact_users, user]
        client.tsp_contact_users = users
        client.tsp_contact = tsp_contact_value(users)
        return client

    def remove_tsp_contact(self, client_index: int, user_id: int) -> PreviewClient:
        self._require_open()
        client = self._client(client_index)
        users = [existing for existing in client.tsp_contact_users if existing.id != int(user_id)]
        client.tsp_contact_users = users
        client.tsp_contact = tsp_contact_value(users)
        return client

    # Ledger and gate

    def reconcile_orphans(self) -> int:
        valid_rows = self.batch.row_numbers()
        kept = [error for error in self.batch.errors if error.row in valid_rows]
        dropped = len(self.batch.errors) - len(kept)
        if dropped:
            self.batch.errors = kept
            LOGGER.debug("Dropped %s orphaned bulk upload errors.", dropped)
        return dropped

    @property
    def can_confirm(self) -> bool:
        self.reconcile_orphans()
        return not self.batch.errors and self.state not in TERMINAL_STATES

    def summary(self) -> BatchSummary:
        groups = self.batch.groups
        clients = self.batch.clients
        return BatchSummary(
            groups=len(groups),
            groups_new=sum(1 for group in groups if not group.exists),
            groups_existing=sum(1 for group in groups if group.exists),
            clients=len(clients),
            clients_new=sum(1 for client in clients if not client.exists),
            clients_existing=sum(1 for client in clients if client.exists),
            contacts=len(self.batch.contacts),
            errors=len(self.batch.errors),
            warnings=len(self.batch.warnings),
        )

    def confirm(self, backend: Any) -> UploadResult | None:
        """Commit the batch; a no-op returning None while errors remain."""
        with self._confirm_lock:
            if self.state == STATE_CONFIRMING:
                LOGGER.info("Bulk upload confirm already in progress.")
                return None
            if not self.can_confirm:
                LOGGER.info("Bulk upload confirm blocked with %s open errors.", len(self.batch.errors))
                return None
            self.editing = None
            self.state = STATE_CONFIRMING
            self.last_error = None
        try:
            payload = backend.confirm_bulk_upload(self.batch.to_payload())
        except BackendApiError as exc:
            self.state = STATE_FAILED
            self.last_error = exc.message
            LOGGER.warning("Bulk upload confirm failed: %s", exc.message)
            raise
        self.result = UploadResult.from_payload(payload or {})
        self.state = STATE_COMMITTED
        LOGGER.info(
            "Bulk upload committed.",
            extra={
                "groups_created": self.result.groups_created,
                "clients_created": self.result.clients_created,
                "contacts_created": self.result.contacts_created,
            },
        )
        return self.result

    def cancel(self) -> None:
        if self.state == STATE_COMMITTED:
            raise WorkflowStateError("Bulk upload is already committed.")
        self.editing = None
        self.state = STATE_CANCELLED

    def download_corrected(self, backend: Any, *, today: date | None = None) -> CorrectedFile:
        content = backend.download_bulk_preview(self.batch.to_payload())
        return CorrectedFile(filename=corrected_file_name(today), content=content)

    @staticmethod
    def _resolve_index(index: int, size: int) -> int:
        if index < 0 or index >= size:
            raise IndexError(f"No row at position {index}.")
        return index
