from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from practice_desk.core.defaults import FILTER_OPTION_ALL
from practice_desk.imports import BulkReconciliation, TspContactUser, check_upload
from practice_desk.imports.upload import SPREADSHEET_CONTENT_TYPES
from practice_desk.lists import BULK_CONTACT_LIST, FilterState, ListManager, PaginationState, SortState
from practice_desk.web.errors import ApiError
from practice_desk.web.runtime import get_backend, get_session_store
from practice_desk.web.schemas import ClientPatch, ContactPatch, TspContactIn

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bulk-upload")


def _session_payload(token: str, workflow: BulkReconciliation) -> dict[str, Any]:
    workflow.reconcile_orphans()
    editing = None
    if workflow.editing is not None:
        editing = {"kind": workflow.editing[0], "index": workflow.editing[1]}
    return {
        "ok": True,
        "token": token,
        "state": workflow.state,
        "editing": editing,
        "canConfirm": workflow.can_confirm,
        "summary": workflow.summary().to_payload(),
        "batch": workflow.batch.to_payload(),
    }


@router.post("/preview")
async def api_bulk_preview(file: UploadFile = File(...)):
    content = await file.read()
    upload = check_upload(file.filename, content)
    # The backend client is synchronous; keep the event loop free during the upload.
    payload = await run_in_threadpool(get_backend().preview_bulk_upload, upload)
    workflow = BulkReconciliation.from_payload(payload)
    token = get_session_store().save(workflow)
    LOGGER.info(
        "Bulk upload preview opened.",
        extra={"event": "bulk_preview", "contacts": len(workflow.batch.contacts), "errors": len(workflow.batch.errors)},
    )
    return _session_payload(token, workflow)


@router.get("/users")
def api_bulk_users():
    users = get_backend().list_user_summaries()
    return {"ok": True, "users": [user.model_dump() for user in users]}


@router.get("/{token}")
def api_bulk_session(token: str):
    return _session_payload(token, get_session_store().load(token))


@router.get("/{token}/contacts")
def api_bulk_contacts(
    token: str,
    q: str = "",
    group: str = FILTER_OPTION_ALL,
    client: str = FILTER_OPTION_ALL,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_dir: str | None = Query(default=None, alias="sortDir"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, alias="pageSize", ge=1, le=100),
):
    workflow = get_session_store().load(token)
    rows = []
    for index, contact in enumerate(workflow.batch.contacts):
        issues = [error.to_payload() for error in workflow.batch.errors if error.row == contact.row_number]
        rows.append(
            {
                "index": index,
                "row_number": contact.row_number,
                "name": contact.name,
                "email": contact.email,
                "phone": contact.phone,
                "client_name": contact.client_name,
                "group_name": contact.group_name,
                "errors": issues,
            }
        )
    manager = ListManager(BULK_CONTACT_LIST, rows)
    manager.restore(
        filters=FilterState(query=q).with_categories("group_name", group).with_categories("client_name", client),
        sort=SortState.from_params(sort_by, sort_dir),
        pagination=PaginationState(current_page=page, items_per_page=page_size),
    )
    return {"ok": True, **manager.view().to_payload()}


@router.post("/{token}/contacts/{index}/edit")
def api_bulk_contact_edit(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.start_edit_contact(index)
    return _session_payload(token, workflow)


@router.patch("/{token}/contacts/{index}")
def api_bulk_contact_update(token: str, index: int, patch: ContactPatch):
    workflow = get_session_store().load(token)
    workflow.update_contact(index, **patch.model_dump(exclude_unset=True))
    return _session_payload(token, workflow)


@router.post("/{token}/contacts/{index}/save")
def api_bulk_contact_save(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.save_contact(index)
    return _session_payload(token, workflow)


@router.post("/{token}/contacts/{index}/cancel")
def api_bulk_contact_cancel(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.cancel_contact_edit(index)
    return _session_payload(token, workflow)


@router.delete("/{token}/contacts/{index}")
def api_bulk_contact_remove(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.remove_contact(index)
    return _session_payload(token, workflow)


@router.post("/{token}/clients/{index}/edit")
def api_bulk_client_edit(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.start_edit_client(index)
    return _session_payload(token, workflow)


@router.patch("/{token}/clients/{index}")
def api_bulk_client_update(token: str, index: int, patch: ClientPatch):
    workflow = get_session_store().load(token)
    workflow.update_client(index, **patch.model_dump(exclude_unset=True))
    return _session_payload(token, workflow)


@router.post("/{token}/clients/{index}/save")
def api_bulk_client_save(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.save_client(index)
    return _session_payload(token, workflow)


@router.post("/{token}/clients/{index}/cancel")
def api_bulk_client_cancel(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.cancel_client_edit(index)
    return _session_payload(token, workflow)


@router.delete("/{token}/clients/{index}")
def api_bulk_client_remove(token: str, index: int):
    workflow = get_session_store().load(token)
    workflow.remove_client(index)
    return _session_payload(token, workflow)


@router.post("/{token}/clients/{index}/tsp-contacts")
def api_bulk_tsp_add(token: str, index: int, user: TspContactIn):
    workflow = get_session_store().load(token)
    workflow.add_tsp_contact(index, TspContactUser(id=user.id, name=user.name, email=user.email))
    return _session_payload(token, workflow)


@router.delete("/{token}/clients/{index}/tsp-contacts/{user_id}")
def api_bulk_tsp_remove(token: str, index: int, user_id: int):
    workflow = get_session_store().load(token)
    workflow.remove_tsp_contact(index, user_id)
    return _session_payload(token, workflow)


@router.post("/{token}/confirm")
def api_bulk_confirm(token: str):
    store = get_session_store()
    workflow = store.load(token)
    result = workflow.confirm(get_backend())
    if result is None and not workflow.batch.errors:
        raise ApiError(
            status_code=409,
            code="CONFIRM_IN_PROGRESS",
            message="This upload is already being confirmed.",
        )
    if result is None:
        raise ApiError(
            status_code=409,
            code="CONFIRM_BLOCKED",
            message="Resolve all errors before confirming the upload.",
            details={"errors": len(workflow.batch.errors)},
        )
    store.discard(token)
    return {"ok": True, "state": workflow.state, "result": result.to_payload()}


@router.post("/{token}/download")
def api_bulk_download(token: str):
    workflow = get_session_store().load(token)
    corrected = workflow.download_corrected(get_backend())
    return Response(
        content=corrected.content,
        media_type=SPREADSHEET_CONTENT_TYPES[".xlsx"],
        headers={"Content-Disposition": f'attachment; filename="{corrected.filename}"'},
    )


@router.delete("/{token}")
def api_bulk_cancel(token: str):
    store = get_session_store()
    workflow = store.load(token)
    workflow.cancel()
    store.discard(token)
    return {"ok": True, "state": workflow.state}
