from __future__ import annotations

import sys
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.core.errors import SessionNotFoundError, UploadRejectedError  # noqa: E402
from practice_desk.imports import BulkReconciliation, PreviewBatch, PreviewSessionStore, check_upload  # noqa: E402


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _workflow() -> BulkReconciliation:
    return BulkReconciliation(PreviewBatch())


def test_load_refreshes_session_age() -> None:
    clock = _Clock()
    store = PreviewSessionStore(ttl_sec=10, clock=clock)
    workflow = _workflow()
    token = store.save(workflow)

    clock.now = 5
    assert store.load(token) is workflow
    clock.now = 14
    assert store.load(token) is workflow

    clock.now = 30
    with pytest.raises(SessionNotFoundError):
        store.load(token)
    assert len(store) == 0


def test_oldest_session_is_evicted_past_capacity() -> None:
    clock = _Clock()
    store = PreviewSessionStore(ttl_sec=100, max_sessions=2, clock=clock)
    tokens = []
    for step in range(3):
        clock.now = float(step)
        tokens.append(store.save(_workflow()))

    assert len(store) == 2
    with pytest.raises(SessionNotFoundError):
        store.load(tokens[0])
    store.load(tokens[2])


def test_discard_and_unknown_tokens() -> None:
    store = PreviewSessionStore()
    token = store.save(_workflow())

    store.discard(token)
    store.discard("")

    with pytest.raises(SessionNotFoundError):
        store.load(token)
    with pytest.raises(SessionNotFoundError):
        store.load("")


def test_check_upload_accepts_spreadsheets() -> None:
    upload = check_upload("reports/Contacts.XLSX", b"PK\x03\x04")

    assert upload.filename == "Contacts.XLSX"
    assert upload.extension == ".xlsx"
    assert upload.content_type == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert check_upload("legacy.xls", b"data").content_type == "application/vnd.ms-excel"


@pytest.mark.parametrize(
    ("filename", "content", "message"),
    [
        ("", b"data", "Please select a file to upload."),
        ("contacts.csv", b"data", "Please upload an Excel file (.xlsx or .xls)."),
        ("contacts.xlsx", b"", "The uploaded file is empty."),
    ],
)
def test_check_upload_rejections(filename: str, content: bytes, message: str) -> None:
    with pytest.raises(UploadRejectedError) as excinfo:
        check_upload(filename, content)

    assert str(excinfo.value) == message


def test_check_upload_enforces_size_limit() -> None:
    with pytest.raises(UploadRejectedError, match="exceeds the 0MB limit"):
        check_upload("big.xlsx", b"x" * 11, max_bytes=10)
