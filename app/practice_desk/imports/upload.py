from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath

from practice_desk.core.defaults import BULK_UPLOAD_EXTENSIONS, BULK_UPLOAD_MAX_BYTES
from practice_desk.core.errors import UploadRejectedError

LOGGER = logging.getLogger(__name__)

SPREADSHEET_CONTENT_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}


@dataclass(frozen=True)
class UploadFile:
    filename: str
    content: bytes

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower()

    @property
    def content_type(self) -> str:
        return SPREADSHEET_CONTENT_TYPES.get(self.extension, "application/octet-stream")


def check_upload(filename: str | None, content: bytes | None, *, max_bytes: int = BULK_UPLOAD_MAX_BYTES) -> UploadFile:
    name = str(filename or "").strip()
    if not name:
        raise UploadRejectedError("Please select a file to upload.")
    upload = UploadFile(filename=PurePath(name).name, content=bytes(content or b""))
    if upload.extension not in BULK_UPLOAD_EXTENSIONS:
        raise UploadRejectedError("Please upload an Excel file (.xlsx or .xls).")
    if not upload.content:
        raise UploadRejectedError("The uploaded file is empty.")
    if len(upload.content) > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise UploadRejectedError(f"File size exceeds the {limit_mb}MB limit.")
    LOGGER.debug("Accepted bulk upload file %s (%s bytes).", upload.filename, len(upload.content))
    return upload
