from practice_desk.imports.models import (
    PreviewBatch,
    PreviewClient,
    PreviewContact,
    PreviewGroup,
    RowError,
    RowWarning,
    TspContactUser,
    UploadResult,
)
from practice_desk.imports.store import PreviewSessionStore
from practice_desk.imports.upload import UploadFile, check_upload
from practice_desk.imports.validation import (
    CLIENT_FIELD_NAMES,
    is_valid_email,
    is_valid_phone,
    is_valid_url,
    validate_client_row,
    validate_contact_row,
)
from practice_desk.imports.workflow import BatchSummary, BulkReconciliation, CorrectedFile

__all__ = [
    "BatchSummary",
    "BulkReconciliation",
    "CLIENT_FIELD_NAMES",
    "CorrectedFile",
    "PreviewBatch",
    "PreviewClient",
    "PreviewContact",
    "PreviewGroup",
    "PreviewSessionStore",
    "RowError",
    "RowWarning",
    "TspContactUser",
    "UploadFile",
    "UploadResult",
    "check_upload",
    "is_valid_email",
    "is_valid_phone",
    "is_valid_url",
    "validate_client_row",
    "validate_contact_row",
]
