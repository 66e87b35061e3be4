from __future__ import annotations


class BackendApiError(RuntimeError):
    """Raised when the backend answers with an error status or ``success: false``."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = status_code


class BackendUnavailableError(BackendApiError):
    """Raised when the backend cannot be reached or times out."""


class AccessDeniedError(PermissionError):
    """Raised when a token or resource belongs to a different user."""


class UploadRejectedError(ValueError):
    """Raised when an upload fails local checks before reaching the backend."""


class LeaveValidationError(ValueError):
    """Raised when a leave request fails balance or date checks."""


class SessionNotFoundError(LookupError):
    """Raised when a bulk upload preview session has expired or never existed."""


class WorkflowStateError(RuntimeError):
    """Raised when a bulk upload action is not allowed in the current state."""
