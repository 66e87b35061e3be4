from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from practice_desk.core.env import PDESK_ERROR_INCLUDE_DETAILS, get_env_bool
from practice_desk.core.errors import (
    AccessDeniedError,
    BackendApiError,
    BackendUnavailableError,
    LeaveValidationError,
    SessionNotFoundError,
    UploadRejectedError,
    WorkflowStateError,
)

INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please contact support if this continues."

HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "ACCESS_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


@dataclass(frozen=True)
class ApiErrorSpec:
    status_code: int
    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiError(RuntimeError):
    """Raised by route handlers that want a specific status and error code."""

    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = int(status_code)
        self.code = str(code)
        self.message = str(message)
        self.details = details

    def to_spec(self) -> ApiErrorSpec:
        return ApiErrorSpec(self.status_code, self.code, self.message, self.details)


@dataclass(frozen=True)
class _Mapping:
    error_type: type[Exception]
    status_code: int
    code: str
    fallback_message: str
    use_exception_text: bool = True


# Checked in order; subclasses must come before the builtins they extend.
_EXCEPTION_MAPPINGS: tuple[_Mapping, ...] = (
    _Mapping(BackendUnavailableError, 503, "BACKEND_UNAVAILABLE", "Unable to reach the server. Please try again."),
    _Mapping(AccessDeniedError, 403, "ACCESS_DENIED", "Access Denied"),
    _Mapping(SessionNotFoundError, 404, "SESSION_EXPIRED", "This upload preview has expired. Upload the file again."),
    _Mapping(WorkflowStateError, 409, "WORKFLOW_STATE_CONFLICT", "That action is not allowed right now."),
    _Mapping(UploadRejectedError, 400, "UPLOAD_REJECTED", "The uploaded file was rejected."),
    _Mapping(LeaveValidationError, 400, "LEAVE_INVALID", "The leave request is invalid."),
    _Mapping(
        PermissionError,
        403,
        "ACCESS_DENIED",
        "You do not have permission to perform this action.",
        use_exception_text=False,
    ),
    _Mapping(LookupError, 404, "NOT_FOUND", "Requested item was not found."),
    _Mapping(ValueError, 400, "BAD_REQUEST", "Request parameters are invalid."),
)


def is_api_request(request: Request) -> bool:
    return str(getattr(request.url, "path", "") or "").startswith("/api/")


def request_id_from_request(request: Request) -> str:
    bound = str(getattr(request.state, "request_id", "") or "").strip()
    return bound or str(request.headers.get("x-request-id", "")).strip() or "-"


def _exception_text(exc: Exception) -> str:
    # KeyError wraps its message in quotes when stringified.
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


def _backend_spec(exc: BackendApiError) -> ApiErrorSpec:
    upstream = exc.status_code
    status_code = upstream if upstream and 400 <= upstream < 500 else 502
    return ApiErrorSpec(status_code, "BACKEND_ERROR", exc.message, {"backend_status": upstream})


def _http_spec(exc: StarletteHTTPException) -> ApiErrorSpec:
    status_code = int(exc.status_code)
    code = HTTP_STATUS_CODES.get(status_code, INTERNAL_ERROR_CODE)
    detail = str(exc.detail or "")
    return ApiErrorSpec(status_code, code, detail or "HTTP request failed.", {"reason": detail})


def normalize_exception(exc: Exception) -> ApiErrorSpec:
    if isinstance(exc, ApiError):
        return exc.to_spec()
    if isinstance(exc, RequestValidationError):
        return ApiErrorSpec(
            422,
            "VALIDATION_ERROR",
            "Request validation failed. Check field values and try again.",
            {"errors": exc.errors()},
        )
    if isinstance(exc, StarletteHTTPException):
        return _http_spec(exc)
    # BackendUnavailableError is matched by the table below.
    if isinstance(exc, BackendApiError) and not isinstance(exc, BackendUnavailableError):
        return _backend_spec(exc)

    for mapping in _EXCEPTION_MAPPINGS:
        if not isinstance(exc, mapping.error_type):
            continue
        text = _exception_text(exc)
        message = (text if mapping.use_exception_text else "") or mapping.fallback_message
        return ApiErrorSpec(mapping.status_code, mapping.code, message, {"reason": text} if text else None)

    return ApiErrorSpec(
        500,
        INTERNAL_ERROR_CODE,
        INTERNAL_ERROR_MESSAGE,
        {"reason": str(exc), "type": exc.__class__.__name__},
    )


def api_error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    request_id = request_id_from_request(request)
    error: dict[str, Any] = {"code": str(code), "message": str(message)}
    if details and get_env_bool(PDESK_ERROR_INCLUDE_DETAILS, default=False):
        error["details"] = details
    payload = {
        "ok": False,
        "error": error,
        "request_id": request_id,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(payload, status_code=int(status_code), headers={"X-Request-ID": request_id})
