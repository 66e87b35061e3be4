from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from practice_desk.core.errors import BackendApiError, WorkflowStateError
from practice_desk.web.errors import (
    ApiError,
    ApiErrorSpec,
    api_error_response,
    is_api_request,
    normalize_exception,
    request_id_from_request,
)

LOGGER = logging.getLogger(__name__)

# BackendUnavailableError, AccessDeniedError and the other domain errors subclass these.
HANDLED_DOMAIN_ERRORS = (
    ApiError,
    BackendApiError,
    WorkflowStateError,
    PermissionError,
    LookupError,
    ValueError,
)


def _log_failure(request: Request, exc: Exception, spec: ApiErrorSpec) -> None:
    log = LOGGER.exception if spec.status_code >= 500 else LOGGER.warning
    log(
        "API request failed. code=%s status=%s method=%s path=%s",
        spec.code,
        spec.status_code,
        request.method,
        request.url.path,
        extra={
            "event": "api_error",
            "request_id": request_id_from_request(request),
            "error_code": spec.code,
            "status_code": spec.status_code,
            "error_type": exc.__class__.__name__,
        },
    )


def _respond(request: Request, spec: ApiErrorSpec) -> Response:
    return api_error_response(
        request,
        status_code=spec.status_code,
        code=spec.code,
        message=spec.message,
        details=spec.details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    async def _domain_error(request: Request, exc: Exception) -> Response:
        spec = normalize_exception(exc)
        if not is_api_request(request):
            return PlainTextResponse(spec.message, status_code=spec.status_code)
        _log_failure(request, exc, spec)
        return _respond(request, spec)

    for error_type in HANDLED_DOMAIN_ERRORS:
        app.add_exception_handler(error_type, _domain_error)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> Response:
        if not is_api_request(request):
            return await request_validation_exception_handler(request, exc)
        return _respond(request, normalize_exception(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> Response:
        if not is_api_request(request):
            return await http_exception_handler(request, exc)
        return _respond(request, normalize_exception(exc))

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> Response:
        if is_api_request(request):
            return await _domain_error(request, exc)
        LOGGER.exception(
            "Unhandled request error. method=%s path=%s",
            request.method,
            request.url.path,
            extra={"event": "unhandled_error", "request_id": request_id_from_request(request)},
        )
        return PlainTextResponse("An unexpected error occurred.", status_code=500)
