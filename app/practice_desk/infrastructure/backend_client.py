from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from practice_desk.core.config import AppConfig
from practice_desk.core.errors import AccessDeniedError, BackendApiError, BackendUnavailableError
from practice_desk.imports.upload import UploadFile

LOGGER = logging.getLogger(__name__)

MATTERS_PATH = "/api/matters"
USERS_PATH = "/api/users"
BULK_PREVIEW_PATH = "/api/clients/bulk-upload/preview"
BULK_CONFIRM_PATH = "/api/clients/bulk-upload/confirm"
BULK_DOWNLOAD_PATH = "/api/clients/bulk-upload/download-preview"


class ApiEnvelope(BaseModel):
    """``{success, message, data, errors}`` wrapper every backend JSON answer uses."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: str | None = None
    data: Any = None
    errors: Any = None


class UserSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""
    email: str = ""


class BackendClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout_sec: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout_sec,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: AppConfig, *, transport: httpx.BaseTransport | None = None) -> "BackendClient":
        return cls(
            config.backend_url,
            token=config.backend_token,
            timeout_sec=config.backend_timeout_sec,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            LOGGER.warning("Backend request timed out: %s %s", method, path)
            raise BackendUnavailableError("The server took too long to respond. Please try again.") from exc
        except httpx.TransportError as exc:
            LOGGER.warning("Backend request failed: %s %s (%s)", method, path, exc.__class__.__name__)
            raise BackendUnavailableError("Unable to reach the server. Please try again.") from exc

        if response.status_code == 403:
            raise AccessDeniedError(self._error_message(response, "You do not have access to this resource."))
        if response.status_code >= 400:
            message = self._error_message(response, f"Request failed with status {response.status_code}.")
            LOGGER.warning(
                "Backend returned an error.",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise BackendApiError(message, status_code=response.status_code)
        return response

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            envelope = ApiEnvelope.model_validate(response.json())
        except (json.JSONDecodeError, ValueError, ValidationError):
            return fallback
        return str(envelope.message or "").strip() or fallback

    def _envelope(self, method: str, path: str, **kwargs: Any) -> ApiEnvelope:
        response = self._send(method, path, **kwargs)
        try:
            envelope = ApiEnvelope.model_validate(response.json())
        except (json.JSONDecodeError, ValueError, ValidationError) as exc:
            raise BackendApiError("The server returned an unexpected response.", status_code=response.status_code) from exc
        if not envelope.success:
            raise BackendApiError(envelope.message or "The request was not successful.", status_code=response.status_code)
        return envelope

    def _list(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        data = self._envelope("GET", path, params=params).data
        if not isinstance(data, list):
            return []
        return [dict(item) for item in data if isinstance(item, dict)]

    def list_matters(self, **params: Any) -> list[dict[str, Any]]:
        return self._list(MATTERS_PATH, params or None)

    def list_users(self, **params: Any) -> list[dict[str, Any]]:
        return self._list(USERS_PATH, params or None)

    def list_user_summaries(self) -> list[UserSummary]:
        summaries: list[UserSummary] = []
        for item in self.list_users():
            try:
                summaries.append(UserSummary.model_validate(item))
            except ValidationError:
                LOGGER.debug("Skipping user record without a numeric id.")
        return summaries

    def preview_bulk_upload(self, upload: UploadFile) -> dict[str, Any]:
        envelope = self._envelope(
            "POST",
            BULK_PREVIEW_PATH,
            files={"file": (upload.filename, upload.content, upload.content_type)},
        )
        return dict(envelope.data or {})

    def confirm_bulk_upload(self, batch_payload: dict[str, Any]) -> dict[str, Any]:
        envelope = self._envelope("POST", BULK_CONFIRM_PATH, json=batch_payload)
        return dict(envelope.data or {})

    def download_bulk_preview(self, batch_payload: dict[str, Any]) -> bytes:
        response = self._send("POST", BULK_DOWNLOAD_PATH, json=batch_payload)
        return response.content
