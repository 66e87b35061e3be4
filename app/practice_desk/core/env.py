from __future__ import annotations

import os

from practice_desk.core.util import as_bool, as_float, as_int

PDESK_ENV = "PDESK_ENV"
PDESK_BACKEND_URL = "PDESK_BACKEND_URL"
PDESK_BACKEND_TIMEOUT_SEC = "PDESK_BACKEND_TIMEOUT_SEC"
PDESK_BACKEND_TOKEN = "PDESK_BACKEND_TOKEN"
PDESK_LAYOUT_DIR = "PDESK_LAYOUT_DIR"
PDESK_DEFAULT_PAGE_SIZE = "PDESK_DEFAULT_PAGE_SIZE"
PDESK_SEARCH_DEBOUNCE_MS = "PDESK_SEARCH_DEBOUNCE_MS"
PDESK_PREVIEW_TTL_SEC = "PDESK_PREVIEW_TTL_SEC"
PDESK_LOG_LEVEL = "PDESK_LOG_LEVEL"
PDESK_LOG_JSON = "PDESK_LOG_JSON"
PDESK_LOG_CAPTURE_ROOT = "PDESK_LOG_CAPTURE_ROOT"
PDESK_ERROR_INCLUDE_DETAILS = "PDESK_ERROR_INCLUDE_DETAILS"
PORT = "PORT"


def get_env(name: str, default: str = "") -> str:
    return str(os.getenv(name, default) or "").strip()


def get_env_bool(name: str, default: bool = False) -> bool:
    return as_bool(os.getenv(name), default=default)


def get_env_int(
    name: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    return as_int(os.getenv(name), default=default, min_value=min_value, max_value=max_value)


def get_env_float(
    name: str,
    default: float,
    *,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    return as_float(os.getenv(name), default=default, min_value=min_value, max_value=max_value)
