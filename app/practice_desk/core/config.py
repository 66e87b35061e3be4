from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from practice_desk.core.defaults import (
    BULK_PREVIEW_TTL_SEC,
    DEFAULT_BACKEND_TIMEOUT_SEC,
    DEFAULT_BACKEND_URL,
    DEFAULT_DEV_ENV_NAMES,
    DEFAULT_ENV_NAME,
    DEFAULT_LAYOUT_DIR,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SEARCH_DEBOUNCE_MS,
    PAGE_SIZE_OPTIONS,
)
from practice_desk.core.env import (
    PDESK_BACKEND_TIMEOUT_SEC,
    PDESK_BACKEND_TOKEN,
    PDESK_BACKEND_URL,
    PDESK_DEFAULT_PAGE_SIZE,
    PDESK_ENV,
    PDESK_LAYOUT_DIR,
    PDESK_PREVIEW_TTL_SEC,
    PDESK_SEARCH_DEBOUNCE_MS,
    get_env,
    get_env_float,
    get_env_int,
)

DEV_ENV_NAMES = set(DEFAULT_DEV_ENV_NAMES)


def _clean_base_url(raw_url: str) -> str:
    value = str(raw_url or "").strip().rstrip("/")
    if not value:
        return DEFAULT_BACKEND_URL
    if not value.startswith("http://") and not value.startswith("https://"):
        value = f"http://{value}"
    return value


def _repo_root() -> Path:
    # app/practice_desk/core/config.py -> repo root
    return Path(__file__).resolve().parents[3]


def _resolve_repo_relative_path(raw_path: str) -> str:
    value = str(raw_path or "").strip()
    if not value:
        return value
    path = Path(value)
    if path.is_absolute():
        return str(path)
    return str((_repo_root() / path).resolve())


@dataclass(frozen=True)
class AppConfig:
    backend_url: str = DEFAULT_BACKEND_URL
    backend_token: str = ""
    backend_timeout_sec: float = DEFAULT_BACKEND_TIMEOUT_SEC
    env: str = DEFAULT_ENV_NAME
    layout_dir: str = DEFAULT_LAYOUT_DIR
    default_page_size: int = DEFAULT_PAGE_SIZE
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    preview_ttl_sec: float = BULK_PREVIEW_TTL_SEC

    @property
    def is_dev_env(self) -> bool:
        return self.env.lower() in DEV_ENV_NAMES

    @classmethod
    def from_env(cls) -> "AppConfig":
        env_name = get_env(PDESK_ENV, DEFAULT_ENV_NAME).lower() or DEFAULT_ENV_NAME
        page_size = get_env_int(PDESK_DEFAULT_PAGE_SIZE, DEFAULT_PAGE_SIZE, min_value=1)
        if page_size not in PAGE_SIZE_OPTIONS:
            page_size = DEFAULT_PAGE_SIZE
        return cls(
            backend_url=_clean_base_url(get_env(PDESK_BACKEND_URL, DEFAULT_BACKEND_URL)),
            backend_token=get_env(PDESK_BACKEND_TOKEN),
            backend_timeout_sec=get_env_float(
                PDESK_BACKEND_TIMEOUT_SEC,
                DEFAULT_BACKEND_TIMEOUT_SEC,
                min_value=1.0,
            ),
            env=env_name,
            layout_dir=_resolve_repo_relative_path(get_env(PDESK_LAYOUT_DIR, DEFAULT_LAYOUT_DIR)),
            default_page_size=page_size,
            search_debounce_ms=get_env_int(
                PDESK_SEARCH_DEBOUNCE_MS,
                DEFAULT_SEARCH_DEBOUNCE_MS,
                min_value=0,
            ),
            preview_ttl_sec=get_env_float(PDESK_PREVIEW_TTL_SEC, BULK_PREVIEW_TTL_SEC, min_value=1.0),
        )
