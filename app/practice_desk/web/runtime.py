from __future__ import annotations

from functools import lru_cache

from practice_desk.core.config import AppConfig
from practice_desk.dashboard.layout_store import DashboardLayoutStore
from practice_desk.imports.store import PreviewSessionStore
from practice_desk.infrastructure.backend_client import BackendClient


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig.from_env()


@lru_cache(maxsize=1)
def get_backend() -> BackendClient:
    return BackendClient.from_config(get_config())


@lru_cache(maxsize=1)
def get_session_store() -> PreviewSessionStore:
    return PreviewSessionStore(ttl_sec=get_config().preview_ttl_sec)


@lru_cache(maxsize=1)
def get_layout_store() -> DashboardLayoutStore:
    return DashboardLayoutStore(get_config().layout_dir)


def reset_runtime_caches() -> None:
    for cached in (get_config, get_backend, get_session_store, get_layout_store):
        cached.cache_clear()
