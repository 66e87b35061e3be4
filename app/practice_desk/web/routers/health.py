from __future__ import annotations

from fastapi import APIRouter

from practice_desk import __version__
from practice_desk.web.runtime import get_config

router = APIRouter(prefix="/api")


@router.get("/health")
def api_health():
    config = get_config()
    return {
        "ok": True,
        "version": __version__,
        "env": config.env,
        "backend_url": config.backend_url,
        "default_page_size": config.default_page_size,
        "search_debounce_ms": config.search_debounce_ms,
    }
