from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from practice_desk import __version__
from practice_desk.infrastructure.logging import bind_request_id, reset_request_id, setup_app_logging
from practice_desk.web.exception_handlers import register_exception_handlers
from practice_desk.web.routers import router as api_router
from practice_desk.web.runtime import get_backend, get_config

LOGGER = logging.getLogger(__name__)
REQUEST_LOGGER = logging.getLogger("practice_desk.requests")


def create_app() -> FastAPI:
    setup_app_logging()
    config = get_config()

    @asynccontextmanager
    async def _app_lifespan(_app: FastAPI):
        LOGGER.info(
            "Practice desk starting.",
            extra={"event": "startup", "env": config.env, "backend_url": config.backend_url},
        )
        yield
        if get_backend.cache_info().currsize:
            get_backend().close()

    app = FastAPI(title="Practice Desk", version=__version__, lifespan=_app_lifespan)

    @app.middleware("http")
    async def _request_id_middleware(request: Request, call_next):
        request_id = str(request.headers.get("x-request-id", "") or "").strip() or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        started = time.perf_counter()
        token = bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        REQUEST_LOGGER.debug(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "event": "request",
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response

    register_exception_handlers(app)
    app.include_router(api_router)
    return app
