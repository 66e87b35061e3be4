from __future__ import annotations

from fastapi import APIRouter, Header

from practice_desk.dashboard.layout_store import DashboardLayoutStore, widget_catalog
from practice_desk.web.runtime import get_layout_store
from practice_desk.web.schemas import AddWidgetRequest, LayoutChangeRequest

router = APIRouter(prefix="/api/dashboard")

USER_KEY_HEADER = "X-User-Key"


def _layout_payload(widgets) -> dict:
    return {
        "ok": True,
        "widgets": [widget.to_payload() for widget in widgets],
        "available": [config.id for config in DashboardLayoutStore.available_widgets(widgets)],
    }


@router.get("/widgets")
def api_widget_catalog():
    return {"ok": True, "widgets": widget_catalog()}


@router.get("/layout")
def api_layout(user_key: str = Header(default="default", alias=USER_KEY_HEADER)):
    return _layout_payload(get_layout_store().load(user_key))


@router.post("/layout/widgets")
def api_layout_add(body: AddWidgetRequest, user_key: str = Header(default="default", alias=USER_KEY_HEADER)):
    return _layout_payload(get_layout_store().add_widget(user_key, body.widget_id))


@router.delete("/layout/widgets/{widget_id}")
def api_layout_remove(widget_id: str, user_key: str = Header(default="default", alias=USER_KEY_HEADER)):
    return _layout_payload(get_layout_store().remove_widget(user_key, widget_id))


@router.put("/layout")
def api_layout_change(body: LayoutChangeRequest, user_key: str = Header(default="default", alias=USER_KEY_HEADER)):
    return _layout_payload(get_layout_store().apply_layout_change(user_key, body.items))


@router.post("/layout/reset")
def api_layout_reset(user_key: str = Header(default="default", alias=USER_KEY_HEADER)):
    return _layout_payload(get_layout_store().reset(user_key))
