"""
Per-user dashboard layout persistence.

Layouts are small JSON documents, one file per user under the configured
layout directory. ``load`` seeds and saves the default layout the first time
a user opens the dashboard; every mutation writes the file back.
"""

from __future__ import annotations

import json
import logging
import re
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from practice_desk.core.defaults import DASHBOARD_GRID_COLUMNS
from practice_desk.core.util import as_int

LOGGER = logging.getLogger(__name__)

_SAFE_USER_KEY = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class WidgetSize:
    w: int
    h: int

    @property
    def bounds(self) -> dict[str, int]:
        # Widgets have a fixed size: min and max equal the size.
        return {"min_w": self.w, "max_w": self.w, "min_h": self.h, "max_h": self.h}


@dataclass(frozen=True)
class WidgetConfig:
    id: str
    module: str
    size: WidgetSize

    @property
    def title(self) -> str:
        return " ".join(word.capitalize() for word in self.id.split("-"))


WIDGET_REGISTRY: tuple[WidgetConfig, ...] = (
    WidgetConfig("matter-status-distribution", "matters", WidgetSize(4, 4)),
    WidgetConfig("practice-area-distribution", "matters", WidgetSize(4, 4)),
    WidgetConfig("top-high-value-matters", "matters", WidgetSize(8, 4)),
    WidgetConfig("upcoming-deadlines", "matters", WidgetSize(4, 4)),
    WidgetConfig("timesheet-invoiced-vs-non-invoiced", "timesheets", WidgetSize(4, 4)),
    WidgetConfig("timesheet-billable-split", "timesheets", WidgetSize(4, 4)),
)
WIDGETS_BY_ID = {config.id: config for config in WIDGET_REGISTRY}


@dataclass(frozen=True)
class DashboardWidget:
    i: str
    x: int
    y: int
    w: int
    h: int
    min_w: int
    max_w: int
    min_h: int
    max_h: int
    static: bool | None = None

    @classmethod
    def place(cls, config: WidgetConfig, x: int, y: int) -> "DashboardWidget":
        return cls(i=config.id, x=x, y=y, w=config.size.w, h=config.size.h, **config.size.bounds)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DashboardWidget":
        w = as_int(payload.get("w"), default=1, min_value=1)
        h = as_int(payload.get("h"), default=1, min_value=1)
        static = payload.get("static")
        return cls(
            i=str(payload.get("i") or ""),
            x=as_int(payload.get("x"), default=0, min_value=0),
            y=as_int(payload.get("y"), default=0, min_value=0),
            w=w,
            h=h,
            min_w=as_int(payload.get("minW", payload.get("min_w")), default=w),
            max_w=as_int(payload.get("maxW", payload.get("max_w")), default=w),
            min_h=as_int(payload.get("minH", payload.get("min_h")), default=h),
            max_h=as_int(payload.get("maxH", payload.get("max_h")), default=h),
            static=None if static is None else bool(static),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "i": self.i,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "minW": self.min_w,
            "maxW": self.max_w,
            "minH": self.min_h,
            "maxH": self.max_h,
        }
        if self.static is not None:
            payload["static"] = self.static
        return payload


def default_layout() -> list[DashboardWidget]:
    return [
        DashboardWidget.place(WIDGETS_BY_ID["matter-status-distribution"], 0, 0),
        DashboardWidget.place(WIDGETS_BY_ID["practice-area-distribution"], 4, 0),
    ]


def next_position(widgets: list[DashboardWidget], width: int) -> tuple[int, int]:
    """Right of the last widget (top-to-bottom, left-to-right), wrapping below when full."""
    if not widgets:
        return 0, 0
    ordered = sorted(widgets, key=lambda item: (item.y, item.x))
    last = ordered[-1]
    next_x, next_y = last.x + last.w, last.y
    if next_x + width > DASHBOARD_GRID_COLUMNS:
        next_x = 0
        next_y = max(item.y + item.h for item in ordered)
    return next_x, next_y


class DashboardLayoutStore:
    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path(self, user_key: str) -> Path:
        cleaned = _SAFE_USER_KEY.sub("_", str(user_key or "").strip()) or "anonymous"
        return self.directory / f"{cleaned}.json"

    def _read(self, path: Path) -> list[DashboardWidget] | None:
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Dashboard layout at %s is unreadable; reseeding defaults.", path, exc_info=True)
            return None
        if not isinstance(raw, list):
            return None
        return [DashboardWidget.from_payload(item) for item in raw if isinstance(item, Mapping)]

    def _write(self, path: Path, widgets: Iterable[DashboardWidget]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(".json.tmp")
        temp_path.write_text(
            json.dumps([widget.to_payload() for widget in widgets], indent=2),
            encoding="utf-8",
        )
        temp_path.replace(path)

    def _load_unlocked(self, path: Path) -> list[DashboardWidget]:
        widgets = self._read(path)
        if widgets is None:
            widgets = default_layout()
            self._write(path, widgets)
            LOGGER.info("Seeded default dashboard layout.", extra={"layout_path": str(path)})
        return widgets

    def load(self, user_key: str) -> list[DashboardWidget]:
        with self._lock:
            return self._load_unlocked(self._path(user_key))

    def save(self, user_key: str, widgets: Iterable[DashboardWidget]) -> list[DashboardWidget]:
        items = list(widgets)
        with self._lock:
            self._write(self._path(user_key), items)
        return items

    def add_widget(self, user_key: str, widget_id: str) -> list[DashboardWidget]:
        config = WIDGETS_BY_ID.get(str(widget_id or "").strip())
        if config is None:
            raise KeyError(f"Unknown dashboard widget: {widget_id}")
        path = self._path(user_key)
        with self._lock:
            widgets = self._load_unlocked(path)
            if any(item.i == config.id for item in widgets):
                return widgets
            x, y = next_position(widgets, config.size.w)
            widgets = [*widgets, DashboardWidget.place(config, x, y)]
            self._write(path, widgets)
        return widgets

    def remove_widget(self, user_key: str, widget_id: str) -> list[DashboardWidget]:
        path = self._path(user_key)
        with self._lock:
            widgets = [item for item in self._load_unlocked(path) if item.i != widget_id]
            self._write(path, widgets)
        return widgets

    def apply_layout_change(self, user_key: str, items: Iterable[Mapping[str, Any]]) -> list[DashboardWidget]:
        """Take new positions from the grid; sizes are clamped to each widget's stored bounds."""
        path = self._path(user_key)
        with self._lock:
            existing = {item.i: item for item in self._load_unlocked(path)}
            updated: list[DashboardWidget] = []
            for raw in items:
                moved = DashboardWidget.from_payload(raw)
                current = existing.get(moved.i)
                if current is None:
                    updated.append(
                        DashboardWidget(
                            i=moved.i, x=moved.x, y=moved.y, w=moved.w, h=moved.h,
                            min_w=moved.w, max_w=moved.w, min_h=moved.h, max_h=moved.h,
                        )
                    )
                    continue
                updated.append(
                    DashboardWidget(
                        i=moved.i,
                        x=moved.x,
                        y=moved.y,
                        w=min(max(moved.w, current.min_w), current.max_w),
                        h=min(max(moved.h, current.min_h), current.max_h),
                        min_w=current.min_w,
                        max_w=current.max_w,
                        min_h=current.min_h,
                        max_h=current.max_h,
                        static=current.static,
                    )
                )
            self._write(path, updated)
        return updated

    def reset(self, user_key: str) -> list[DashboardWidget]:
        return self.save(user_key, default_layout())

    @staticmethod
    def available_widgets(widgets: Iterable[DashboardWidget]) -> list[WidgetConfig]:
        placed = {item.i for item in widgets}
        return [config for config in WIDGET_REGISTRY if config.id not in placed]


def widget_catalog() -> list[dict[str, Any]]:
    return [{**asdict(config), "title": config.title} for config in WIDGET_REGISTRY]
