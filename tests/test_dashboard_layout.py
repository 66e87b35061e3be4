from __future__ import annotations

import json
import sys
import threading
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.dashboard.layout_store import (  # noqa: E402
    DashboardLayoutStore,
    DashboardWidget,
    default_layout,
    next_position,
    widget_catalog,
)


def _positions(widgets) -> dict[str, tuple[int, int]]:
    return {widget.i: (widget.x, widget.y) for widget in widgets}


def test_first_load_seeds_and_persists_defaults(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)

    widgets = store.load("asha")

    assert widgets == default_layout()
    assert (tmp_path / "asha.json").exists()
    assert DashboardLayoutStore(tmp_path).load("asha") == widgets


def test_add_widget_fills_row_then_wraps(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)

    widgets = store.add_widget("asha", "upcoming-deadlines")
    assert _positions(widgets)["upcoming-deadlines"] == (8, 0)

    widgets = store.add_widget("asha", "top-high-value-matters")
    assert _positions(widgets)["top-high-value-matters"] == (0, 4)


def test_add_widget_is_idempotent_and_rejects_unknown(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)

    assert len(store.add_widget("asha", "matter-status-distribution")) == 2
    with pytest.raises(KeyError):
        store.add_widget("asha", "weather")


def test_remove_and_reset(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)

    remaining = store.remove_widget("asha", "matter-status-distribution")
    assert [widget.i for widget in remaining] == ["practice-area-distribution"]

    assert store.reset("asha") == default_layout()
    assert store.load("asha") == default_layout()


def test_layout_change_moves_widgets_and_keeps_bounds(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)
    store.load("asha")

    updated = store.apply_layout_change(
        "asha",
        [
            {"i": "matter-status-distribution", "x": 4, "y": 0, "w": 4, "h": 4},
            {"i": "practice-area-distribution", "x": 0, "y": 0, "w": 4, "h": 4},
        ],
    )

    assert _positions(updated) == {
        "matter-status-distribution": (4, 0),
        "practice-area-distribution": (0, 0),
    }
    assert all(widget.min_w == widget.max_w == 4 for widget in updated)
    stored = json.loads((tmp_path / "asha.json").read_text(encoding="utf-8"))
    assert stored[0]["minW"] == 4
    assert "static" not in stored[0]


def test_layout_change_clamps_size_to_stored_bounds(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)
    store.load("asha")

    updated = store.apply_layout_change(
        "asha",
        [
            {"i": "matter-status-distribution", "x": 0, "y": 0, "w": 12, "h": 1},
            {"i": "practice-area-distribution", "x": 4, "y": 0, "w": 4, "h": 4},
        ],
    )

    resized = {widget.i: (widget.w, widget.h) for widget in updated}
    assert resized["matter-status-distribution"] == (4, 4)
    assert resized["practice-area-distribution"] == (4, 4)


def test_concurrent_adds_keep_every_widget(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path)
    store.load("asha")
    widget_ids = [
        "top-high-value-matters",
        "upcoming-deadlines",
        "timesheet-invoiced-vs-non-invoiced",
        "timesheet-billable-split",
    ]
    barrier = threading.Barrier(len(widget_ids))

    def add(widget_id: str) -> None:
        barrier.wait(timeout=5)
        store.add_widget("asha", widget_id)

    workers = [threading.Thread(target=add, args=(widget_id,)) for widget_id in widget_ids]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=5)

    placed = {widget.i for widget in store.load("asha")}
    assert placed == {"matter-status-distribution", "practice-area-distribution", *widget_ids}


def test_corrupt_layout_file_is_reseeded(tmp_path: Path) -> None:
    (tmp_path / "asha.json").write_text("{not json", encoding="utf-8")

    assert DashboardLayoutStore(tmp_path).load("asha") == default_layout()


def test_user_key_cannot_escape_directory(tmp_path: Path) -> None:
    store = DashboardLayoutStore(tmp_path / "layouts")

    store.load("../evil")

    files = list((tmp_path / "layouts").iterdir())
    assert len(files) == 1
    assert files[0].parent == tmp_path / "layouts"


def test_next_position_on_empty_grid() -> None:
    assert next_position([], 4) == (0, 0)


def test_widget_payload_accepts_snake_or_camel_bounds() -> None:
    camel = DashboardWidget.from_payload({"i": "a", "x": 0, "y": 0, "w": 4, "h": 2, "minW": 2, "static": True})
    snake = DashboardWidget.from_payload({"i": "a", "x": 0, "y": 0, "w": 4, "h": 2, "min_w": 2, "static": True})

    assert camel == snake
    assert camel.max_w == 4
    assert camel.to_payload()["static"] is True


def test_available_widgets_and_catalog() -> None:
    available = DashboardLayoutStore.available_widgets(default_layout())

    assert "matter-status-distribution" not in {config.id for config in available}
    assert len(available) == 4
    catalog = widget_catalog()
    assert catalog[0]["title"] == "Matter Status Distribution"
    assert catalog[0]["size"] == {"w": 4, "h": 4}
