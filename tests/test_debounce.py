from __future__ import annotations

import asyncio
import sys
from pathlib import Path

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.search.debounce import ActiveGuard, SearchDebouncer  # noqa: E402


def test_only_the_last_value_in_a_burst_is_searched() -> None:
    calls: list[str] = []

    async def handler(value: str) -> str:
        calls.append(value)
        return value.upper()

    async def scenario() -> tuple[str | None, bool]:
        debouncer: SearchDebouncer[str] = SearchDebouncer(delay_ms=20)
        first = debouncer.schedule("ac", handler)
        second = debouncer.schedule("acme", handler)
        result = await second
        return result, first.cancelled()

    result, first_cancelled = asyncio.run(scenario())

    assert result == "ACME"
    assert first_cancelled is True
    assert calls == ["acme"]


def test_zero_delay_still_runs_the_handler() -> None:
    async def handler(value: str) -> int:
        return len(value)

    async def scenario() -> int | None:
        debouncer: SearchDebouncer[int] = SearchDebouncer(delay_ms=0)
        return await debouncer.schedule("globex", handler)

    assert asyncio.run(scenario()) == 6


def test_stale_results_are_not_applied() -> None:
    applied: list[str] = []

    async def handler(value: str) -> str:
        return value

    async def scenario() -> tuple[bool, bool, bool]:
        debouncer: SearchDebouncer[str] = SearchDebouncer(delay_ms=10)
        debouncer.schedule("jan", handler)
        debouncer.schedule("jane", handler)
        stale = debouncer.apply_if_current("jan", "jan-results", applied.append)
        fresh = debouncer.apply_if_current("jane", "jane-results", applied.append)
        pending = debouncer.pending
        debouncer.cancel()
        return stale, fresh, pending

    stale, fresh, pending = asyncio.run(scenario())

    assert stale is False
    assert fresh is True
    assert pending is True
    assert applied == ["jane-results"]


def test_cancel_drops_pending_search() -> None:
    calls: list[str] = []

    async def handler(value: str) -> str:
        calls.append(value)
        return value

    async def scenario() -> bool:
        debouncer: SearchDebouncer[str] = SearchDebouncer(delay_ms=10)
        task = debouncer.schedule("acme", handler)
        debouncer.cancel()
        await asyncio.sleep(0.03)
        return task.cancelled() and not debouncer.pending

    assert asyncio.run(scenario()) is True
    assert calls == []


def test_guard_drops_results_after_dispose() -> None:
    guard = ActiveGuard()
    applied: list[int] = []

    assert guard.apply(applied.append, 1) is True
    guard.dispose()

    assert guard.active is False
    assert guard.apply(applied.append, 2) is False
    assert applied == [1]
