"""
Search-as-you-type helpers.

``SearchDebouncer`` waits for input to pause before running a search and
only applies a result if the input that produced it is still the latest one.
``ActiveGuard`` lets a caller drop late results once its view is disposed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from practice_desk.core.defaults import DEFAULT_SEARCH_DEBOUNCE_MS

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ActiveGuard:
    def __init__(self) -> None:
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        self._active = False

    def apply(self, apply: Callable[[T], Any], result: T) -> bool:
        if not self._active:
            return False
        apply(result)
        return True


class SearchDebouncer(Generic[T]):
    def __init__(self, delay_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS) -> None:
        self.delay_sec = max(0, int(delay_ms)) / 1000.0
        self._latest: str | None = None
        self._pending: asyncio.Task[T | None] | None = None

    @property
    def latest(self) -> str | None:
        return self._latest

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def is_current(self, value: str) -> bool:
        return value == self._latest

    def schedule(self, value: str, handler: Callable[[str], Awaitable[T]]) -> asyncio.Task[T | None]:
        """Replace any pending call; the handler runs after the delay if ``value`` is still latest."""
        self._latest = value
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.ensure_future(self._run(value, handler))
        return self._pending

    async def _run(self, value: str, handler: Callable[[str], Awaitable[T]]) -> T | None:
        await asyncio.sleep(self.delay_sec)
        if not self.is_current(value):
            return None
        return await handler(value)

    def apply_if_current(self, value: str, result: T, apply: Callable[[T], Any]) -> bool:
        """Apply ``result`` only when no newer input superseded ``value``."""
        if not self.is_current(value):
            LOGGER.debug("Dropping superseded search result for %r.", value)
            return False
        apply(result)
        return True

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
