from __future__ import annotations

import threading
import time
import uuid
from typing import Callable

from practice_desk.core.defaults import BULK_PREVIEW_MAX_SESSIONS, BULK_PREVIEW_TTL_SEC
from practice_desk.core.errors import SessionNotFoundError
from practice_desk.imports.workflow import BulkReconciliation


class PreviewSessionStore:
    """Open bulk upload sessions keyed by token, pruned by age and count."""

    def __init__(
        self,
        *,
        ttl_sec: float = BULK_PREVIEW_TTL_SEC,
        max_sessions: int = BULK_PREVIEW_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_sec = float(ttl_sec)
        self.max_sessions = int(max_sessions)
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, tuple[float, BulkReconciliation]] = {}

    def _prune(self, now: float) -> None:
        expired = [token for token, (touched, _) in self._sessions.items() if (now - touched) >= self.ttl_sec]
        for token in expired:
            self._sessions.pop(token, None)
        while len(self._sessions) > self.max_sessions:
            oldest_token = min(self._sessions, key=lambda key: self._sessions[key][0], default=None)
            if oldest_token is None:
                break
            self._sessions.pop(oldest_token, None)

    def save(self, workflow: BulkReconciliation) -> str:
        token = uuid.uuid4().hex
        now = self._clock()
        with self._lock:
            self._sessions[token] = (now, workflow)
            self._prune(now)
        return token

    def load(self, token: str) -> BulkReconciliation:
        key = str(token or "").strip()
        now = self._clock()
        with self._lock:
            self._prune(now)
            entry = self._sessions.get(key) if key else None
            if entry is None:
                raise SessionNotFoundError("Bulk upload preview has expired. Upload the file again.")
            _, workflow = entry
            self._sessions[key] = (now, workflow)
            return workflow

    def discard(self, token: str) -> None:
        key = str(token or "").strip()
        if not key:
            return
        with self._lock:
            self._sessions.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
