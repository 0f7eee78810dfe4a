"""Injected cache interface for memoised analysis results."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional, Protocol


class AnalysisCache(Protocol):
    """Minimal get/set/expire store the engine facade memoises into."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...

    def expire(self, key: str) -> None: ...

    def expire_prefix(self, prefix: str) -> int: ...


class InMemoryCache:
    """Process-local, thread-safe cache with per-entry time-to-live.

    Expired entries are dropped when read and swept on every write, so the
    store only holds live entries plus those that expired since the last set.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                self._entries.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            if ttl_seconds <= 0:
                self._entries.pop(key, None)
                return
            self._entries[key] = (now + ttl_seconds, value)

    def expire(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def expire_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with prefix; returns how many."""

        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
