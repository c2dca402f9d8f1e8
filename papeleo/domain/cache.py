from __future__ import annotations

import time
from typing import Any, Callable, Hashable


class TTLCache:
    """Small in-process map whose entries expire ``ttl_seconds`` after being set.

    Expired entries are evicted on read. Callers invalidate a key explicitly
    after every mutation that affects the cached value.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
