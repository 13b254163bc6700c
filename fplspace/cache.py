"""
Simple in-memory TTL cache for API responses.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    payload: Any
    timestamp: float
    ttl: Optional[float]

    def is_valid(self, now: float) -> bool:
        if self.ttl is None:
            return True
        return (now - self.timestamp) < self.ttl


class DataCache:
    """
    Keep payloads in process memory for reuse until their TTL runs out.
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any:
        """
        Retrieve cached value if not expired.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_valid(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.payload

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Store value in the cache.
        """
        effective = ttl if ttl is not None else self.default_ttl
        self._entries[key] = CacheEntry(value, self._clock(), effective)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """
        Remove all cached entries.
        """
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
