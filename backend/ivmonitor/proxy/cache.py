"""Thread-safe in-memory TTL cache for upstream responses."""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from threading import Lock
from typing import Any

DEFAULT_TTL = 600.0  # seconds


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: Any
    expires_at: float  # Clock seconds (time.monotonic by default)


def make_cache_key(endpoint: str, params: Mapping[str, Any] | None = None) -> str:
    """Composite key for (endpoint, params).

    Params are canonicalized (sorted keys) so the same query in a different
    order shares one entry.
    """
    canonical = json.dumps(dict(params or {}), sort_keys=True, separators=(",", ":"), default=str)
    return f"{endpoint}-{canonical}"


class TTLCache:
    """Map of key -> value where each entry expires `ttl` seconds after it was set.

    An entry is never returned at or after its expires_at; expired entries are
    evicted when read. Entries are replaced, never updated in place.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be > 0")
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> CacheEntry | None:
        """Live entry for `key`, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry

    def set(self, key: str, value: Any) -> CacheEntry:
        """Store `value` under `key` with a fresh expiry. Returns the new entry."""
        with self._lock:
            entry = CacheEntry(value=value, expires_at=self._clock() + self._ttl)
            self._entries[key] = entry
            return entry

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
