"""In-memory cache with per-entry time-to-live.

Entries expire lazily: an expired entry is evicted by the read that
observes it. There is no size bound; entries leave the cache only on
expiry, ``delete`` or ``clear``.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Default TTL (5 minutes)
DEFAULT_TTL = 300.0


@dataclass(slots=True)
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """Key/value store with absolute per-entry expiry.

    TTLs are in seconds. Returned values are the stored objects themselves,
    not copies.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl < 0:
            raise ValueError("default_ttl must be >= 0")
        self._default_ttl = default_ttl
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def set_default_ttl(self, ttl: float) -> None:
        """Change the TTL used by future writes. Existing entries keep theirs."""
        if ttl < 0:
            raise ValueError("ttl must be >= 0")
        self._default_ttl = ttl

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._store[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value, overwriting any existing entry."""
        ttl = self._default_ttl if ttl is None else ttl
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self) -> int:
        """Evict every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._store.items() if now >= e.expires_at]
            for key in expired:
                del self._store[key]
            return len(expired)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[call-overload]
            return entry is not None and self._clock() < entry.expires_at

    def __len__(self) -> int:
        # Includes expired entries not yet evicted
        return len(self._store)
