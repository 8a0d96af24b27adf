"""Time-bounded in-memory cache of decoded setting values.

Entries are trusted for ``ttl_seconds`` after they were written; a read
of an older entry is a miss and evicts it. The cache lives for the
process lifetime and is never persisted.

A lock guards every read-check-write sequence because the local API
server handles requests on several threads.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and when it was stored."""

    value: Any
    encrypted: bool
    timestamp: float


class SettingsCache:
    """
    Read-through cache for the settings store.

    Args:
        ttl_seconds: Staleness window
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the fresh entry for ``key``, or None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.timestamp > self.ttl_seconds:
                del self._entries[key]
                return None
            return entry

    def set(self, key: str, value: Any, encrypted: bool = False) -> None:
        """Store ``value`` with the current timestamp."""
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value,
                encrypted=encrypted,
                timestamp=self._clock(),
            )

    def invalidate(self, key: str) -> None:
        """Drop the entry for ``key`` if present."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
