"""TTL cache for raw provider payloads.

The store knows nothing about what it holds: extractors derive the key,
choose the TTL and decide what to put in. Expiry is lazy: an entry whose
age has reached its TTL is evicted by the next ``get``/``has`` that sees it,
there is no background sweep.

Storage structure:
    {key: CacheEntry(key, value, stored_at, ttl)}

Example keys:
    weather:london
    stock:AAPL:daily

All operations take one lock, so ``get``/``set``/eviction on a key are
atomic even when the store is shared across threads.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tickcast.exceptions import CacheError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """One stored payload and its lifetime."""

    key: str
    value: Any
    stored_at: float
    ttl: float  # seconds

    def is_expired(self, now: float) -> bool:
        """True once the entry's age has reached its TTL."""
        return now - self.stored_at >= self.ttl


class CacheStore(ABC):
    """Contract for swappable raw-payload caches."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the live value for ``key``, or None if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds, replacing any entry."""

    @abstractmethod
    def has(self, key: str) -> bool:
        """True if ``key`` holds a live entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry regardless of TTL."""

    @abstractmethod
    def __len__(self) -> int: ...


class MemoryCache(CacheStore):
    """Process-local TTL cache.

    Args:
        clock: Monotonic time source in seconds (default: time.monotonic).
            Tests inject a fake clock to step past TTLs deterministically.

    Usage:
        cache = MemoryCache()
        cache.set("stock:AAPL:daily", payload, ttl=900)
        cache.get("stock:AAPL:daily")  # payload until 900s have passed
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _live_entry(self, key: str) -> CacheEntry | None:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug("Evicted expired cache entry %s", key)
            return None
        return entry

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._live_entry(key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            raise CacheError(f"TTL must be positive, got {ttl} for {key}")
        with self._lock:
            self._entries[key] = CacheEntry(
                key=key, value=value, stored_at=self._clock(), ttl=ttl
            )

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared (%d entries)", count)

    def __len__(self) -> int:
        """Number of stored entries, expired ones included until evicted."""
        with self._lock:
            return len(self._entries)
