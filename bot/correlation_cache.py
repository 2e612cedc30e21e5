"""
Module: bot/correlation_cache.py

Defines CorrelationCache: a short-lived, per-user store that carries context
from an initiating interaction (e.g. a message context-menu command) to a
later, independent follow-up interaction (e.g. the modal submission) from
the same user.
"""
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

from utils import log_message

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_WINDOW = timedelta(minutes=5)


@dataclass
class CacheEntry(Generic[V]):
    value: V
    expires_at: float


class CorrelationCache(Generic[K, V]):
    """
    Keyed store with sliding expiration and at most one entry per key.

    Every successful `get` pushes the entry's deadline out to a full window
    from now. Expired entries are invisible to `get` even if no sweep has
    removed them yet.

    Attributes:
      name (str): Label used in log lines.
      window (timedelta): Sliding expiration window.
      consume_on_read (bool): Remove the entry on a successful `get`
        instead of refreshing it.
    """
    def __init__(
        self,
        name: str = "correlation",
        window: timedelta = DEFAULT_WINDOW,
        consume_on_read: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window.total_seconds() <= 0:
            raise ValueError("window must be positive")
        self.name = name
        self.window = window
        self.consume_on_read = consume_on_read
        self._clock = clock
        self._entries: Dict[K, CacheEntry[V]] = {}
        self._lock = threading.Lock()

    def _deadline(self) -> float:
        return self._clock() + self.window.total_seconds()

    def put(self, key: K, value: V) -> None:
        """Store `value` under `key`, replacing any existing entry."""
        with self._lock:
            self._evict_expired_locked()
            self._entries[key] = CacheEntry(value, self._deadline())
        log_message(f"{self.name} cache: stored entry for {key}", "debug")

    def get(self, key: K) -> Optional[V]:
        """
        Return the value stored under `key`, or None if absent or expired.

        A hit either slides the deadline forward or, with consume_on_read,
        removes the entry.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                log_message(f"{self.name} cache: entry for {key} expired", "debug")
                return None
            if self.consume_on_read:
                del self._entries[key]
            else:
                entry.expires_at = self._deadline()
            return entry.value

    def purge_all(self) -> None:
        """Drop every entry regardless of key or expiry state."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        log_message(f"{self.name} cache: purged {count} entries", "debug")

    def evict_expired(self) -> int:
        """Remove entries past their deadline and return how many were removed."""
        with self._lock:
            return self._evict_expired_locked()

    def _evict_expired_locked(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for k in expired:
            del self._entries[k]
        return len(expired)

    def __len__(self):
        with self._lock:
            return len(self._entries)
