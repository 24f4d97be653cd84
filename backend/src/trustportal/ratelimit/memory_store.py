"""In-process rate limit counters.

Suitable for single-instance deployments only: counters live in process
memory, are not shared between replicas and are lost on restart.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .ports import RateLimitStorePort

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    """Counter state for one key."""
    count: int
    window_reset_at: float


class InMemoryRateLimitStore(RateLimitStorePort):
    """Fixed-window counters held in a dict.

    Increment-then-compare runs under a lock so concurrent requests for
    the same key cannot both read a stale count.

    Args:
        clock: Returns the current time in seconds (defaults to time.time)
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def increment(self, key: str, window_seconds: int, max_requests: int) -> bool:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)

            if entry is None or entry.window_reset_at <= now:
                self._entries[key] = RateLimitEntry(
                    count=1,
                    window_reset_at=now + window_seconds,
                )
                return False

            entry.count += 1
            return entry.count > max_requests

    def sweep(self) -> int:
        """Delete entries whose window has already expired.

        Returns:
            int: Number of entries removed
        """
        now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items()
                if entry.window_reset_at <= now
            ]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.debug(f"Rate limit sweep removed {len(expired)} expired entries")
        return len(expired)

    def get_entry(self, key: str) -> Optional[RateLimitEntry]:
        """Return a copy of the entry for key (debugging aid)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return RateLimitEntry(count=entry.count, window_reset_at=entry.window_reset_at)

    def reset(self) -> None:
        """Drop all counters."""
        with self._lock:
            self._entries.clear()

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def size(self) -> int:
        """Number of tracked keys, expired or not."""
        with self._lock:
            return len(self._entries)
