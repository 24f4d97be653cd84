"""Rate Limit Store Port - keyed, time-windowed counters.

Architecture: Hexagonal - Port interface; adapters in memory_store and
redis_store.
"""

from abc import ABC, abstractmethod


class RateLimitStorePort(ABC):
    """Port interface for fixed-window request counters.

    A window starts with the first request for a key and lasts
    window_seconds. Counts reset when a request arrives after expiry.
    Bursts straddling a window boundary can admit up to
    2 x max_requests; this is an accepted approximation.
    """

    @abstractmethod
    def increment(self, key: str, window_seconds: int, max_requests: int) -> bool:
        """Count one request for key.

        Args:
            key: Counter key, e.g. "ip:203.0.113.7"
            window_seconds: Window length applied when a new window starts
            max_requests: Ceiling for the window

        Returns:
            bool: True if the limit is exceeded (count > max_requests).
            Implementations never raise.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Forget the counter for key, starting a fresh window next time.

        Implementations never raise.
        """
