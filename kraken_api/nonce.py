"""Nonce generation for signed requests.

Kraken rejects any private call whose nonce is not strictly greater than the
last one it saw for the API key. Values are microseconds since the epoch,
bumped by one whenever the clock has not advanced past the last issued value.
"""
import threading
import time
from typing import Callable, Optional


def microtime() -> int:
    """Wall clock as ``seconds * 10**6 + microseconds``."""
    return time.time_ns() // 1000


class NonceGenerator:
    """Thread-safe, strictly increasing nonce source.

    Example:
        >>> gen = NonceGenerator(clock=lambda: 1700000000123456)
        >>> gen.next(), gen.next()
        (1700000000123456, 1700000000123457)
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or microtime
        self._lock = threading.Lock()
        self._last = 0

    @property
    def last(self) -> int:
        return self._last

    def next(self) -> int:
        with self._lock:
            value = max(self._clock(), self._last + 1)
            self._last = value
            return value

    def observe(self, value: int) -> None:
        """Record an externally chosen nonce so later values stay above it."""
        with self._lock:
            if value > self._last:
                self._last = value
