"""
In-memory credential store - Implements CredentialStore protocol.

Process-local dict with per-key expiry, for development and tests.
A single lock makes every operation (rename included) atomic with
respect to other threads in the process.
"""

import math
import threading
import time
from collections.abc import Callable

from guestpass.domain.exceptions import SourceKeyMissing


class MemoryCredentialStore:
    """
    Implements CredentialStore protocol with a locked dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Expired entries are dropped lazily on access.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Args:
            clock: Monotonic seconds source; tests inject a fake one
        """
        self._clock = clock
        self._data: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live(key)
            return entry[0] if entry else None

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        with self._lock:
            self._data[key] = (value, self._clock() + ttl_seconds)

    def rename(self, old_key: str, new_key: str) -> None:
        with self._lock:
            entry = self._live(old_key)
            if entry is None:
                raise SourceKeyMissing(old_key)
            del self._data[old_key]
            self._data[new_key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def ttl(self, key: str) -> int | None:
        with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            return math.ceil(entry[1] - self._clock())

    def keys(self) -> list[str]:
        """Live keys, for diagnostics and tests."""
        with self._lock:
            return [key for key in list(self._data) if self._live(key)]

    def _live(self, key: str) -> tuple[str, float] | None:
        # Caller holds the lock
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            del self._data[key]
            return None
        return entry
