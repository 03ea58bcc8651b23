"""In-memory key/value cache whose entries expire after a per-entry TTL.

Used for data that must not outlive a short window and needs no durable
storage: credential failure counters and server join tickets. Expired
entries are dropped lazily on access and in bulk every few writes, so
callers never clean up.
"""

import time
from typing import Any, NamedTuple

_PURGE_EVERY_WRITES = 256


class _Entry(NamedTuple):
    value: Any
    expires_at: float


class ExpiringCache:
    """Dictionary-like store with per-entry expiry on the monotonic clock."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._writes = 0

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:  # noqa: ANN401
        """Store value under key, replacing any previous entry and its expiry."""
        self._entries[key] = _Entry(value, time.monotonic() + ttl_seconds)
        self._writes += 1
        if self._writes % _PURGE_EVERY_WRITES == 0:
            self.purge_expired()

    def get(self, key: str) -> Any:  # noqa: ANN401
        """Return the live value for key, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if time.monotonic() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry. Return how many were removed."""
        now = time.monotonic()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
