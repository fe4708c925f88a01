"""In-process key -> value store with per-entry expiry."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


def resolution_key(date: str) -> str:
    return f"resolution:{date}"


def asset_key(asset_id: str) -> str:
    return f"asset:{asset_id}"


def snapshot_key(page_url: str) -> str:
    return f"snapshot:{page_url}"


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """Unbounded TTL cache.

    Expired entries are never returned and are purged lazily on the next
    ``get`` for their key. There is no capacity limit and no locking; writes
    to the same key are last-write-wins.

    Parameters
    ----------
    default_ttl:
        TTL in seconds used when ``set`` is called without one.
    clock:
        Monotonic time source; tests inject a fake one.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for *key*, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            # Entry may have been replaced concurrently; pop without raising
            self._entries.pop(key, None)
            logger.debug("cache_expired", extra={"key": key})
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store *value* under *key* for *ttl* seconds (default TTL if omitted)."""
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def __len__(self) -> int:
        return len(self._entries)
