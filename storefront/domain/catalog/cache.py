# storefront/domain/catalog/cache.py
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    key: str
    data: Any
    stored_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at < self.ttl


class TTLCache:
    """In-process cache where every entry expires independently.

    Lifetimes are in seconds. Expired entries are evicted lazily by ``get``.
    Entries are replaced whole on ``set`` and never mutated, so concurrent
    readers always see a complete value.
    """

    def __init__(self, default_ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = CacheEntry(
            key=key,
            data=value,
            stored_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.data

    def clear(self) -> None:
        self._entries.clear()

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """Drop every key containing ``pattern``; everything when no pattern is given."""
        if not pattern:
            count = len(self._entries)
            self.clear()
            return count
        stale = [key for key in self._entries if pattern in key]
        for key in stale:
            self._entries.pop(key, None)
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
