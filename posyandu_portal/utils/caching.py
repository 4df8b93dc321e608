from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass
import math
import time

from posyandu_portal.core.config import settings
from posyandu_portal.utils.logging import get_logger

logger = get_logger()

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    key: str
    value: Any
    expires_at: int  # ms since epoch

    def is_expired(self, now: int) -> bool:
        return self.expires_at <= now


class DataCache:
    """In-memory key-value store with per-entry TTL.

    Expiry is lazy: entries are checked when read and a stale entry is
    treated as absent (and dropped). ``sweep()`` removes stale entries that
    are never read again. One instance lives for the whole app session; see
    ``core.lifespan``.
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        clock: Optional[Clock] = None,
        max_entries: Optional[int] = None,
    ):
        if default_ttl is None:
            default_ttl = settings.CACHE_DEFAULT_TTL
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if max_entries is None:
            max_entries = settings.CACHE_MAX_ENTRIES
        if max_entries < 0:
            raise ValueError("max_entries cannot be negative")

        self.default_ttl = default_ttl
        self.max_entries = max_entries  # 0 = unbounded
        self._clock = clock or wall_clock_ms
        self._entries: Dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def _live_entry(self, key: str, now: int) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(now):
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return entry

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._live_entry(key, self._clock())
        if entry is None:
            self.misses += 1
            return default
        self.hits += 1
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        if ttl is None:
            ttl = self.default_ttl
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")

        now = self._clock()
        if self.max_entries and key not in self._entries:
            self._make_room(now)

        self._entries[key] = CacheEntry(
            key=key, value=value, expires_at=now + math.ceil(ttl * 1000)
        )
        logger.debug(f"Cache set: {key} (ttl={ttl}s)")

    def _make_room(self, now: int) -> None:
        if len(self._entries) < self.max_entries:
            return
        self._sweep(now)
        while len(self._entries) >= self.max_entries:
            oldest = min(self._entries.values(), key=lambda e: e.expires_at)
            del self._entries[oldest.key]
            self.evictions += 1
            logger.debug(f"Cache full, evicted: {oldest.key}")

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop ``key``, or every entry when no key is given."""
        if key is None:
            count = len(self._entries)
            self._entries.clear()
            logger.debug(f"Cache cleared ({count} entries)")
            return
        if self._entries.pop(key, None) is not None:
            logger.debug(f"Cache invalidated: {key}")

    def invalidate_prefix(self, prefix: str) -> int:
        keys = [k for k in self._entries if k.startswith(prefix)]
        for k in keys:
            del self._entries[k]
        if keys:
            logger.debug(f"Cache invalidated {len(keys)} keys with prefix '{prefix}'")
        return len(keys)

    def contains(self, key: str) -> bool:
        return self._live_entry(key, self._clock()) is not None

    __contains__ = contains

    def keys(self) -> List[str]:
        now = self._clock()
        return [k for k, e in self._entries.items() if not e.is_expired(now)]

    def __len__(self) -> int:
        return len(self.keys())

    def _sweep(self, now: int) -> int:
        stale = [k for k, e in self._entries.items() if e.is_expired(now)]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def sweep(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        removed = self._sweep(self._clock())
        if removed:
            logger.debug(f"Cache sweep removed {removed} expired entries")
        return removed

    def stats(self) -> dict:
        keys = self.keys()
        return {
            "entries": len(keys),
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "default_ttl": self.default_ttl,
            "max_entries": self.max_entries,
            "keys": sorted(keys),
        }
