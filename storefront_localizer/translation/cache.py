"""Translation caches: a bounded LRU and a TTL cache for dynamic content."""

import hashlib
import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, Set

logger = logging.getLogger(__name__)


def content_key(*parts: Any) -> str:
    """Content hash over arbitrary JSON-serializable parts."""
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class LRUCache:
    """Bounded cache evicting the least recently used entry."""

    def __init__(self, max_size: int = 100):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value and mark it most recently used, or None."""
        if key in self._entries:
            self._entries.move_to_end(key)
            self.hits += 1
            return self._entries[key]
        self.misses += 1
        return None

    def set(self, key: Hashable, value: Any) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted least recently used cache entry %s", evicted)
        self._entries[key] = value

    def delete(self, key: Hashable) -> bool:
        if key not in self._entries:
            return False
        del self._entries[key]
        return True

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def keys(self) -> list:
        """Keys from least to most recently used."""
        return list(self._entries.keys())

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": (self.hits / total) * 100 if total > 0 else 0,
        }


@dataclass
class TTLEntry:
    value: Any
    expires_at: float
    tags: Set[str] = field(default_factory=set)


class TTLCache:
    """
    Cache whose entries expire after a per-entry time to live (seconds).

    Expired entries are dropped when read, and `set` sweeps the whole cache
    whenever `sweep_interval` seconds have passed since the last sweep.
    """

    def __init__(
        self,
        default_ttl: float = 86400,
        sweep_interval: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: Dict[str, TTLEntry] = {}
        self._last_sweep = clock()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[float] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> None:
        now = self._clock()
        if now - self._last_sweep >= self.sweep_interval:
            self.sweep()
        self._entries[key] = TTLEntry(
            value=value,
            expires_at=now + (self.default_ttl if ttl is None else ttl),
            tags=set(tags or ()),
        )

    def sweep(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def invalidate_tag(self, tag: str) -> int:
        """Drop every entry carrying `tag`."""
        tagged = [key for key, entry in self._entries.items() if tag in entry.tags]
        for key in tagged:
            del self._entries[key]
        return len(tagged)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
