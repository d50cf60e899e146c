"""
Services - Cache Service

In-memory TTL tiers for fetched data-source responses and rendered exports.
Keys are ``<tier>:<rest>``; the prefix picks the tier.
"""

from functools import lru_cache
from typing import Any, Dict, NamedTuple, Optional
from cachetools import TTLCache
import threading

from builder_server.config import get_settings


class _Revisioned(NamedTuple):
    revision: str
    value: Any


class CacheService:
    """TTL cache split into a ``datasource`` tier and an ``export`` tier."""

    TIERS = ("datasource", "export")

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self._lock = threading.Lock()
        self._tiers: Dict[str, TTLCache] = {
            # Last HTTP response per data source id
            "datasource": TTLCache(maxsize=256, ttl=self.settings.cache.ttl_datasource),
            # Rendered page documents
            "export": TTLCache(maxsize=128, ttl=self.settings.cache.ttl_export),
        }

    @property
    def enabled(self) -> bool:
        return self.settings.cache.enabled

    def _tier_for(self, key: str) -> TTLCache:
        tier = key.split(":", 1)[0]
        if tier not in self._tiers:
            raise KeyError(f"Cache key {key!r} has no known tier prefix")
        return self._tiers[tier]

    def get(self, key: str) -> Optional[Any]:
        """Cached value for ``key``, or None on a miss or when caching is off."""
        if not self.enabled:
            return None
        with self._lock:
            return self._tier_for(key).get(key)

    def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._tier_for(key)[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._tier_for(key).pop(key, None)

    def get_versioned(self, key: str, current_version: str) -> Optional[Any]:
        """
        Cached value for ``key`` if it was stored under ``current_version``.

        An entry stored under any other revision is evicted, so the next
        ``set_versioned`` starts from an empty slot.

        Args:
            key: Cache key
            current_version: Revision the caller is about to render

        Returns:
            The cached value, or None
        """
        if not self.enabled:
            return None

        with self._lock:
            tier = self._tier_for(key)
            entry = tier.get(key)
            if not isinstance(entry, _Revisioned):
                return None
            if entry.revision != current_version:
                del tier[key]
                return None
            return entry.value

    def set_versioned(self, key: str, value: Any, version: str) -> None:
        """Store ``value`` tagged with the revision it was produced from."""
        if not self.enabled:
            return
        with self._lock:
            self._tier_for(key)[key] = _Revisioned(version, value)

    def clear_tier(self, tier: str) -> None:
        """
        Empty one tier.

        Raises:
            KeyError: ``tier`` is not one of ``TIERS``
        """
        with self._lock:
            self._tiers[tier].clear()

    def clear_all(self) -> None:
        with self._lock:
            for cache in self._tiers.values():
                cache.clear()

    def get_stats(self) -> dict:
        """Entry count, capacity and TTL per tier."""
        with self._lock:
            stats = {
                name: {"size": len(cache), "maxsize": cache.maxsize, "ttl": cache.ttl}
                for name, cache in self._tiers.items()
            }
        stats["enabled"] = self.enabled
        return stats


@lru_cache(maxsize=1)
def get_cache_service() -> CacheService:
    """Cache shared by the data-source and export services."""
    return CacheService()
