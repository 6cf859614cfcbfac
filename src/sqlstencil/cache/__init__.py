"""Key/value caches: in-process or memcached (MemoryCache) and on-disk (DiskCache)."""

from sqlstencil.cache.disk import DiskCache
from sqlstencil.cache.memory import CacheKind, MemoryCache

__all__ = ["CacheKind", "DiskCache", "MemoryCache"]
