"""Key/value cache with per-item time-to-live.

Items live either in this process (CacheKind.PROCESS) or on a memcached
server (CacheKind.MEMCACHED, after connect()). CacheKind.NONE caches nothing,
so callers can keep the same code path with caching switched off.
"""

from __future__ import annotations

import enum
import threading
import time
from collections.abc import Callable

from pymemcache import serde
from pymemcache.client.base import Client as MemcacheClient
from pymemcache.exceptions import MemcacheError

from sqlstencil.errors import ArgumentError

DEFAULT_TTL = 3600
DEFAULT_MEMCACHED_PORT = 11211


class CacheKind(enum.Enum):
    NONE = "none"  # caches nothing; writes fail, reads miss
    PROCESS = "process"
    MEMCACHED = "memcached"


ClientFactory = Callable[[tuple[str, int]], MemcacheClient]


def _memcache_client(server: tuple[str, int]) -> MemcacheClient:
    # default_noreply=False so add() reports whether the key was stored.
    return MemcacheClient(server, serde=serde.pickle_serde, default_noreply=False)


class MemoryCache:
    """Thread-safe cache. A ttl of 0 keeps items until removed.

    With CacheKind.MEMCACHED every operation is a miss (writes return False)
    until connect() succeeds.
    """

    def __init__(
        self,
        kind: CacheKind = CacheKind.PROCESS,
        ttl: int = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        client_factory: ClientFactory = _memcache_client,
    ) -> None:
        if ttl < 0:
            raise ArgumentError("Cache TTL must be non-negative")
        self._kind = kind
        self._ttl = ttl
        self._clock = clock
        self._client_factory = client_factory
        self._client: MemcacheClient | None = None
        self._items: dict[str, tuple[object, float | None]] = {}
        self._lock = threading.Lock()

    @property
    def kind(self) -> CacheKind:
        return self._kind

    @property
    def has_connection(self) -> bool:
        return self._client is not None

    def connect(self, host: str, port: int | None = None) -> bool:
        """Connect to a cache server, replacing any previous connection.

        Kinds without a server return True. For memcached the server is
        asked for its version; on failure the cache stays disconnected and
        False is returned.
        """
        self.close()
        if self._kind is not CacheKind.MEMCACHED:
            return True
        client = self._client_factory((host, port or DEFAULT_MEMCACHED_PORT))
        try:
            client.version()
        except (OSError, MemcacheError):
            client.close()
            return False
        self._client = client
        return True

    def close(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            client.close()

    @staticmethod
    def _check_key(key: object) -> None:
        if not isinstance(key, str):
            raise ArgumentError("Key must be a string")

    def _expiry(self, ttl: int) -> float | None:
        return self._clock() + ttl if ttl > 0 else None

    def _live(self, key: str) -> bool:
        """True when key holds an unexpired item. Expired items are dropped. Caller holds the lock."""
        entry = self._items.get(key)
        if entry is None:
            return False
        expires = entry[1]
        if expires is not None and self._clock() >= expires:
            del self._items[key]
            return False
        return True

    def _write(self, store: bool, key: str, value: object, ttl: int | None) -> bool:
        if self._kind is CacheKind.NONE:
            return False
        self._check_key(key)
        ttl = self._ttl if ttl is None else ttl
        with self._lock:
            if self._kind is CacheKind.MEMCACHED:
                if self._client is None:
                    return False
                if store:
                    return bool(self._client.set(key, value, expire=ttl))
                return bool(self._client.add(key, value, expire=ttl))
            if not store and self._live(key):
                return False
            self._items[key] = (value, self._expiry(ttl))
        return True

    def add_item(self, key: str, value: object, ttl: int | None = None) -> bool:
        """Cache value unless key already holds a live item. Returns True if written."""
        return self._write(False, key, value, ttl)

    def store_item(self, key: str, value: object, ttl: int | None = None) -> bool:
        """Cache value, overwriting any existing item. Returns True if written."""
        return self._write(True, key, value, ttl)

    def get_item(self, key: str) -> object | None:
        if self._kind is CacheKind.NONE:
            return None
        self._check_key(key)
        with self._lock:
            if self._kind is CacheKind.MEMCACHED:
                return self._client.get(key) if self._client is not None else None
            if not self._live(key):
                return None
            return self._items[key][0]

    def remove_item(self, key: str) -> None:
        if self._kind is CacheKind.NONE:
            return
        self._check_key(key)
        with self._lock:
            if self._kind is CacheKind.MEMCACHED:
                if self._client is not None:
                    self._client.delete(key)
                return
            self._items.pop(key, None)

    def invalidate(self) -> None:
        """Remove every item."""
        with self._lock:
            if self._kind is CacheKind.MEMCACHED:
                if self._client is not None:
                    self._client.flush_all()
                return
            self._items.clear()
