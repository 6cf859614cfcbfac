"""Per-client request throttling on top of MemoryCache.

Operates at application level: a firewall or web server limit is still the
first line of defence against floods.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sqlstencil.cache.memory import MemoryCache
from sqlstencil.errors import ArgumentError, ConfigurationError

_KEY_PREFIX = "Throttle"


class Throttle:
    def __init__(self, cache: MemoryCache, log_path: str | Path | None = None) -> None:
        self._cache = cache
        self._log_path = Path(log_path) if log_path is not None else None

    def is_request_throttled(
        self,
        context: str,
        timeout: int,
        maximum_requests: int = 0,
        request_ip: str | None = None,
    ) -> bool:
        """True if the request should be denied.

        context names the kind of request, so one endpoint can throttle
        separate operations at separate rates. With maximum_requests=0 only one
        request per timeout seconds is allowed; otherwise requests are counted
        and denied once the count reaches the maximum. Every counted request
        restarts the timeout.
        """
        if not context:
            raise ArgumentError("Throttle context must be set")
        if timeout < 1:
            raise ArgumentError("Throttle timeout must be greater than zero")
        if maximum_requests < 0:
            raise ArgumentError("Throttle maximum requests must be non-negative")
        if not request_ip:
            raise ArgumentError("Throttle cannot determine request IP")

        key = f"{_KEY_PREFIX}.{context}.{request_ip}"
        count = self._cache.get_item(key)
        if count is None:
            if not self._cache.store_item(key, 1, timeout):
                raise ConfigurationError("Throttling not available as memory cache not present")
            return False

        if maximum_requests == 0:
            self._log(f"Denied request for '{context}' from {request_ip}")
            return True

        count = int(count) + 1
        self._cache.store_item(key, count, timeout)
        if count >= maximum_requests:
            self._log(
                f"Denied request #{count} after {maximum_requests} maximum "
                f"for '{context}' from {request_ip}"
            )
            return True
        return False

    def _log(self, message: str) -> None:
        if self._log_path is None:
            return
        with open(self._log_path, "a") as f:
            f.write(f"{datetime.now(UTC).isoformat()} {message}\n")
