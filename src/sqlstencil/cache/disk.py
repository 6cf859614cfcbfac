"""Disk-backed cache shared between processes.

Each key maps to two files in the cache directory::

    <key>.dat      pickled value
    <key>.dat.met  JSON metadata ({"expiry": unix seconds})

Reads, writes and removals hold fcntl.flock on one directory-wide lock
file, LOCK_NAME. It is never unlinked, so every process locks the same inode.

Values are pickled: only point the cache at a directory you trust.
"""

from __future__ import annotations

import contextlib
import fcntl
import json
import os
import pickle
import re
import time
from collections.abc import Iterator
from pathlib import Path

from sqlstencil.errors import ArgumentError, CacheError, ConfigurationError

LOCATION_ENV = "DISKCACHE_LOCATION"
DEFAULT_EXPIRE_MINUTES = 120

_SUFFIX_DATA = ".dat"
_SUFFIX_METADATA = ".met"
LOCK_NAME = ".lock"
_METADATA_EXPIRY = "expiry"

_KEY_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


class DiskCache:
    def __init__(self, location: str | Path | None = None, clean: bool = True) -> None:
        if location is None:
            location = os.environ.get(LOCATION_ENV)
        if not location:
            raise ConfigurationError(f"Disk cache location not set ({LOCATION_ENV})")
        self._location = Path(location)
        if not self._location.is_dir():
            raise ConfigurationError(f"Disk cache location '{self._location}' does not exist")
        if clean:
            self.clean()

    @property
    def location(self) -> Path:
        return self._location

    def _data_file(self, key: str) -> Path:
        if not isinstance(key, str) or not _KEY_RE.match(key) or ".." in key:
            raise ArgumentError(f"Illegal disk cache key {key!r}")
        return self._location / f"{key.lower()}{_SUFFIX_DATA}"

    @staticmethod
    def _sidecar(data_file: Path, suffix: str) -> Path:
        return data_file.with_name(data_file.name + suffix)

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the cache lock. Blocks while another process holds it."""
        with open(self._location / LOCK_NAME, "a") as lock:
            fcntl.flock(lock, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock, fcntl.LOCK_UN)

    def _expiry(self, data_file: Path) -> float | None:
        try:
            metadata = json.loads(self._sidecar(data_file, _SUFFIX_METADATA).read_text())
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise CacheError(f"Unreadable disk cache metadata for '{data_file.stem}': {e}") from e
        expiry = metadata.get(_METADATA_EXPIRY)
        return float(expiry) if expiry is not None else None

    def _expired(self, data_file: Path) -> bool:
        expiry = self._expiry(data_file)
        return expiry is not None and time.time() >= expiry

    def clean(self) -> int:
        """Remove every expired entry. Returns how many were removed."""
        removed = 0
        for data_file in self._location.glob(f"*{_SUFFIX_DATA}"):
            if self._expired(data_file):
                self.remove(data_file.stem)
                removed += 1
        return removed

    def get(self, key: str) -> object | None:
        """Cached value for key, or None when missing or expired."""
        data_file = self._data_file(key)
        if not data_file.exists() or self._expired(data_file):
            return None
        try:
            with self._locked():
                payload = data_file.read_bytes()
        except FileNotFoundError:
            return None
        try:
            return pickle.loads(payload)
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as e:
            raise CacheError(f"Corrupt disk cache entry '{key}': {e}") from e

    def set(self, key: str, value: object, expire_minutes: int = DEFAULT_EXPIRE_MINUTES) -> None:
        """Store value under key. expire_minutes <= 0 keeps it until removed."""
        if value is None:
            raise ArgumentError("Cannot cache None")
        data_file = self._data_file(key)
        metadata_file = self._sidecar(data_file, _SUFFIX_METADATA)
        with self._locked():
            data_file.write_bytes(pickle.dumps(value))
            if expire_minutes > 0:
                expiry = time.time() + expire_minutes * 60
                metadata_file.write_text(json.dumps({_METADATA_EXPIRY: expiry}))
            else:
                metadata_file.unlink(missing_ok=True)

    def is_cached(self, key: str) -> bool:
        data_file = self._data_file(key)
        return data_file.exists() and not self._expired(data_file)

    def remove(self, key: str) -> None:
        """Remove key and its metadata. Missing keys are ignored."""
        data_file = self._data_file(key)
        with self._locked():
            data_file.unlink(missing_ok=True)
            self._sidecar(data_file, _SUFFIX_METADATA).unlink(missing_ok=True)
