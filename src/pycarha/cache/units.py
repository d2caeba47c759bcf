"""Persistent per-sensor unit cache.

The vehicle cloud intermittently drops the unit of a diagnostic element
(``null``, missing key or ``"N/A"``).  The last real unit seen for each
sensor is remembered here and mirrored to a VIN-scoped JSON file so it
survives restarts.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from pycarha._constants import UNIT_CACHE_FILENAME
from pycarha.cache._json_file import JsonFileStore
from pycarha.config import CarConfig
from pycarha.exceptions import CarCacheError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of a cache's contents."""

    size: int
    entries: dict[str, object] = field(default_factory=dict)


class UnitCache:
    """Canonical sensor name → last real upstream unit string.

    Entries never expire; a changed unit simply overwrites the old one.
    Every :meth:`put` persists the whole mapping.
    """

    def __init__(self, path: Path) -> None:
        self._store = JsonFileStore(path)
        self._units: dict[str, str] = {}
        self._loaded = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: CarConfig) -> UnitCache:
        return cls(config.resolve_cache_dir() / UNIT_CACHE_FILENAME.format(vin=config.vin))

    @property
    def path(self) -> Path:
        return self._store.path

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        data = self._store.read()
        self._units = {str(key): str(value) for key, value in data.items() if isinstance(value, str)}
        self._loaded = True
        if self._units:
            _logger.debug("Loaded %d cached units from %s", len(self._units), self._store.path)

    def load(self) -> None:
        """(Re)load the mapping from disk, discarding in-memory entries."""
        with self._lock:
            self._loaded = False
            self._ensure_loaded()

    def get(self, name: str) -> str | None:
        with self._lock:
            self._ensure_loaded()
            return self._units.get(name)

    def put(self, name: str, unit: str) -> None:
        """Remember *unit* for *name* and persist immediately.

        A failed write is logged; the in-memory entry is kept and the
        file is rewritten on the next successful put.
        """
        with self._lock:
            self._ensure_loaded()
            previous = self._units.get(name)
            if previous is not None and previous != unit:
                _logger.info("Unit for %s changed from %r to %r", name, previous, unit)
            self._units[name] = unit
            try:
                self._store.write(dict(self._units))
            except CarCacheError as exc:
                _logger.warning("Unit cache not persisted: %s", exc)

    def persist(self) -> None:
        """Write the mapping to disk.

        Raises :class:`CarCacheError` on failure.
        """
        with self._lock:
            self._ensure_loaded()
            self._store.write(dict(self._units))

    def clear(self, delete_disk: bool = False) -> None:
        """Drop every entry; optionally remove the file as well."""
        with self._lock:
            self._units = {}
            self._loaded = True
            if delete_disk:
                self._store.delete()

    def stats(self) -> CacheStats:
        with self._lock:
            self._ensure_loaded()
            return CacheStats(size=len(self._units), entries=dict(self._units))
