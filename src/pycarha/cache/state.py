"""Persistent per-topic state merge cache.

Upstream responses are sometimes partial: a poll may omit fields that an
earlier poll carried.  When enabled, each state document is merged over
the last full document published to the same topic before it goes out,
so absent fields keep their last known value.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pycarha._constants import STATE_CACHE_FILENAME, STATE_CACHE_UPDATED_KEY
from pycarha.cache._json_file import JsonFileStore
from pycarha.cache.units import CacheStats
from pycarha.config import CarConfig
from pycarha.exceptions import CarCacheError

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StateMergeCache:
    """Topic → last full state document.

    Keys present in a partial update always win, including falsy values
    (``False``, ``0``, ``""``, ``None``).  Only keys absent from the update
    are filled from the cache.
    """

    def __init__(
        self,
        path: Path,
        *,
        enabled: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = JsonFileStore(path)
        self._enabled = enabled
        self._clock = clock
        self._states: dict[str, dict[str, Any]] = {}
        self._loaded = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: CarConfig, *, clock: Callable[[], datetime] = _utcnow) -> StateMergeCache:
        path = config.resolve_cache_dir() / STATE_CACHE_FILENAME.format(vin=config.vin)
        return cls(path, enabled=config.state_cache_enabled, clock=clock)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def path(self) -> Path:
        return self._store.path

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        data = self._store.read()
        self._states = {str(topic): state for topic, state in data.items() if isinstance(state, dict)}
        self._loaded = True

    def load(self) -> None:
        with self._lock:
            self._loaded = False
            self._ensure_loaded()

    def merge(self, topic: str, partial: dict[str, Any]) -> dict[str, Any]:
        """Merge *partial* over the cached state for *topic*.

        Returns *partial* untouched when the cache is disabled.
        """
        if not self._enabled:
            return partial

        with self._lock:
            self._ensure_loaded()
            merged = copy.deepcopy(self._states.get(topic, {}))
            merged.update(copy.deepcopy(partial))
            merged[STATE_CACHE_UPDATED_KEY] = self._clock().isoformat()
            self._states[topic] = merged
            try:
                self._store.write(copy.deepcopy(self._states))
            except CarCacheError as exc:
                _logger.warning("State cache not persisted: %s", exc)
            return copy.deepcopy(merged)

    def get(self, topic: str) -> dict[str, Any] | None:
        with self._lock:
            self._ensure_loaded()
            state = self._states.get(topic)
            return copy.deepcopy(state) if state is not None else None

    def persist(self) -> None:
        """Write every cached document to disk.

        Raises :class:`CarCacheError` on failure.
        """
        with self._lock:
            self._ensure_loaded()
            self._store.write(copy.deepcopy(self._states))

    def clear(self, delete_disk: bool = False) -> None:
        with self._lock:
            self._states = {}
            self._loaded = True
            if delete_disk:
                self._store.delete()

    def stats(self) -> CacheStats:
        with self._lock:
            self._ensure_loaded()
            return CacheStats(size=len(self._states), entries=copy.deepcopy(self._states))
