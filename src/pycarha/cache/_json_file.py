"""Whole-file JSON persistence shared by the disk-backed caches."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pycarha.exceptions import CarCacheError

_logger = logging.getLogger(__name__)


class JsonFileStore:
    """Read and write a single JSON object file.

    Reads never raise: a missing file is an empty mapping and a corrupt
    one is logged and treated as empty, to be rewritten on the next write.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            _logger.warning("Unable to read cache file %s: %s", self._path, exc)
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            _logger.warning("Ignoring corrupt cache file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Ignoring cache file %s: expected a JSON object, got %s", self._path, type(data).__name__)
            return {}
        return data

    def write(self, data: dict[str, Any]) -> None:
        """Serialize *data* to disk, creating the directory on demand.

        Raises :class:`CarCacheError` when the file cannot be written.
        """
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as exc:
            raise CarCacheError(f"Unable to write cache file: {exc}", path=str(self._path)) from exc

    def delete(self) -> None:
        """Remove the file; a file that is already gone is not an error."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CarCacheError(f"Unable to delete cache file: {exc}", path=str(self._path)) from exc
