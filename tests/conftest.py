from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from pycarha.cache.state import StateMergeCache
from pycarha.cache.units import UnitCache
from pycarha.config import CarConfig
from pycarha.models.vehicle import Vehicle

FIXED_NOW = datetime(2026, 1, 1, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def vehicle() -> Vehicle:
    return Vehicle(vin="XXX", make="foo", model="bar", year=2020)


@pytest.fixture
def config(tmp_path: Path) -> CarConfig:
    return CarConfig(vin="XXX", cache_dir=str(tmp_path))


@pytest.fixture
def unit_cache(tmp_path: Path) -> UnitCache:
    return UnitCache(tmp_path / ".unit_cache_XXX.json")


@pytest.fixture
def state_cache(tmp_path: Path) -> StateMergeCache:
    return StateMergeCache(tmp_path / ".state_cache_XXX.json", enabled=True, clock=fixed_clock)


@pytest.fixture
def clock():
    return fixed_clock
