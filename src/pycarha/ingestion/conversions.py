"""Metric → imperial companion conversions for diagnostic elements."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from pycarha._constants import (
    KM_PER_L_TO_MPG,
    KM_TO_MI,
    KPA_TO_PSI,
    L_TO_GAL,
    celsius_to_fahrenheit,
    round1,
)


@dataclass(frozen=True)
class UnitConversion:
    """How to derive a companion element from one in *source_unit*."""

    source_unit: str
    target_unit: str
    suffix: str
    convert: Callable[[float], float]

    def apply(self, value: float) -> float:
        return round1(self.convert(value))


_CONVERSIONS: tuple[UnitConversion, ...] = (
    UnitConversion("km", "mi", "MI", lambda v: v * KM_TO_MI),
    UnitConversion("kPa", "psi", "PSI", lambda v: v * KPA_TO_PSI),
    UnitConversion("°C", "°F", "F", celsius_to_fahrenheit),
    UnitConversion("L", "gal", "GAL", lambda v: v * L_TO_GAL),
    UnitConversion("km/L", "mpg", "MPG", lambda v: v * KM_PER_L_TO_MPG),
    UnitConversion("km/L(e)", "MPGe", "MPGE", lambda v: v * KM_PER_L_TO_MPG),
)

_BY_UNIT: dict[str, UnitConversion] = {c.source_unit.lower(): c for c in _CONVERSIONS}


def conversion_for(unit: str | None) -> UnitConversion | None:
    """Return the conversion for a corrected *unit*, if it has one."""
    if not unit:
        return None
    return _BY_UNIT.get(unit.lower())
