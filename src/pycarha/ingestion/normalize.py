"""Normalization helpers.

Centralizes defensive parsing and placeholder handling for names, units
and scalar values coming from the vehicle cloud.
"""

from __future__ import annotations

import math
import re
from typing import Any

from pycarha._constants import PLACEHOLDER_UNITS

_WHITESPACE_RE = re.compile(r"\s+")
_PLACEHOLDER_VALUES = frozenset({"", "--", "nan"})

# Upstream unit spellings → the spelling published to Home Assistant.
_UNIT_CORRECTIONS: dict[str, str] = {
    "KM/L": "km/L",
    "L/100KM": "L/100km",
    "Cel": "°C",
    "C": "°C",
    "F": "°F",
    "KM": "km",
    "KPA": "kPa",
    "MI": "mi",
    "KWH": "kWh",
    "GAL": "gal",
    "PSI": "psi",
}


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def canonical_name(name: Any) -> str:
    """Uppercase, space-separated form of an upstream identifier.

    ``"lifetime_fuel_economy "`` → ``"LIFETIME FUEL ECONOMY"``.
    """
    if name is None:
        return ""
    text = str(name).replace("_", " ")
    return _WHITESPACE_RE.sub(" ", text).strip().upper()


def is_placeholder_unit(unit: Any) -> bool:
    """Whether *unit* carries no information (missing, ``N/A``, ``XXX``...)."""
    if unit is None:
        return True
    if not isinstance(unit, str):
        return False
    return unit.strip().lower() in PLACEHOLDER_UNITS


def is_placeholder_value(value: Any) -> bool:
    """Whether *value* is missing (``None``, blank, ``"--"`` or NaN)."""
    if value is None:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, str):
        return value.strip().lower() in _PLACEHOLDER_VALUES
    return False


def correct_unit(unit: Any) -> str | None:
    """Return the published spelling of an upstream unit.

    Placeholders become ``None``; unknown units pass through unchanged.
    """
    if is_placeholder_unit(unit):
        return None
    text = str(unit).strip()
    return _UNIT_CORRECTIONS.get(text, text)


def parse_number(value: Any) -> int | float | None:
    """Parse *value* as a JSON-friendly number, or ``None`` when it is not one.

    Integral values come back as ``int`` (``"240"`` → ``240``,
    ``"240.0"`` → ``240``).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    parsed = safe_float(value)
    if parsed is None:
        return None
    if parsed.is_integer():
        return int(parsed)
    return parsed
