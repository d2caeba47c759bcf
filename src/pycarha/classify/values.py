"""Value coercion for published state documents.

Boolean sensors report their state in per-sensor vocabularies that have
changed between API versions (``"plugged"``/``"Connect"``, ``"TRUE"``,
``"ACTIVE"``...).  Each vocabulary maps case-insensitively onto
``True``/``False``; a token outside it is published unchanged.
"""

from __future__ import annotations

from typing import Any

from pycarha.ingestion.normalize import canonical_name, parse_number

_UNAVAILABLE = "unavailable"


def _vocabulary(true_tokens: tuple[str, ...], false_tokens: tuple[str, ...]) -> dict[str, bool]:
    mapping = {token.lower(): True for token in true_tokens}
    mapping.update({token.lower(): False for token in false_tokens})
    return mapping


_PLUG = _vocabulary(("plugged", "Connect", "connected"), ("unplugged", "Disconnect", "disconnected"))
_CHARGE = _vocabulary(("charging", "Active"), ("not_charging", "UNCONNECTED", "charging_complete"))
_TRUE_FALSE = _vocabulary(("TRUE",), ("FALSE",))
_ACTIVE = _vocabulary(("ACTIVE",), ("NOT_ACTIVE",))
_ON_OFF = _vocabulary(("ON",), ("OFF",))
_ACTION = _vocabulary(("ACTION",), ("NO_ACTION",))
_ENABLED = _vocabulary(("ENABLED",), ("DISABLED",))

BOOLEAN_VOCABULARIES: dict[str, dict[str, bool]] = {
    "EV PLUG STATE": _PLUG,
    "EV CHARGE STATE": _CHARGE,
    "PRIORITY CHARGE INDICATOR": _TRUE_FALSE,
    "LOC BASED CHARGING HOME LOC STORED": _TRUE_FALSE,
    "SCHEDULED CABIN PRECONDTION CUSTOM SET REQ ACTIVE": _TRUE_FALSE,
    "VEH IN HOME LOCATION": _TRUE_FALSE,
    "VEH NOT IN HOME LOC": _TRUE_FALSE,
    "VEH LOCATION STATUS INVALID": _TRUE_FALSE,
    "EXHST PART FLTR WARN ON": _TRUE_FALSE,
    "EXHST PART FLTR WARN2 ON": _TRUE_FALSE,
    "PRIORITY CHARGE STATUS": _ACTIVE,
    "CABIN PRECOND REQUEST": _ON_OFF,
    "PREF CHARGING TIMES SETTING": _ON_OFF,
    "LOCATION BASE CHARGE SETTING": _ON_OFF,
    "CABIN PRECONDITIONING REQUEST": _ACTION,
    "HIGH VOLTAGE BATTERY PRECONDITIONING STATUS": _ENABLED,
}


def coerce_value(name: str, value: Any) -> Any:
    """Return *value* as it should appear in the published state document.

    ``"unavailable"`` (any case) becomes ``None`` for every sensor.
    Boolean sensors map their vocabulary; everything else is parsed as a
    number when possible and passed through unchanged otherwise.
    """
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() == _UNAVAILABLE:
        return None

    vocabulary = BOOLEAN_VOCABULARIES.get(canonical_name(name))
    if vocabulary is not None:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            mapped = vocabulary.get(value.strip().lower())
            if mapped is not None:
                return mapped
        return value

    if isinstance(value, bool):
        return value
    number = parse_number(value)
    return value if number is None else number
