"""Helpers for safe debug logging.

Vehicle-cloud payloads carry credentials, tokens and the VIN.  This
module provides a small utility to redact sensitive fields before
emitting DEBUG logs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "mqtt_password",
        "access_token",
        "accesstoken",
        "refresh_token",
        "refreshtoken",
        "id_token",
        "idtoken",
        "token",
        "authorization",
        "cookie",
        "pin",
        "totpkey",
        "totp_key",
    }
)

# Keys whose value identifies the vehicle; kept partially for correlation.
_VIN_KEYS: frozenset[str] = frozenset({"vin", "vehicleid", "vehicle_id"})

# A VIN is 17 characters without I, O or Q.
_VIN_RE = re.compile(r"\b[A-HJ-NPR-Z0-9]{17}\b")


def mask_vin(vin: str) -> str:
    """``"1G1FY6S07N4100000"`` → ``"***********100000"``."""
    if len(vin) <= 6:
        return "*" * len(vin)
    return "*" * (len(vin) - 6) + vin[-6:]


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        value = _VIN_RE.sub(lambda m: mask_vin(m.group(0)), value)
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            lowered = key.lower()
            if lowered in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            elif lowered in _VIN_KEYS and isinstance(v, str):
                redacted[key] = mask_vin(v)
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
