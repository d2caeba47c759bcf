"""Entity and value kinds."""

from __future__ import annotations

import enum


class EntityKind(enum.StrEnum):
    """Home Assistant component an element is published as."""

    SENSOR = "sensor"
    BINARY_SENSOR = "binary_sensor"
    DEVICE_TRACKER = "device_tracker"


class ValueKind(enum.StrEnum):
    """How a raw value is interpreted before publishing."""

    NUMERIC = "numeric"
    BOOLEAN = "boolean"
