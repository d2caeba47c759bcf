"""Sensor classification and value interpretation."""

from pycarha.classify.classifier import SensorClassification, classify
from pycarha.classify.kinds import EntityKind, ValueKind
from pycarha.classify.values import coerce_value

__all__ = [
    "EntityKind",
    "SensorClassification",
    "ValueKind",
    "classify",
    "coerce_value",
]
