"""pycarha - Vehicle-cloud diagnostics to Home Assistant MQTT discovery."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycarha")
except PackageNotFoundError:
    __version__ = "0+local"
from pycarha.bridge import DiagnosticsBridge
from pycarha.cache import CacheStats, StateMergeCache, UnitCache
from pycarha.classify import EntityKind, SensorClassification, ValueKind, classify, coerce_value
from pycarha.config import CarConfig
from pycarha.discovery import DiscoveryMessage, DiscoverySynthesizer, DiscoveryTopics
from pycarha.exceptions import (
    CarCacheError,
    CarConfigError,
    CarError,
    CarPublishError,
    CarTransportError,
)
from pycarha.ingestion import DiagnosticParser, normalize_error, parse_advanced_diagnostics
from pycarha.models import (
    AdvancedDiagnostics,
    Diagnostic,
    DiagnosticElement,
    Recall,
    Vehicle,
)
from pycarha.publisher import MqttPublisher

__all__ = [
    "__version__",
    "AdvancedDiagnostics",
    "CacheStats",
    "CarCacheError",
    "CarConfig",
    "CarConfigError",
    "CarError",
    "CarPublishError",
    "CarTransportError",
    "Diagnostic",
    "DiagnosticElement",
    "DiagnosticParser",
    "DiagnosticsBridge",
    "DiscoveryMessage",
    "DiscoverySynthesizer",
    "DiscoveryTopics",
    "EntityKind",
    "MqttPublisher",
    "Recall",
    "SensorClassification",
    "StateMergeCache",
    "UnitCache",
    "ValueKind",
    "Vehicle",
    "classify",
    "coerce_value",
    "normalize_error",
    "parse_advanced_diagnostics",
]
