"""Home Assistant MQTT discovery payloads."""

from pycarha.discovery.advanced import AdvancedDiagnosticsEntities
from pycarha.discovery.messages import DiscoveryMessage
from pycarha.discovery.synthesizer import DiscoverySynthesizer
from pycarha.discovery.topics import DiscoveryTopics, convert_friendly_name, convert_name
from pycarha.discovery.vehicle_info import MetricEntity, VehicleInfoEntities
from pycarha.discovery.virtual import VirtualEntities

__all__ = [
    "AdvancedDiagnosticsEntities",
    "DiscoveryMessage",
    "DiscoverySynthesizer",
    "DiscoveryTopics",
    "MetricEntity",
    "VehicleInfoEntities",
    "VirtualEntities",
    "convert_friendly_name",
    "convert_name",
]
