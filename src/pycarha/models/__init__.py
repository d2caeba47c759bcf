"""Data models for vehicle-cloud payloads."""

from pycarha.models._base import CarBaseModel, CarEnum
from pycarha.models.advanced import (
    AdvancedDiagnostics,
    AdvancedDiagnosticSubsystem,
    AdvancedDiagnosticSystem,
    Dtc,
)
from pycarha.models.diagnostic import Diagnostic, DiagnosticElement
from pycarha.models.recall import Recall, RecallStatus
from pycarha.models.vehicle import Vehicle

__all__ = [
    "AdvancedDiagnosticSubsystem",
    "AdvancedDiagnosticSystem",
    "AdvancedDiagnostics",
    "CarBaseModel",
    "CarEnum",
    "Diagnostic",
    "DiagnosticElement",
    "Dtc",
    "Recall",
    "RecallStatus",
    "Vehicle",
]
