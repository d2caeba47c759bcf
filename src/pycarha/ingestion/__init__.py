"""Upstream payload ingestion: parsing, normalization and error flattening."""

from pycarha.ingestion.advanced import parse_advanced_diagnostics
from pycarha.ingestion.diagnostic import DiagnosticParser
from pycarha.ingestion.errors import normalize_error, polling_status_payload
from pycarha.ingestion.normalize import canonical_name, correct_unit, is_placeholder_unit

__all__ = [
    "DiagnosticParser",
    "canonical_name",
    "correct_unit",
    "is_placeholder_unit",
    "normalize_error",
    "parse_advanced_diagnostics",
    "polling_status_payload",
]
