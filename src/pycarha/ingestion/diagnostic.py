"""Diagnostic record parsing.

Turns one upstream diagnostic record into a :class:`Diagnostic`.  Two
record shapes are accepted:

* the older ``{"name", "diagnosticElement": [{"name", "value", "unit"}]}``
* the current ``{"name", "diagnosticElements": [{"name", "value", "uom", "cts"}]}``

Missing units are repaired from the :class:`UnitCache`; every element in
a convertible metric unit gets an imperial companion element.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pycarha.cache.units import UnitCache
from pycarha.ingestion.conversions import conversion_for
from pycarha.ingestion.normalize import (
    canonical_name,
    correct_unit,
    is_placeholder_unit,
    is_placeholder_value,
    parse_number,
    safe_str,
)
from pycarha.models.diagnostic import Diagnostic, DiagnosticElement

_logger = logging.getLogger(__name__)

_ELEMENT_LIST_KEYS = ("diagnosticElements", "diagnosticElement")
_UNIT_KEYS = ("uom", "unit")


def _raw_elements(record: dict[str, Any]) -> list[dict[str, Any]]:
    for key in _ELEMENT_LIST_KEYS:
        elements = record.get(key)
        if isinstance(elements, list):
            return [item for item in elements if isinstance(item, dict)]
    return []


def _iter_records(payload: Any) -> Iterator[dict[str, Any]]:
    """Yield diagnostic records from every known response envelope."""
    if not isinstance(payload, dict):
        return
    command_response = payload.get("commandResponse")
    if isinstance(command_response, dict):
        body = command_response.get("body")
        if isinstance(body, dict):
            records = body.get("diagnosticResponse")
            if isinstance(records, list):
                yield from (r for r in records if isinstance(r, dict))
    records = payload.get("diagnostics")
    if isinstance(records, list):
        yield from (r for r in records if isinstance(r, dict))
    response = payload.get("response")
    if isinstance(response, dict):
        yield from _iter_records(response.get("data"))


class DiagnosticParser:
    """Parse raw diagnostic records, repairing units through *unit_cache*."""

    def __init__(self, unit_cache: UnitCache) -> None:
        self._unit_cache = unit_cache

    def parse(self, raw: Any) -> Diagnostic:
        """Parse one diagnostic record.

        Malformed or empty input yields a diagnostic without elements.
        """
        if not isinstance(raw, dict):
            _logger.debug("Ignoring non-dict diagnostic record: %r", type(raw).__name__)
            return Diagnostic()

        group_name = canonical_name(raw.get("name"))
        raw_elements = _raw_elements(raw)
        present_names = {canonical_name(item.get("name")) for item in raw_elements}
        record_cts = safe_str(raw.get("cts"))

        elements: list[DiagnosticElement] = []
        companions: list[DiagnosticElement] = []
        for item in raw_elements:
            element = self._parse_element(item, record_cts)
            if element is None:
                continue
            elements.append(element)
            companion = self._companion(element, present_names)
            if companion is not None:
                companions.append(companion)

        # Companions follow every upstream element.
        return Diagnostic(name=group_name, elements=tuple(elements + companions), raw=raw)

    def parse_response(self, payload: Any) -> list[Diagnostic]:
        """Parse every record of a diagnostics response, skipping empty groups."""
        diagnostics: list[Diagnostic] = []
        for record in _iter_records(payload):
            diagnostic = self.parse(record)
            if diagnostic.has_elements():
                diagnostics.append(diagnostic)
            else:
                _logger.debug("Skipping diagnostic %r without usable elements", record.get("name"))
        return diagnostics

    def _parse_element(self, item: dict[str, Any], record_cts: str | None) -> DiagnosticElement | None:
        name = canonical_name(item.get("name"))
        value = item.get("value")
        if not name or is_placeholder_value(value):
            return None

        unit_key = next((key for key in _UNIT_KEYS if key in item), None)
        raw_unit = item.get(unit_key) if unit_key is not None else None

        if not is_placeholder_unit(raw_unit):
            raw_unit = str(raw_unit).strip()
            self._unit_cache.put(name, raw_unit)
            unit = correct_unit(raw_unit)
        else:
            cached = self._unit_cache.get(name)
            if unit_key is None and cached is None:
                return None
            unit = correct_unit(cached)

        return DiagnosticElement(
            name=name,
            value=value,
            unit=unit,
            message=safe_str(item.get("message")),
            status=safe_str(item.get("status")),
            status_color=safe_str(item.get("statusColor")),
            timestamp=safe_str(item.get("cts")) or record_cts,
            raw=item,
        )

    def _companion(self, element: DiagnosticElement, present_names: set[str]) -> DiagnosticElement | None:
        conversion = conversion_for(element.unit)
        if conversion is None:
            return None
        number = parse_number(element.value)
        if number is None:
            return None
        name = f"{element.name} {conversion.suffix}"
        if name in present_names:
            return None
        self._unit_cache.put(name, conversion.target_unit)
        return DiagnosticElement(
            name=name,
            value=conversion.apply(float(number)),
            unit=correct_unit(conversion.target_unit),
            message=element.message,
            status=element.status,
            status_color=element.status_color,
            timestamp=element.timestamp,
        )
