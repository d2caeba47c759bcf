"""Advanced diagnostics parsing."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pycarha.models.advanced import AdvancedDiagnostics

_logger = logging.getLogger(__name__)


def _locate(payload: dict[str, Any]) -> dict[str, Any] | None:
    if "diagnosticSystems" in payload or "systems" in payload:
        return payload
    for path in (("advDiagnostics",), ("data", "advDiagnostics"), ("response", "data", "advDiagnostics")):
        node: Any = payload
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        if isinstance(node, dict):
            return node
    return None


def parse_advanced_diagnostics(payload: Any) -> AdvancedDiagnostics | None:
    """Parse an advanced diagnostics response.

    Accepts the bare ``advDiagnostics`` object or any envelope around it.
    Returns ``None`` when no advanced diagnostics are present.
    """
    if not isinstance(payload, dict):
        return None
    section = _locate(payload)
    if section is None:
        return None
    systems = section.get("diagnosticSystems", section.get("systems"))
    if systems is not None and not isinstance(systems, list):
        _logger.debug("Ignoring advanced diagnostics with non-list systems: %r", type(systems).__name__)
        return None
    cleaned = dict(section)
    if systems is not None:
        cleaned["diagnosticSystems"] = [s for s in systems if isinstance(s, dict)]
        cleaned.pop("systems", None)
    try:
        return AdvancedDiagnostics.model_validate(cleaned)
    except ValidationError as exc:
        _logger.warning("Unable to parse advanced diagnostics: %s", exc)
        return None
