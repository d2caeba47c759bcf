"""Name-based semantic classification of diagnostic elements."""

from __future__ import annotations

import dataclasses
import logging

from pycarha.classify.kinds import EntityKind, ValueKind
from pycarha.classify.rules import (
    COMPANION_SUFFIXES,
    DEFAULT_RULE,
    EXACT_RULES,
    LOCATION_NAMES,
    LOCATION_RULE,
    PATTERN_RULES,
    Rule,
)
from pycarha.ingestion.normalize import canonical_name

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SensorClassification:
    """How an element is published.

    ``unit_override`` is ``None`` when the element's own unit applies and
    ``""`` when no unit may be published at all.
    """

    entity_kind: EntityKind = EntityKind.SENSOR
    device_class: str | None = None
    icon: str | None = None
    state_class: str | None = "measurement"
    unit_override: str | None = None
    value_kind: ValueKind = ValueKind.NUMERIC

    @property
    def has_unit(self) -> bool:
        return self.entity_kind is EntityKind.SENSOR and self.unit_override != ""


def _from_rule(rule: Rule) -> SensorClassification:
    return SensorClassification(
        entity_kind=rule.entity_kind,
        device_class=rule.device_class,
        icon=rule.icon,
        state_class=rule.state_class,
        unit_override=rule.unit_override,
        value_kind=rule.value_kind,
    )


def _strip_companion_suffix(name: str) -> str | None:
    for suffix in COMPANION_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return None


def _match(name: str) -> Rule:
    rule = EXACT_RULES.get(name)
    if rule is not None:
        return rule
    if name in LOCATION_NAMES:
        return LOCATION_RULE
    base = _strip_companion_suffix(name)
    if base is not None and base in EXACT_RULES:
        return EXACT_RULES[base]
    for pattern, pattern_rule in PATTERN_RULES:
        if pattern.search(name):
            return pattern_rule
    return DEFAULT_RULE


def classify(name: str | None) -> SensorClassification:
    """Classify an element by its name.

    Binary sensors come from the exact table only; the location names map
    to device trackers; anything unknown is a plain measurement sensor.
    Never raises.
    """
    canonical = canonical_name(name)
    if not canonical:
        return _from_rule(DEFAULT_RULE)
    rule = _match(canonical)
    if rule is DEFAULT_RULE:
        _logger.debug("No mapping for %r, using default sensor classification", canonical)
    return _from_rule(rule)
