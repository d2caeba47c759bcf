"""Declarative sensor mapping table.

Rows are keyed by canonical name.  The exact table is consulted first
(with and without an imperial companion suffix), then the ordered
pattern rules; the first matching pattern wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pycarha.classify.kinds import EntityKind, ValueKind

MEASUREMENT = "measurement"
TOTAL_INCREASING = "total_increasing"


@dataclass(frozen=True)
class Rule:
    icon: str | None = None
    device_class: str | None = None
    state_class: str | None = MEASUREMENT
    entity_kind: EntityKind = EntityKind.SENSOR
    value_kind: ValueKind = ValueKind.NUMERIC
    unit_override: str | None = None


def _binary(icon: str, device_class: str | None = None) -> Rule:
    return Rule(
        icon=icon,
        device_class=device_class,
        state_class=None,
        entity_kind=EntityKind.BINARY_SENSOR,
        value_kind=ValueKind.BOOLEAN,
        unit_override="",
    )


def _text(icon: str) -> Rule:
    return Rule(icon=icon, state_class=None)


_TEMPERATURE = Rule("mdi:thermometer", "temperature")
_ODOMETER = Rule("mdi:counter", "distance", TOTAL_INCREASING)
_TRIP_DISTANCE = Rule("mdi:map-marker-distance", "distance")
_TIRE = Rule("mdi:car-tire-alert", "pressure")
_PLACARD = Rule("mdi:card-text", "pressure")
_FUEL_STORAGE = Rule("mdi:gas-station", "volume_storage")
_FUEL_VOLUME = Rule("mdi:gas-station", "volume")
_FUEL_RANGE = Rule("mdi:gas-station", "distance")
_ECONOMY = Rule("mdi:leaf-circle")
_SCHEDULE = _text("mdi:calendar-clock")
_BATTERY_SAVER = Rule("mdi:battery-arrow-down")
_HOME = _binary("mdi:home-map-marker")
_PRECONDITION = _binary("mdi:air-conditioner")
_EXHAUST_FILTER = _binary("mdi:alert")

EXACT_RULES: dict[str, Rule] = {
    "AMBIENT AIR TEMPERATURE": _TEMPERATURE,
    "ODOMETER": _ODOMETER,
    "ODO READ": _ODOMETER,
    "TRIP A ODO": _TRIP_DISTANCE,
    "TRIP B ODO": _TRIP_DISTANCE,
    "LAST TRIP TOTAL DISTANCE": _TRIP_DISTANCE,
    "TIRE PRESSURE LF": _TIRE,
    "TIRE PRESSURE LR": _TIRE,
    "TIRE PRESSURE RF": _TIRE,
    "TIRE PRESSURE RR": _TIRE,
    "TIRE PRESSURE PLACARD FRONT": _PLACARD,
    "TIRE PRESSURE PLACARD REAR": _PLACARD,
    "OIL LIFE": Rule("mdi:oil"),
    "EOL READ": Rule("mdi:oil-level"),
    "LAST OIL CHANGE DATE": _text("mdi:calendar-check"),
    "FUEL AMOUNT": _FUEL_STORAGE,
    "FUEL CAPACITY": _FUEL_STORAGE,
    "FUEL LEVEL IN GAL": _FUEL_STORAGE,
    "FUEL LEVEL": Rule("mdi:gas-station"),
    "FUEL REMAINING": _FUEL_VOLUME,
    "FUEL USED": _FUEL_VOLUME,
    "LIFETIME FUEL USED": Rule("mdi:gas-station", "volume", TOTAL_INCREASING),
    "GAS RANGE": _FUEL_RANGE,
    "FUEL RANGE": _FUEL_RANGE,
    "LIFETIME FUEL ECON": _ECONOMY,
    "LIFETIME FUEL ECONOMY": _ECONOMY,
    "ELECTRIC ECONOMY": _ECONOMY,
    "LIFETIME EFFICIENCY": _ECONOMY,
    "LIFETIME MPGE": _ECONOMY,
    "LAST TRIP ELECTRIC ECON": _ECONOMY,
    "AVERAGE FUEL ECONOMY": Rule("mdi:gauge"),
    "ENGINE RPM": Rule("mdi:engine"),
    "ENGINE TYPE": _text("mdi:engine"),
    "EXHST FL LEVL WARN IND": Rule("mdi:gauge"),
    "EXHST FL LEVL WARN STATUS": _text("mdi:gauge"),
    "ENGINE AIR FILTER LIFE RMAINING HMI": Rule("mdi:air-filter"),
    "INITIALIZATION STATUS": _text("mdi:checkbox-marked-circle"),
    "BRAKE FLUID LOW": _text("mdi:car-brake-fluid-level"),
    "WASHER FLUID LOW": _text("mdi:wiper-wash"),
    "BATTERY STATE OF CHARGE CRITICALLY LOW": _text("mdi:battery-alert"),
    "BATT SAVER MODE COUNTER": _BATTERY_SAVER,
    "BATT SAVER MODE SEV LVL": _BATTERY_SAVER,
    "CHARGER POWER LEVEL": _text("mdi:flash"),
    "PRIORITY CHARGE REQ GET": _text("mdi:battery-charging"),
    "CHARGE ABORT REASON PID": _text("mdi:alert-circle"),
    "EV RANGE": Rule("mdi:ev-station", "distance"),
    "EV BATTERY LEVEL": Rule("mdi:battery-high", "battery"),
    "LIFETIME ENERGY USED": Rule("mdi:lightning-bolt", "energy", TOTAL_INCREASING),
    "WEEKDAY START TIME": _SCHEDULE,
    "WEEKDAY END TIME": _SCHEDULE,
    "WEEKEND START TIME": _SCHEDULE,
    "WEEKEND END TIME": _SCHEDULE,
    "CHARGE DAY OF WEEK": _SCHEDULE,
    # Binary sensors.  Membership here is the only way to become one.
    "EV PLUG STATE": _binary("mdi:ev-plug-type1", "plug"),
    "EV CHARGE STATE": _binary("mdi:battery-charging", "battery_charging"),
    "PRIORITY CHARGE INDICATOR": _binary("mdi:battery-charging-high"),
    "PRIORITY CHARGE STATUS": _binary("mdi:battery-charging-high"),
    "LOC BASED CHARGING HOME LOC STORED": _HOME,
    "VEH IN HOME LOCATION": _HOME,
    "VEH NOT IN HOME LOC": _binary("mdi:home-export-outline"),
    "VEH LOCATION STATUS INVALID": _binary("mdi:map-marker-question"),
    "SCHEDULED CABIN PRECONDTION CUSTOM SET REQ ACTIVE": _PRECONDITION,
    "CABIN PRECOND REQUEST": _PRECONDITION,
    "CABIN PRECONDITIONING REQUEST": _PRECONDITION,
    "PREF CHARGING TIMES SETTING": _binary("mdi:clock-outline"),
    "LOCATION BASE CHARGE SETTING": _binary("mdi:map-marker-radius"),
    "HIGH VOLTAGE BATTERY PRECONDITIONING STATUS": _binary("mdi:battery-sync"),
    "EXHST PART FLTR WARN ON": _EXHAUST_FILTER,
    "EXHST PART FLTR WARN2 ON": _EXHAUST_FILTER,
}

BINARY_SENSOR_NAMES: frozenset[str] = frozenset(
    name for name, rule in EXACT_RULES.items() if rule.entity_kind is EntityKind.BINARY_SENSOR
)

LOCATION_NAMES: frozenset[str] = frozenset({"GETLOCATION", "LOCATION"})
LOCATION_RULE = Rule("mdi:map-marker", state_class=None, entity_kind=EntityKind.DEVICE_TRACKER, unit_override="")

# Suffixes of imperial companion elements; a companion shares its base row.
COMPANION_SUFFIXES: tuple[str, ...] = (" MPGE", " MPG", " PSI", " GAL", " MI", " F")

PATTERN_RULES: tuple[tuple[re.Pattern[str], Rule], ...] = (
    (re.compile(r"TIRE PRESSURE.*STATUS$"), _text("mdi:car-tire-alert")),
    (re.compile(r"TIRE PRESSURE.*VALID$"), _text("mdi:check-circle")),
    (re.compile(r"TIRE PRESSURE PLACARD"), _PLACARD),
    (re.compile(r"TIRE PRESSURE"), _TIRE),
    (re.compile(r"BATTERY LEVEL|\bSOC\b"), Rule("mdi:battery-high", "battery")),
    (re.compile(r"\bTRIP\b.*\bODO\b"), _TRIP_DISTANCE),
    (re.compile(r"\bODOMETER\b|\bODO\b"), _ODOMETER),
    (re.compile(r"^(GAS|FUEL) RANGE"), _FUEL_RANGE),
    (re.compile(r"\bEV RANGE\b"), Rule("mdi:ev-station", "distance")),
    (re.compile(r"RANGE"), Rule("mdi:map-marker-distance", "distance")),
    (re.compile(r"TEMPERATURE|\bTEMP\b"), _TEMPERATURE),
    (re.compile(r"VOLT"), Rule("mdi:flash-triangle", "voltage")),
    (re.compile(r"AIR FILTER"), _text("mdi:air-filter")),
    (re.compile(r"CHARGE START .*DAY$"), _text("mdi:calendar")),
    (re.compile(r"(START|END) TIME$"), _SCHEDULE),
    (re.compile(r"ECON|EFFICIENCY|\bMPGE?\b"), _ECONOMY),
)

DEFAULT_RULE = Rule()
