"""Topic layout and entity naming for Home Assistant MQTT discovery."""

from __future__ import annotations

import re

from pycarha.classify.kinds import EntityKind

_NON_WORD_RE = re.compile(r"[^a-z0-9]+")

# Tire position codes → friendly names.
TIRE_FRIENDLY_NAMES: dict[str, str] = {
    "TIRE PRESSURE LF": "Tire Pressure: Left Front",
    "TIRE PRESSURE LR": "Tire Pressure: Left Rear",
    "TIRE PRESSURE RF": "Tire Pressure: Right Front",
    "TIRE PRESSURE RR": "Tire Pressure: Right Rear",
}


def convert_name(name: str | None) -> str:
    """Lower snake case form used in topics and template keys.

    ``"TIRE PRESSURE LF"`` → ``"tire_pressure_lf"``.
    """
    if not name:
        return ""
    return _NON_WORD_RE.sub("_", name.lower()).strip("_")


def convert_friendly_name(name: str | None) -> str:
    """Title case display name, with tire codes spelled out."""
    if not name:
        return ""
    upper = " ".join(name.replace("_", " ").split()).upper()
    friendly = TIRE_FRIENDLY_NAMES.get(upper)
    if friendly is not None:
        return friendly
    for code, tire_name in TIRE_FRIENDLY_NAMES.items():
        if upper.startswith(code + " "):
            return tire_name + upper[len(code) :].title()
    return " ".join(name.replace("_", " ").split()).title()


class DiscoveryTopics:
    """Topic factory for one vehicle.

    Parameters
    ----------
    prefix : str
        Discovery prefix (``"homeassistant"``).
    instance : str
        Vehicle identifier, normally the VIN.
    """

    def __init__(self, prefix: str, instance: str) -> None:
        self.prefix = prefix
        self.instance = instance

    @property
    def base(self) -> str:
        return f"{self.prefix}/{self.instance}"

    @property
    def availability(self) -> str:
        return f"{self.base}/available"

    @property
    def command(self) -> str:
        return f"{self.base}/command"

    @property
    def polling_status(self) -> str:
        return f"{self.base}/polling_status"

    @property
    def refresh_interval(self) -> str:
        return f"{self.base}/refresh_interval"

    @property
    def refresh_interval_current_val(self) -> str:
        return f"{self.base}/refresh_interval_current_val"

    @property
    def device_tracker_config(self) -> str:
        return f"{self.prefix}/device_tracker/{self.instance}/config"

    @property
    def advanced_diagnostics_state(self) -> str:
        return f"{self.base}/adv_diag/state"

    def command_state(self, command: str) -> str:
        return f"{self.command}/{command}/state"

    def entity_base(self, name: str | None, kind: EntityKind | str) -> str:
        return f"{self.prefix}/{kind}/{self.instance}/{convert_name(name)}"

    def config_topic(self, name: str | None, kind: EntityKind | str) -> str:
        return f"{self.entity_base(name, kind)}/config"

    def state_topic(self, name: str | None, kind: EntityKind | str) -> str:
        return f"{self.entity_base(name, kind)}/state"
