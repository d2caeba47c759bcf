"""Advanced diagnostics models (system → subsystem → DTC tree)."""

from __future__ import annotations

from pydantic import AliasChoices, Field, computed_field

from pycarha.models._base import CarBaseModel

#: Status colour reported for a healthy system or subsystem.
HEALTHY_STATUS_COLOR = "GREEN"


class Dtc(CarBaseModel):
    """A diagnostic trouble code reported by a subsystem."""

    code: str = Field(default="", validation_alias=AliasChoices("dtcCode", "code", "dtc"))
    description: str = Field(
        default="",
        validation_alias=AliasChoices("dtcDescription", "description", "desc"),
    )


class AdvancedDiagnosticSubsystem(CarBaseModel):
    """One subsystem of an advanced diagnostics system."""

    name: str = Field(default="", validation_alias=AliasChoices("subSystemName", "subsystemName", "name"))
    label: str = Field(default="", validation_alias=AliasChoices("subSystemLabel", "subsystemLabel", "label"))
    status: str = Field(default="", validation_alias=AliasChoices("subSystemStatus", "subsystemStatus", "status"))
    status_color: str = Field(
        default="",
        validation_alias=AliasChoices("subSystemStatusColor", "subsystemStatusColor", "statusColor"),
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("subSystemDescription", "subsystemDescription", "description"),
    )
    dtcs: tuple[Dtc, ...] = Field(
        default_factory=tuple,
        validation_alias=AliasChoices("dtcs", "subSystemDtcs", "dtcList"),
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dtc_count(self) -> int:
        return len(self.dtcs)

    @property
    def has_issue(self) -> bool:
        """Whether the subsystem reports a fault (DTCs or a non-green status)."""
        if self.dtcs:
            return True
        return bool(self.status_color) and self.status_color.upper() != HEALTHY_STATUS_COLOR

    @property
    def key(self) -> str:
        """Attribute key, e.g. ``"displacement_on_demand_subsystem"``."""
        return _attribute_key(self.label or self.name)


class AdvancedDiagnosticSystem(CarBaseModel):
    """A top-level vehicle system with its subsystems."""

    system_id: str = Field(default="", validation_alias=AliasChoices("systemId", "system_id"))
    name: str = Field(default="", validation_alias=AliasChoices("systemName", "name"))
    label: str = Field(default="", validation_alias=AliasChoices("systemLabel", "label"))
    status: str = Field(default="", validation_alias=AliasChoices("systemStatus", "status"))
    status_color: str = Field(default="", validation_alias=AliasChoices("systemStatusColor", "statusColor"))
    description: str = Field(default="", validation_alias=AliasChoices("systemDescription", "description"))
    subsystems: tuple[AdvancedDiagnosticSubsystem, ...] = Field(
        default_factory=tuple,
        validation_alias=AliasChoices("subsystems", "subSystems"),
    )
    dtcs: tuple[Dtc, ...] = Field(default_factory=tuple, validation_alias=AliasChoices("dtcs", "systemDtcs"))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dtc_count(self) -> int:
        """DTCs reported directly on the system (subsystems count their own)."""
        return len(self.dtcs)

    @property
    def subsystems_with_issues(self) -> list[AdvancedDiagnosticSubsystem]:
        return [sub for sub in self.subsystems if sub.has_issue]

    @property
    def key(self) -> str:
        """State key, e.g. ``"engine_and_transmission_system"``."""
        return _attribute_key(self.label or self.name)


class AdvancedDiagnostics(CarBaseModel):
    """Advanced diagnostics snapshot."""

    cts: str | None = None
    """Collection timestamp as sent by the API."""
    systems: tuple[AdvancedDiagnosticSystem, ...] = Field(
        default_factory=tuple,
        validation_alias=AliasChoices("diagnosticSystems", "systems"),
    )


def _attribute_key(text: str) -> str:
    return "_".join(text.replace("-", " ").replace("_", " ").lower().split())
