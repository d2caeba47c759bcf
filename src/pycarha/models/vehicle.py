"""Vehicle model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pycarha.models._base import CarBaseModel


def _extract_names(value: Any, wrapper_key: str) -> tuple[str, ...] | None:
    """Flatten the list shapes the account API uses for capability lists.

    Accepts ``["A", "B"]``, ``[{"name": "a"}, ...]`` and the older
    wrapped form ``{"<wrapper_key>": [...]}``.  ``None`` means the API did
    not say, which is different from an empty tuple.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get(wrapper_key)
        if value is None:
            return None
    if not isinstance(value, (list, tuple)):
        return None
    names: list[str] = []
    for item in value:
        if isinstance(item, dict):
            name = item.get("name")
            if isinstance(name, str) and name:
                names.append(name)
        elif isinstance(item, str) and item:
            names.append(item)
    return tuple(names)


class Vehicle(CarBaseModel):
    """A vehicle associated with the user's account.

    Fields are mapped from the account-vehicles response; both the older
    wrapped capability lists and the newer flat lists are accepted.
    """

    vin: str = ""
    """Vehicle Identification Number."""
    make: str = ""
    """Manufacturer (e.g. ``"Chevrolet"``)."""
    model: str = ""
    """Model name (e.g. ``"Bolt EV"``)."""
    year: str = ""
    """Model year as a string."""
    image_url: str = Field(default="", validation_alias=AliasChoices("imageUrl", "image_url"))
    """Vehicle render URL, empty when the API has none."""
    supported_diagnostics: tuple[str, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices("supportedDiagnostics", "supported_diagnostics"),
    )
    """Diagnostics the vehicle reports; ``None`` means "not advertised"."""
    supported_commands: tuple[str, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices("commands", "supportedCommands", "supported_commands"),
    )
    """Remote commands the vehicle supports; ``None`` means "not advertised"."""

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("supported_diagnostics", mode="before")
    @classmethod
    def _coerce_diagnostics(cls, value: Any) -> tuple[str, ...] | None:
        return _extract_names(value, "supportedDiagnostic")

    @field_validator("supported_commands", mode="before")
    @classmethod
    def _coerce_commands(cls, value: Any) -> tuple[str, ...] | None:
        return _extract_names(value, "command")

    def __str__(self) -> str:
        return f"{self.year} {self.make} {self.model}"

    def is_supported(self, diagnostic: str) -> bool:
        """Whether *diagnostic* is supported (always true when not advertised)."""
        if self.supported_diagnostics is None:
            return True
        return diagnostic in self.supported_diagnostics

    def get_supported(self, requested: list[str] | None = None) -> list[str]:
        """Return the requested diagnostics the vehicle supports.

        With no request, returns every advertised diagnostic.
        """
        requested = requested or []
        if self.supported_diagnostics is None:
            return list(requested)
        if not requested:
            return list(self.supported_diagnostics)
        return [name for name in requested if name in self.supported_diagnostics]

    def get_supported_commands(self, command_list: list[str] | None = None) -> list[str]:
        """Return the supported commands, appending them to *command_list*.

        When the API does not advertise commands, *command_list* is
        returned as given.
        """
        result = command_list if command_list is not None else []
        if self.supported_commands is None:
            return result
        result.extend(self.supported_commands)
        return result
