"""Diagnostic group and element models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pycarha.models._base import CarBaseModel


class DiagnosticElement(CarBaseModel):
    """A single measured or stated fact inside a diagnostic group."""

    name: str
    """Canonical uppercase name with spaces (e.g. ``"TIRE PRESSURE LF"``)."""
    value: Any = None
    """Raw scalar as received."""
    unit: str | None = None
    """Corrected unit, or ``None`` when never known."""
    message: str | None = None
    """Upstream message (``"na"``, ``"YELLOW"``...)."""
    status: str | None = None
    """Upstream status token."""
    status_color: str | None = None
    """Upstream status colour."""
    timestamp: str | None = None
    """Collection time as sent by the API (ISO-8601 on the new shape)."""

    def __str__(self) -> str:
        return f"{self.name}: {self.value}{self.unit or ''}"


class Diagnostic(CarBaseModel):
    """A named group of diagnostic elements from one upstream record."""

    name: str = ""
    """Canonical group name (e.g. ``"TIRE PRESSURE"``)."""
    elements: tuple[DiagnosticElement, ...] = Field(default_factory=tuple)
    """Usable elements, including unit-converted companions."""

    @property
    def display_name(self) -> str:
        """Human readable group name."""
        return self.name.title()

    def has_elements(self) -> bool:
        """Whether the group carries at least one publishable element."""
        return bool(self.elements)

    def element(self, name: str) -> DiagnosticElement | None:
        """Return the element with canonical *name*, if present."""
        for element in self.elements:
            if element.name == name:
                return element
        return None

    def __str__(self) -> str:
        lines = [f"{self.name}:"]
        lines.extend(f"  {element}" for element in self.elements)
        return "\n".join(lines) + "\n"
