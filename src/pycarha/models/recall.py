"""Vehicle recall models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field

from pycarha.models._base import CarBaseModel, CarEnum


class RecallStatus(CarEnum):
    """Recall campaign status."""

    UNKNOWN = "?"
    ACTIVE = "A"
    INACTIVE = "I"
    EXPIRED = "E"


class Recall(CarBaseModel):
    """A single recall campaign for a vehicle."""

    recall_id: str = ""
    title: str = ""
    type_description: str = ""
    description: str = ""
    recall_status: RecallStatus = RecallStatus.UNKNOWN
    repair_status: str = ""
    repair_description: str = ""
    safety_risk_description: str = Field(
        default="",
        validation_alias=AliasChoices("safetyRiskDescription", "safetyRisk", "safety_risk_description"),
    )
    completed_date: str | None = None

    @property
    def is_active(self) -> bool:
        return self.recall_status is RecallStatus.ACTIVE

    @property
    def is_repair_incomplete(self) -> bool:
        return self.repair_status.strip().lower() == "incomplete"

    @property
    def is_unrepaired_active(self) -> bool:
        """Open recall: active or expired campaign whose repair is not done."""
        return self.recall_status in (RecallStatus.ACTIVE, RecallStatus.EXPIRED) and self.is_repair_incomplete

    def to_attributes(self) -> dict[str, Any]:
        return {
            "recall_id": self.recall_id,
            "title": self.title,
            "type": self.type_description,
            "description": self.description,
            "recall_status": self.recall_status.value,
            "repair_status": self.repair_status,
            "repair_description": self.repair_description,
            "safety_risk": self.safety_risk_description,
            "completed_date": self.completed_date,
        }
