"""
Vital Canvas - Medication suggestion models
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MedicationAlternative(BaseModel):
    """One suggested alternative medication."""

    model_config = ConfigDict(populate_by_name=True)

    medication: str
    reason: str
    coverage: str
    effectiveness: str
    side_effects: str = Field(..., alias="sideEffects")


class MedicationSuggestionResult(BaseModel):
    """Structured medication suggestions plus the raw model text."""

    alternatives: list[MedicationAlternative] = Field(default_factory=list)
    analysis: str = ""
    recommendations: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    details: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
