"""
Vital Canvas - Matching and grouping results

Results of the LLM-backed services. Every id list in these models has
already been whitelisted against the patient pool the request was made for.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.patient import Position


class Grouping(BaseModel):
    """A named cluster of patients proposed by the model."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = "Unnamed group"
    description: str = ""
    patient_ids: list[str] = Field(default_factory=list, alias="patientIds")
    criteria: str = ""
    priority: str = "medium"
    visual_hint: str = Field(default="", alias="visualHint")


class MatchResult(BaseModel):
    """Outcome of an LLM patient-matching request."""

    model_config = ConfigDict(populate_by_name=True)

    matching_patient_ids: list[str] = Field(default_factory=list, alias="matchingPatientIds")
    raw_analysis: str = Field(default="", alias="rawAnalysis")
    extraction: Literal["json", "pattern", "none"] = "none"
    dropped_ids: list[str] = Field(default_factory=list, alias="droppedIds")
    error: Optional[str] = None
    details: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GroupingResult(BaseModel):
    """Outcome of an AI grouping request."""

    model_config = ConfigDict(populate_by_name=True)

    analysis: str = ""
    groupings: list[Grouping] = Field(default_factory=list)
    highlighted_patients: list[str] = Field(default_factory=list, alias="highlightedPatients")
    recommendations: list[str] = Field(default_factory=list)
    summary: str = ""
    error: Optional[str] = None
    details: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PatientGroup(BaseModel):
    """A grouping placed on the canvas for the current session."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    patient_ids: list[str] = Field(default_factory=list, alias="patientIds")
    criteria: str = ""
    priority: str = "medium"
    position: Position = Field(default_factory=Position)
