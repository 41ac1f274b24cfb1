"""
Vital Canvas - Research update models
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import UpdateCategory, UpdateUrgency


class ResearchUpdateRecord(BaseModel):
    """A research update row exactly as the data store returns it."""

    id: str
    source: Optional[str] = ""
    title: Optional[str] = ""
    summary: Optional[str] = ""
    rule_condition: Optional[str] = None
    rule_criterion: Optional[str] = None
    rule_action: Optional[str] = None
    created_at: Optional[str] = None


class ResearchUpdate(ResearchUpdateRecord):
    """Hydrated research update with derived display fields."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    category: UpdateCategory
    urgency: UpdateUrgency
    timestamp: str
    read_time: str = Field(..., alias="readTime")
    impacted_patients: list[str] = Field(default_factory=list, alias="impactedPatients")


class AgeRange(BaseModel):
    """Inclusive age bounds extracted from an update."""

    min: Optional[int] = None
    max: Optional[int] = None


class UpdateCriteria(BaseModel):
    """Patient criteria extracted from free update text."""

    model_config = ConfigDict(populate_by_name=True)

    conditions: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    lab_values: dict[str, float] = Field(default_factory=dict, alias="labValues")
    age_range: Optional[AgeRange] = Field(default=None, alias="ageRange")
    urgency: str = "medium"
