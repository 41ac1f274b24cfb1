"""Medication suggestion API schemas."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from src.models.medication import MedicationAlternative


class MedicationRequest(BaseModel):
    """Request for alternative medications."""
    prompt: Optional[str] = None
    context: Optional[dict[str, Any]] = None


class MedicationSuggestions(BaseModel):
    alternatives: list[MedicationAlternative] = Field(default_factory=list)
    analysis: str = ""
    recommendations: list[str] = Field(default_factory=list)


class MedicationResponse(BaseModel):
    """Structured suggestions, the raw model text and the echoed context."""
    model_config = ConfigDict(populate_by_name=True)
    
    success: bool = True
    response: MedicationSuggestions
    raw_analysis: str = Field(default="", alias="rawAnalysis")
    context: Optional[dict[str, Any]] = None
