"""Research update and dashboard API schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from src.models.patient import Patient
from src.models.update import ResearchUpdate, UpdateCriteria


class FindMatchesRequest(BaseModel):
    """Request to find the patients a research update applies to."""
    model_config = ConfigDict(populate_by_name=True)
    
    update_text: Optional[str] = Field(default=None, alias="updateText")
    update_id: Optional[str] = Field(default=None, alias="updateId")


class FindMatchesData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    update_id: Optional[str] = Field(default=None, alias="updateId")
    criteria: UpdateCriteria
    matching_patient_ids: list[str] = Field(default_factory=list, alias="matchingPatientIds")
    matching_patients: list[Patient] = Field(default_factory=list, alias="matchingPatients")
    patient_count: int = Field(default=0, alias="patientCount")


class FindMatchesResponse(BaseModel):
    success: bool = True
    data: FindMatchesData


class DashboardResponse(BaseModel):
    """Hydrated pool for the dashboard. ``error`` drives the banner."""
    model_config = ConfigDict(populate_by_name=True)
    
    patients: list[Patient] = Field(default_factory=list)
    updates: list[ResearchUpdate] = Field(default_factory=list)
    error: Optional[str] = None
    loaded_at: datetime = Field(..., alias="loadedAt")
