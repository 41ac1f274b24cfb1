"""Matching and grouping API schemas."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import GroupingType
from src.models.grouping import Grouping
from src.models.patient import PatientContext


class RequestContext(BaseModel):
    """
    Context sent by the dashboard with an AI request.
    
    ``patients`` is the pool to match against; when omitted the server loads
    the pool from the data store. Unknown keys are kept and echoed back.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    
    patients: Optional[list[PatientContext]] = None
    highlighted_patients: list[str] = Field(default_factory=list, alias="highlightedPatients")
    total_patients: Optional[int] = Field(default=None, alias="totalPatients")
    
    def echo(self) -> dict[str, Any]:
        """The context as the client sent it, minus the patient pool."""
        return self.model_dump(by_alias=True, exclude={"patients"}, exclude_none=True)


class MatchRequest(BaseModel):
    """Request to match patients against a free-text prompt."""
    prompt: Optional[str] = None
    context: RequestContext = Field(default_factory=RequestContext)


class MatchResponse(BaseModel):
    """Matched patient ids plus the model's raw answer."""
    model_config = ConfigDict(populate_by_name=True)
    
    success: bool = True
    matching_patient_ids: list[str] = Field(default_factory=list, alias="matchingPatientIds")
    analysis: str = ""
    context: dict[str, Any] = Field(default_factory=dict)


class GroupRequest(BaseModel):
    """Request to group patients on the canvas."""
    model_config = ConfigDict(populate_by_name=True)
    
    prompt: Optional[str] = None
    grouping_type: GroupingType = Field(default=GroupingType.VISUAL_GROUP, alias="groupingType")
    context: RequestContext = Field(default_factory=RequestContext)


class GroupingMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    processed_at: str = Field(..., alias="processedAt")
    grouping_type: str = Field(..., alias="groupingType")
    patient_count: int = Field(..., alias="patientCount")


class GroupResponse(BaseModel):
    """Grouping result with request metadata."""
    model_config = ConfigDict(populate_by_name=True)
    
    success: bool = True
    analysis: str = ""
    groupings: list[Grouping] = Field(default_factory=list)
    highlighted_patients: list[str] = Field(default_factory=list, alias="highlightedPatients")
    recommendations: list[str] = Field(default_factory=list)
    summary: str = ""
    metadata: GroupingMetadata


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx returned by the AI endpoints."""
    success: bool = False
    error: str
    details: Optional[str] = None
