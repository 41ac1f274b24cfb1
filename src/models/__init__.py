"""Data models for Vital Canvas."""

from src.models.enums import (
    GroupingType,
    LabStatus,
    PriorityLevel,
    RequestStatus,
    UpdateCategory,
    UpdateUrgency,
)
from src.models.patient import LabResult, Patient, PatientContext, PatientRecord, Position
from src.models.update import ResearchUpdate, ResearchUpdateRecord, UpdateCriteria

__all__ = [
    "GroupingType",
    "LabStatus",
    "PriorityLevel",
    "RequestStatus",
    "UpdateCategory",
    "UpdateUrgency",
    "LabResult",
    "Patient",
    "PatientContext",
    "PatientRecord",
    "Position",
    "ResearchUpdate",
    "ResearchUpdateRecord",
    "UpdateCriteria",
]
