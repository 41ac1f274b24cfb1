"""
Vital Canvas - Patient models

Raw rows as read from the data store, the hydrated view model used by the
dashboard, and the compact context sent to the LLM services.
"""

from typing import Any, Iterable, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.models.enums import PriorityLevel


LabValue = Union[int, float, str]


class Position(BaseModel):
    """Canvas coordinate of a card."""

    x: float = 0.0
    y: float = 0.0


class LabResult(BaseModel):
    """A single lab reading. ``status`` is always derived, never trusted from storage."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: LabValue
    status: str = "unknown"


class PatientRecord(BaseModel):
    """A patient row exactly as the data store returns it."""

    id: str
    name: Optional[str] = ""
    age: Optional[int] = None
    conditions: Optional[list[Any]] = None
    meds: Optional[list[Any]] = None
    labs: Any = None
    created_at: Optional[str] = None


class Patient(BaseModel):
    """Hydrated patient view model."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str
    name: str
    age: int = Field(default=0, ge=0)
    conditions: list[str] = Field(default_factory=list)
    meds: list[str] = Field(default_factory=list)
    labs: list[LabResult] = Field(default_factory=list)
    risk_score: int = Field(..., ge=20, le=100, alias="riskScore")
    priority: PriorityLevel
    last_visit: str = Field(default="", alias="lastVisit")
    position: Optional[Position] = None


class PatientContext(BaseModel):
    """
    Patient data as supplied by the UI to the AI endpoints.

    Accepts both the card shape (``meds``/``labs``) and the matcher shape
    (``medications``/``labValues``).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = ""
    age: Optional[int] = None
    conditions: list[str] = Field(default_factory=list)
    meds: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("meds", "medications"),
    )
    labs: list[LabResult] = Field(
        default_factory=list,
        validation_alias=AliasChoices("labs", "labValues"),
    )
    risk_score: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("riskScore", "risk_score"),
        serialization_alias="riskScore",
    )
    priority: Optional[str] = None

    @classmethod
    def from_patient(cls, patient: Patient) -> "PatientContext":
        return cls(
            id=patient.id,
            name=patient.name,
            age=patient.age,
            conditions=list(patient.conditions),
            meds=list(patient.meds),
            labs=list(patient.labs),
            risk_score=patient.risk_score,
            priority=patient.priority,
        )


def as_patient_contexts(patients: Iterable[Union[Patient, PatientContext]]) -> list[PatientContext]:
    """Normalize hydrated patients and UI-supplied contexts to ``PatientContext``."""
    return [
        patient if isinstance(patient, PatientContext) else PatientContext.from_patient(patient)
        for patient in patients
    ]
