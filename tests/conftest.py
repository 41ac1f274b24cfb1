"""
Pytest configuration and shared fixtures for the test suite.
"""

from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.clinical.hydration import hydrate_patients
from src.models.llm import LLMResponse
from src.models.patient import PatientContext


NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)

PATIENT_1 = "11111111-1111-4111-8111-111111111111"
PATIENT_2 = "22222222-2222-4222-8222-222222222222"
PATIENT_3 = "33333333-3333-4333-8333-333333333333"


# ============================================================================
# Mock LLM Client
# ============================================================================

@pytest.fixture
def mock_llm_response():
    """Factory for creating mock LLM responses."""
    def _create(content: str, model: str = "test-model", input_tokens: int = 100, output_tokens: int = 50):
        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
    return _create


@pytest.fixture
def mock_llm_client(mock_llm_response):
    """Create a mock LLM client that returns configurable responses."""
    client = MagicMock()
    client.complete = AsyncMock(return_value=mock_llm_response("[]"))
    return client


# ============================================================================
# Data Store Rows
# ============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def patient_rows():
    """Raw patient rows as the data store returns them."""
    return [
        {
            "id": PATIENT_1,
            "name": "Maria Lopez",
            "age": 58,
            "conditions": ["Type 2 Diabetes", "Hypertension"],
            "meds": ["Metformin 1000mg", "Lisinopril"],
            "labs": [
                {"name": "HbA1c", "value": "9.2%", "status": "normal"},
                {"name": "BP Systolic", "value": 142},
            ],
            "created_at": "2025-03-08T09:00:00Z",
        },
        {
            "id": PATIENT_2,
            "name": "James Chen",
            "age": 67,
            "conditions": ["COPD", "Atrial Fibrillation"],
            "meds": ["Trelegy Ellipta", "Apixaban"],
            "labs": [{"name": "O2 Saturation", "value": "90%"}],
            "created_at": "2025-02-20T12:00:00Z",
        },
        {
            "id": PATIENT_3,
            "name": "Aisha Patel",
            "age": 34,
            "conditions": ["Asthma"],
            "meds": ["Albuterol"],
            "labs": [],
            "created_at": None,
        },
    ]


@pytest.fixture
def update_rows():
    """Raw research update rows, newest first."""
    return [
        {
            "id": "update-1",
            "source": "ADA Guideline",
            "title": "Intensify therapy for uncontrolled diabetes",
            "summary": "Patients with HbA1c above 8 should be considered for GLP-1 therapy.",
            "rule_condition": "Diabetes",
            "rule_criterion": "HbA1c > 8.0",
            "rule_action": "Review therapy",
            "created_at": "2025-03-10T10:00:00Z",
        },
        {
            "id": "update-2",
            "source": "FDA",
            "title": "New inhaler label",
            "summary": "Label update for triple therapy inhalers.",
            "rule_condition": "COPD",
            "rule_criterion": "Patients on Trelegy",
            "rule_action": None,
            "created_at": "2025-03-09T12:00:00Z",
        },
    ]


@pytest.fixture
def patients(patient_rows, now):
    """Hydrated patient pool, highest risk first."""
    return hydrate_patients(patient_rows, now)


@pytest.fixture
def patient_contexts(patients):
    return [PatientContext.from_patient(patient) for patient in patients]


@pytest.fixture
def simple_pool():
    """Two-patient pool with plain ids."""
    return [
        PatientContext(
            id="patient-1",
            name="Patient One",
            age=60,
            conditions=["Type 2 Diabetes"],
            meds=["Metformin"],
            labs=[{"name": "HbA1c", "value": 9.2, "status": "high"}],
            risk_score=95,
            priority="critical",
        ),
        PatientContext(
            id="patient-2",
            name="Patient Two",
            age=45,
            conditions=["Hypertension"],
            meds=["Lisinopril"],
            labs=[{"name": "HbA1c", "value": 6.5, "status": "controlled"}],
            risk_score=45,
            priority="low",
        ),
    ]
