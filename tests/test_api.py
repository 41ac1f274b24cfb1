"""Tests for the FastAPI routes."""

import json

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from api.dependencies import (
    get_criteria_analyzer,
    get_dashboard_service,
    get_grouping_factory,
    get_matcher_factory,
    get_medication_factory,
    get_settings,
)
from api.main import app
from src.config import Settings
from src.dashboard.service import DashboardService
from src.errors import LLMProviderError
from src.llm.client import MockLLMClient
from src.matching.grouping import AIGroupingService
from src.matching.llm_matcher import LLMPatientMatcher
from src.matching.medications import MedicationSuggestionService
from src.matching.update_analyzer import UpdateCriteriaAnalyzer
from src.store import InMemoryStore
from tests.conftest import PATIENT_1, PATIENT_2, PATIENT_3


CONTEXT_POOL = [
    {"id": "patient-1", "name": "Patient One", "age": 60, "conditions": ["Type 2 Diabetes"],
     "medications": ["Metformin"], "labValues": [{"name": "HbA1c", "value": 9.2}]},
    {"id": "patient-2", "name": "Patient Two", "age": 45, "conditions": ["Hypertension"]},
]


@pytest.fixture
def llm():
    return MockLLMClient()


@pytest.fixture
def store(patient_rows, update_rows):
    return InMemoryStore(patients=patient_rows, updates=update_rows)


def provides(build):
    """Override for a dependency that hands routes a service builder."""
    return lambda: build


@pytest.fixture
def client(llm, store):
    app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(store)
    app.dependency_overrides[get_matcher_factory] = provides(lambda: LLMPatientMatcher(llm))
    app.dependency_overrides[get_grouping_factory] = provides(lambda: AIGroupingService(llm))
    app.dependency_overrides[get_medication_factory] = provides(lambda: MedicationSuggestionService(llm))
    app.dependency_overrides[get_criteria_analyzer] = lambda: UpdateCriteriaAnalyzer(llm)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings()
        
        response = client.get("/health")
        
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "service": "vital-canvas",
            "llm_configured": False,
            "store_configured": False,
        }


class TestDashboardRoute:
    """Tests for GET /api/dashboard."""

    def test_hydrated_pool(self, client):
        response = client.get("/api/dashboard")
        
        assert response.status_code == 200
        body = response.json()
        assert body["error"] is None
        assert [patient["id"] for patient in body["patients"]] == [PATIENT_1, PATIENT_2, PATIENT_3]
        assert body["patients"][0]["riskScore"] == 100
        assert body["updates"][0]["impactedPatients"] == [PATIENT_1]
        assert "loadedAt" in body

    def test_store_failure_still_200(self, client):
        app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(
            InMemoryStore(error="Supabase environment variables are not configured.")
        )
        
        response = client.get("/api/dashboard")
        
        assert response.status_code == 200
        body = response.json()
        assert body["patients"] == []
        assert body["updates"] == []
        assert body["error"] == "Supabase environment variables are not configured."


class TestMatchRoute:
    """Tests for POST /api/match."""

    def test_missing_prompt(self, client):
        response = client.post("/api/match", json={"context": {}})
        
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Prompt is required"}

    def test_blank_prompt(self, client):
        response = client.post("/api/match", json={"prompt": "   "})
        assert response.status_code == 400

    def test_matches_context_pool(self, client, llm):
        llm.default = '["patient-1", "ghost"]'
        
        response = client.post("/api/match", json={
            "prompt": "HbA1c above 8",
            "context": {"patients": CONTEXT_POOL, "totalPatients": 2, "view": "canvas"},
        })
        
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["matchingPatientIds"] == ["patient-1"]
        assert body["analysis"] == '["patient-1", "ghost"]'
        assert body["context"] == {"highlightedPatients": [], "totalPatients": 2, "view": "canvas"}

    def test_falls_back_to_stored_pool(self, client, llm):
        llm.default = json.dumps([PATIENT_2])
        
        response = client.post("/api/match", json={"prompt": "COPD patients"})
        
        assert response.status_code == 200
        assert response.json()["matchingPatientIds"] == [PATIENT_2]
        assert PATIENT_2 in llm.calls[0]["messages"][1]["content"]

    def test_store_failure(self, client):
        app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(InMemoryStore(error="down"))
        
        response = client.post("/api/match", json={"prompt": "COPD patients"})
        
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to load patients", "details": "down"}

    def test_provider_failure(self, client, llm):
        llm.error = LLMProviderError("LLM provider request failed (APITimeoutError)")
        
        response = client.post("/api/match", json={"prompt": "COPD", "context": {"patients": CONTEXT_POOL}})
        
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Failed to analyze patients"

    def test_unparsable_answer(self, client, llm):
        llm.default = "I cannot determine that."
        
        response = client.post("/api/match", json={"prompt": "COPD", "context": {"patients": CONTEXT_POOL}})
        
        assert response.status_code == 500
        assert response.json()["error"] == "Unable to parse AI response"

    def test_unconfigured_llm(self, store):
        app.dependency_overrides[get_settings] = lambda: Settings()
        app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(store)
        try:
            with patch.dict("os.environ", {}, clear=True), TestClient(app) as test_client:
                response = test_client.post("/api/match", json={"prompt": "COPD"})
        finally:
            app.dependency_overrides.clear()
        
        assert response.status_code == 500
        assert response.json()["error"] == "Service is not configured"


class TestGroupRoute:
    """Tests for POST /api/group."""

    def test_grouping(self, client, llm):
        llm.default = json.dumps({
            "analysis": "By condition.",
            "groupings": [{"name": "Diabetes", "patientIds": ["patient-1", "ghost"], "priority": "high"}],
            "highlightedPatients": ["patient-1"],
            "recommendations": ["Review therapy"],
            "summary": "One group.",
        })
        
        response = client.post("/api/group", json={
            "prompt": "Group by condition",
            "groupingType": "condition-cluster",
            "context": {"patients": CONTEXT_POOL},
        })
        
        assert response.status_code == 200
        body = response.json()
        assert body["groupings"][0]["name"] == "Diabetes"
        assert body["groupings"][0]["patientIds"] == ["patient-1"]
        assert body["highlightedPatients"] == ["patient-1"]
        assert body["metadata"]["groupingType"] == "condition-cluster"
        assert body["metadata"]["patientCount"] == 2
        assert "processedAt" in body["metadata"]
        assert llm.calls[0]["response_format"] == {"type": "json_object"}

    def test_missing_prompt(self, client):
        response = client.post("/api/group", json={"groupingType": "visual-group"})
        
        assert response.status_code == 400
        assert response.json()["error"] == "Prompt is required"

    def test_non_object_answer(self, client, llm):
        llm.default = '["patient-1"]'
        
        response = client.post("/api/group", json={"prompt": "Group", "context": {"patients": CONTEXT_POOL}})
        
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to process AI analysis"


class TestMedicationRoute:
    """Tests for POST /api/medications/suggest."""

    def test_suggestions(self, client, llm):
        llm.default = (
            "Alternatives:\n"
            "Empagliflozin - cardiovascular benefit.\n"
            "\n"
            "Recommendations:\n"
            "- Check renal function"
        )
        
        response = client.post("/api/medications/suggest", json={
            "prompt": "Alternatives to metformin",
            "context": {"patientId": "patient-1"},
        })
        
        assert response.status_code == 200
        body = response.json()
        alternative = body["response"]["alternatives"][0]
        assert alternative["medication"] == "Empagliflozin"
        assert alternative["reason"] == "cardiovascular benefit"
        assert "sideEffects" in alternative
        assert body["response"]["recommendations"] == ["Check renal function"]
        assert body["rawAnalysis"].startswith("Alternatives:")
        assert body["context"] == {"patientId": "patient-1"}

    def test_missing_prompt(self, client):
        response = client.post("/api/medications/suggest", json={})
        assert response.status_code == 400

    def test_provider_failure(self, client, llm):
        llm.error = LLMProviderError("LLM provider request failed (APIConnectionError)")
        
        response = client.post("/api/medications/suggest", json={"prompt": "Alternatives to metformin"})
        
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate medication suggestions"


class TestFindMatchesRoute:
    """Tests for POST /api/updates/find-matches."""

    def test_missing_text(self, client):
        response = client.post("/api/updates/find-matches", json={"updateId": "update-1"})
        
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Update text is required"}

    def test_model_criteria(self, client, llm):
        llm.default = json.dumps({"conditions": ["COPD"], "labValues": {}, "urgency": "high"})
        
        response = client.post("/api/updates/find-matches", json={
            "updateText": "Triple therapy label update for COPD",
            "updateId": "update-2",
        })
        
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["updateId"] == "update-2"
        assert data["criteria"]["conditions"] == ["COPD"]
        assert data["matchingPatientIds"] == [PATIENT_2]
        assert data["matchingPatients"][0]["name"] == "James Chen"
        assert data["patientCount"] == 1

    def test_keyword_fallback_on_provider_error(self, client, llm):
        llm.error = LLMProviderError("LLM provider request failed (APITimeoutError)")
        
        response = client.post("/api/updates/find-matches", json={
            "updateText": "Diabetes patients with HbA1c > 8",
        })
        
        assert response.status_code == 200
        assert response.json()["data"]["matchingPatientIds"] == [PATIENT_1]

    def test_store_failure(self, client):
        app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(InMemoryStore(error="down"))
        
        response = client.post("/api/updates/find-matches", json={"updateText": "COPD"})
        
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to find matching patients"


class TestUnconfiguredService:
    """Request validation runs before the LLM client is built."""

    @pytest.mark.parametrize("path", ["/api/match", "/api/group", "/api/medications/suggest"])
    def test_missing_prompt_without_api_key(self, path):
        app.dependency_overrides[get_settings] = lambda: Settings()
        try:
            with patch.dict("os.environ", {}, clear=True), TestClient(app) as test_client:
                response = test_client.post(path, json={})
        finally:
            app.dependency_overrides.clear()
        
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Prompt is required"}
