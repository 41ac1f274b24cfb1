"""Tests for LLM-backed patient matching."""

import json

import pytest

from src.errors import LLMProviderError
from src.matching.llm_matcher import LLMPatientMatcher, serialize_patients
from src.models.patient import PatientContext
from tests.conftest import PATIENT_1, PATIENT_2


class TestSerializePatients:
    """Tests for serialize_patients."""

    def test_contains_matcher_fields(self, simple_pool):
        data = json.loads(serialize_patients(simple_pool))

        assert data[0]["id"] == "patient-1"
        assert data[0]["medications"] == ["Metformin"]
        assert data[0]["labValues"] == [{"name": "HbA1c", "value": 9.2, "status": "high"}]
        assert data[0]["riskScore"] == 95
        assert data[0]["priority"] == "critical"


class TestLLMPatientMatcher:
    """Tests for LLMPatientMatcher.match."""

    @pytest.mark.asyncio
    async def test_unknown_ids_are_filtered(self, mock_llm_client, mock_llm_response, simple_pool):
        """A ghost id in the model output never reaches the caller."""
        mock_llm_client.complete.return_value = mock_llm_response('["patient-1", "unknown-ghost-id"]')
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Patients with HbA1c > 8", simple_pool[:1])

        assert result.ok
        assert result.matching_patient_ids == ["patient-1"]
        assert result.dropped_ids == ["unknown-ghost-id"]
        assert result.extraction == "json"

    @pytest.mark.asyncio
    async def test_refusal_fails_closed(self, mock_llm_client, mock_llm_response, simple_pool):
        mock_llm_client.complete.return_value = mock_llm_response("I cannot help with that.")
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Patients with HbA1c > 8", simple_pool)

        assert result.matching_patient_ids == []
        assert result.error == "Unable to parse AI response"
        assert result.raw_analysis == "I cannot help with that."

    @pytest.mark.asyncio
    async def test_uuid_fallback_from_prose(self, mock_llm_client, mock_llm_response, patient_contexts):
        mock_llm_client.complete.return_value = mock_llm_response(
            f"Based on the data, {PATIENT_2} and 99999999-9999-4999-8999-999999999999 match."
        )
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("COPD patients", patient_contexts)

        assert result.ok
        assert result.extraction == "pattern"
        assert result.matching_patient_ids == [PATIENT_2]

    @pytest.mark.asyncio
    async def test_object_with_id_list(self, mock_llm_client, mock_llm_response, simple_pool):
        mock_llm_client.complete.return_value = mock_llm_response(
            '{"matchingPatientIds": ["patient-2"], "analysis": "hypertension"}'
        )
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Hypertensive patients", simple_pool)

        assert result.matching_patient_ids == ["patient-2"]

    @pytest.mark.asyncio
    async def test_object_without_id_list(self, mock_llm_client, mock_llm_response, simple_pool):
        mock_llm_client.complete.return_value = mock_llm_response('{"analysis": "none"}')
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Hypertensive patients", simple_pool)

        assert result.matching_patient_ids == []
        assert not result.ok

    @pytest.mark.asyncio
    async def test_provider_error_fails_closed(self, mock_llm_client, simple_pool):
        mock_llm_client.complete.side_effect = LLMProviderError("LLM provider request failed (APITimeoutError)")
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Diabetic patients", simple_pool)

        assert result.matching_patient_ids == []
        assert result.error == "Failed to analyze patients"
        assert "APITimeoutError" in result.details

    @pytest.mark.asyncio
    async def test_empty_prompt_skips_the_model(self, mock_llm_client, simple_pool):
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("   ", simple_pool)

        assert result.error == "Prompt is required"
        mock_llm_client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_request_shape(self, mock_llm_client, simple_pool):
        matcher = LLMPatientMatcher(mock_llm_client, model="gpt-4o-mini")

        await matcher.match("Diabetic patients", simple_pool)

        kwargs = mock_llm_client.complete.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.1
        system, user = kwargs["messages"]
        assert system["role"] == "system"
        assert "JSON array" in system["content"]
        assert "Diabetic patients" in user["content"]
        assert '"id": "patient-1"' in user["content"]

    @pytest.mark.asyncio
    async def test_accepts_hydrated_patients(self, mock_llm_client, mock_llm_response, patients):
        mock_llm_client.complete.return_value = mock_llm_response(f'["{PATIENT_1}"]')
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Uncontrolled diabetes", patients)

        assert result.matching_patient_ids == [PATIENT_1]

    @pytest.mark.asyncio
    async def test_empty_pool_matches_nothing(self, mock_llm_client, mock_llm_response):
        mock_llm_client.complete.return_value = mock_llm_response('["patient-1"]')
        matcher = LLMPatientMatcher(mock_llm_client)

        result = await matcher.match("Anyone", [])

        assert result.matching_patient_ids == []
        assert result.dropped_ids == ["patient-1"]


def test_patient_context_accepts_matcher_shape():
    context = PatientContext.model_validate({
        "id": "patient-1",
        "medications": ["Metformin"],
        "labValues": [{"name": "HbA1c", "value": "9.1", "status": "high"}],
        "riskScore": 88,
    })
    assert context.meds == ["Metformin"]
    assert context.labs[0].name == "HbA1c"
    assert context.risk_score == 88
