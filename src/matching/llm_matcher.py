"""
LLM-backed patient matching.

Sends the patient pool and a free-text request to the model under a strict
"explicit criteria only" instruction, parses the array contract, and
whitelists the returned ids against the pool. Every failure fails closed:
an empty id list plus a non-fatal error on the result.
"""

import json
import logging
from typing import Sequence, Union

from src.errors import LLMProviderError
from src.matching.validation import filter_known_ids, known_ids
from src.models.grouping import MatchResult
from src.models.llm import IdList, Structured, Unparsable
from src.models.patient import Patient, PatientContext, as_patient_contexts
from src.utils.parsing import extract_id_candidates, ids_from_payload, parse_llm_output
from src.utils.prompt_loader import render_prompt
from src.utils.protocols import LLMClientProtocol


logger = logging.getLogger(__name__)


def serialize_patients(patients: Sequence[PatientContext]) -> str:
    """Patient context as the indented JSON the matching prompt embeds."""
    payload = [
        {
            "id": patient.id,
            "name": patient.name,
            "age": patient.age,
            "conditions": patient.conditions,
            "medications": patient.meds,
            "labValues": [
                {"name": lab.name, "value": lab.value, "status": lab.status}
                for lab in patient.labs
            ],
            "riskScore": patient.risk_score,
            "priority": patient.priority,
        }
        for patient in patients
    ]
    return json.dumps(payload, indent=2)


class LLMPatientMatcher:
    """Classifies which patients a free-text request applies to."""
    
    def __init__(
        self,
        llm_client: LLMClientProtocol,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 800,
    ):
        self.llm_client = llm_client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
    
    def build_messages(self, prompt: str, patients: Sequence[PatientContext]) -> list[dict]:
        return [
            {"role": "system", "content": render_prompt("system", "matching")},
            {
                "role": "user",
                "content": render_prompt(
                    "user",
                    "matching",
                    prompt=prompt.strip(),
                    patients_json=serialize_patients(patients),
                ),
            },
        ]
    
    async def match(
        self,
        prompt: str,
        patients: Sequence[Union[Patient, PatientContext]],
    ) -> MatchResult:
        """
        Ask the model which patients match ``prompt``.
        
        Returns:
            MatchResult whose ids are a subset of ``patients``; ``error`` is set
            when the provider failed or the output could not be parsed.
        """
        if not prompt or not prompt.strip():
            return MatchResult(error="Prompt is required")
        
        contexts = as_patient_contexts(patients)
        valid_ids = known_ids(contexts)
        logger.info(f"Matching request for {len(contexts)} patients: {prompt.strip()[:100]!r}")
        
        try:
            response = await self.llm_client.complete(
                model=self.model,
                messages=self.build_messages(prompt, contexts),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except LLMProviderError as e:
            logger.error(f"Patient matching failed at provider: {e}")
            return MatchResult(error="Failed to analyze patients", details=str(e))
        
        raw = response.content
        logger.debug(f"Raw matching output: {raw!r}")
        parsed = parse_llm_output(raw)
        
        if isinstance(parsed, IdList):
            candidates, extraction = parsed.ids, "json"
        elif isinstance(parsed, Structured):
            candidates, extraction = ids_from_payload(parsed.payload), "json"
            if candidates is None:
                logger.warning("Matching output was an object without an id list")
                return MatchResult(
                    raw_analysis=raw,
                    error="AI response did not contain a patient id list",
                )
        elif isinstance(parsed, Unparsable):
            candidates = extract_id_candidates(parsed.raw_text)
            if not candidates:
                logger.warning("Matching output could not be parsed; returning no matches")
                return MatchResult(raw_analysis=raw, error="Unable to parse AI response")
            extraction = "pattern"
        else:
            raise TypeError(f"Unexpected LLM result: {type(parsed).__name__}")
        
        kept, dropped = filter_known_ids(candidates, valid_ids)
        logger.info(f"Model returned {len(candidates)} id(s); {len(kept)} matched the pool")
        
        return MatchResult(
            matching_patient_ids=kept,
            raw_analysis=raw,
            extraction=extraction,
            dropped_ids=dropped,
        )
