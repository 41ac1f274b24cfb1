"""
Patient criteria extraction for research updates.

An update's free text is turned into ``UpdateCriteria`` (conditions,
medications, lab thresholds, age range) by the model, with a keyword
fallback when the provider is unavailable or answers with something that
is not the expected object. The criteria are then applied to the hydrated
patient pool deterministically.
"""

import logging
import math
import re
from typing import Optional, Sequence

from pydantic import ValidationError

from src.clinical.labs import to_numeric
from src.errors import LLMProviderError
from src.models.llm import Structured
from src.models.patient import Patient
from src.models.update import UpdateCriteria
from src.utils.parsing import parse_llm_output
from src.utils.prompt_loader import render_prompt
from src.utils.protocols import LLMClientProtocol


logger = logging.getLogger(__name__)

_HBA1C_VALUE = re.compile(r"hba1c[^0-9]*([0-9.]+)", re.IGNORECASE)

# (keywords, condition added to the criteria)
KEYWORD_CONDITIONS = (
    (("diabetes",), "Type 2 Diabetes"),
    (("copd",), "COPD"),
    (("breast cancer", "her2"), "HER2+ Breast Cancer"),
    (("asthma",), "asthma"),
)


def fallback_criteria(update_text: str) -> UpdateCriteria:
    """Keyword-based extraction used when the model is not available."""
    normalized = update_text.lower()
    conditions = [
        condition
        for keywords, condition in KEYWORD_CONDITIONS
        if any(keyword in normalized for keyword in keywords)
    ]
    
    lab_values = {}
    match = _HBA1C_VALUE.search(update_text)
    if match:
        threshold = to_numeric(match.group(1))
        if math.isfinite(threshold):
            lab_values["HbA1c"] = threshold
    
    return UpdateCriteria(conditions=conditions, lab_values=lab_values)


def _meets_lab_thresholds(patient: Patient, lab_values: dict[str, float]) -> bool:
    for lab_name, threshold in lab_values.items():
        key = lab_name.lower()
        lab = next((lab for lab in patient.labs if key in lab.name.lower()), None)
        if lab is None or lab.value in ("", 0, None):
            continue
        value = to_numeric(lab.value)
        if math.isfinite(value) and value <= threshold:
            return False
    return True


def patient_meets_criteria(patient: Patient, criteria: UpdateCriteria) -> bool:
    """
    Check one patient against extracted criteria.
    
    A required condition matches by case-insensitive substring. A lab
    threshold excludes the patient only when the patient has that lab with
    a numeric value at or below the threshold.
    """
    if criteria.conditions:
        patient_conditions = [condition.lower() for condition in patient.conditions]
        if not any(
            required.lower() in condition
            for required in criteria.conditions
            for condition in patient_conditions
        ):
            return False
    
    if not _meets_lab_thresholds(patient, criteria.lab_values):
        return False
    
    if criteria.age_range is not None:
        if criteria.age_range.min is not None and patient.age < criteria.age_range.min:
            return False
        if criteria.age_range.max is not None and patient.age > criteria.age_range.max:
            return False
    
    return True


def filter_patients_by_criteria(criteria: UpdateCriteria, patients: Sequence[Patient]) -> list[Patient]:
    return [patient for patient in patients if patient_meets_criteria(patient, criteria)]


class UpdateCriteriaAnalyzer:
    """Extracts patient criteria from research update text."""
    
    def __init__(
        self,
        llm_client: Optional[LLMClientProtocol] = None,
        model: str = "gpt-4",
        temperature: float = 0.1,
        max_tokens: int = 300,
    ):
        self.llm_client = llm_client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
    
    async def analyze(self, update_text: str) -> UpdateCriteria:
        """
        Extract criteria from ``update_text``.
        
        Without a client, or when the model fails or answers outside the
        object contract, keyword extraction is used instead.
        """
        if self.llm_client is None:
            return fallback_criteria(update_text)
        
        try:
            response = await self.llm_client.complete(
                model=self.model,
                messages=[
                    {"role": "system", "content": render_prompt("system", "criteria")},
                    {"role": "user", "content": render_prompt("user", "criteria", update_text=update_text)},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except LLMProviderError as e:
            logger.warning(f"Criteria extraction failed at provider, using keywords: {e}")
            return fallback_criteria(update_text)
        
        parsed = parse_llm_output(response.content)
        if not isinstance(parsed, Structured):
            logger.warning("Criteria extraction returned no JSON object, using keywords")
            return fallback_criteria(update_text)
        
        try:
            criteria = UpdateCriteria.model_validate(parsed.payload)
        except ValidationError as e:
            logger.warning(f"Criteria extraction returned an invalid object, using keywords: {e}")
            return fallback_criteria(update_text)
        
        logger.info(
            f"Extracted criteria: {len(criteria.conditions)} condition(s), "
            f"{len(criteria.lab_values)} lab threshold(s)"
        )
        return criteria
