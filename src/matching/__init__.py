"""
Patient matching: deterministic rule evaluation and the LLM-backed services.
"""

from src.matching.criteria import (
    CRITERION_PATTERNS,
    UnrecognizedPolicy,
    evaluate_criterion,
    filter_by_criterion,
    parse_criterion,
)
from src.matching.grouping import AIGroupingService
from src.matching.llm_matcher import LLMPatientMatcher
from src.matching.medications import MedicationSuggestionService
from src.matching.rules import match_patients, match_update_to_patients
from src.matching.update_analyzer import UpdateCriteriaAnalyzer, filter_patients_by_criteria
from src.matching.validation import filter_known_ids

__all__ = [
    "AIGroupingService",
    "CRITERION_PATTERNS",
    "LLMPatientMatcher",
    "MedicationSuggestionService",
    "UnrecognizedPolicy",
    "UpdateCriteriaAnalyzer",
    "evaluate_criterion",
    "filter_by_criterion",
    "filter_known_ids",
    "filter_patients_by_criteria",
    "match_patients",
    "match_update_to_patients",
    "parse_criterion",
]
