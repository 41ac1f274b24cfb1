"""
Deterministic update-to-patient matching.

A patient is impacted by an update when it passes both the condition rule
(case-insensitive substring of any of its conditions) and the criterion
rule. This is the ground-truth path run for every update at load time; it
never calls the LLM.
"""

from typing import Optional, Sequence

from src.matching.criteria import (
    MatchablePatient,
    UnrecognizedPolicy,
    evaluate_criterion,
    parse_criterion,
)
from src.models.update import ResearchUpdateRecord


def matches_condition(patient: MatchablePatient, condition: Optional[str]) -> bool:
    """True when the rule is empty or any patient condition contains it."""
    if not condition:
        return True
    normalized = condition.lower()
    return any(normalized in existing.lower() for existing in patient.conditions)


def match_patients(
    condition_rule: Optional[str],
    criterion_rule: Optional[str],
    patients: Sequence[MatchablePatient],
    policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
) -> list[str]:
    """Ids of the impacted patients, in pool order."""
    criterion = parse_criterion(criterion_rule)
    return [
        patient.id
        for patient in patients
        if matches_condition(patient, condition_rule)
        and evaluate_criterion(criterion, patient, policy)
    ]


def match_update_to_patients(
    update: ResearchUpdateRecord,
    patients: Sequence[MatchablePatient],
    policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
) -> list[str]:
    return match_patients(update.rule_condition, update.rule_criterion, patients, policy)
