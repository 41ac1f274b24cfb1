"""
Risk scoring.

A patient's score starts at a base of 35, adds a fixed bonus for each
condition category present (each category counts once), adds a glycemic
bonus from the first HbA1c lab, and is clamped to [20, 100]. Priority is a
pure function of the score and is always derived together with it.
"""

import math
from typing import NamedTuple, Sequence

from src.clinical.labs import is_hba1c, to_numeric
from src.models.enums import PriorityLevel
from src.models.patient import LabResult


BASE_SCORE = 35
MIN_SCORE = 20
MAX_SCORE = 100

# (substrings, bonus); a category applies when any condition contains any substring
CONDITION_BONUSES: list[tuple[tuple[str, ...], int]] = [
    (("diabetes",), 25),
    (("copd",), 18),
    (("heart", "atrial", "cardio"), 20),
    (("cancer",), 15),
    (("hypertension",), 10),
    (("asthma",), 8),
]

# (minimum HbA1c, bonus), highest band first
HBA1C_BONUSES: list[tuple[float, int]] = [
    (9.0, 35),
    (8.0, 25),
    (7.2, 18),
    (6.5, 10),
]

PRIORITY_THRESHOLDS: list[tuple[int, PriorityLevel]] = [
    (85, PriorityLevel.CRITICAL),
    (70, PriorityLevel.HIGH),
    (50, PriorityLevel.MEDIUM),
]


class RiskAssessment(NamedTuple):
    """A risk score and the priority derived from it."""

    score: int
    priority: PriorityLevel


def _condition_bonus(conditions: Sequence[str]) -> int:
    lowered = [condition.lower() for condition in conditions if isinstance(condition, str)]
    bonus = 0
    for substrings, points in CONDITION_BONUSES:
        if any(needle in condition for condition in lowered for needle in substrings):
            bonus += points
    return bonus


def _hba1c_bonus(labs: Sequence[LabResult]) -> int:
    lab = next((item for item in labs if is_hba1c(item.name)), None)
    if lab is None:
        return 0

    value = to_numeric(lab.value)
    if not math.isfinite(value):
        return 0

    for threshold, points in HBA1C_BONUSES:
        if value >= threshold:
            return points
    return 0


def compute_risk_score(conditions: Sequence[str], labs: Sequence[LabResult]) -> int:
    """Compute the integer risk score in [20, 100] for a patient."""
    score = BASE_SCORE + _condition_bonus(conditions) + _hba1c_bonus(labs)
    return max(MIN_SCORE, min(MAX_SCORE, int(round(score))))


def classify_priority(score: int) -> PriorityLevel:
    """Map a risk score to its priority tier."""
    for threshold, level in PRIORITY_THRESHOLDS:
        if score >= threshold:
            return level
    return PriorityLevel.LOW


def assess_risk(conditions: Sequence[str], labs: Sequence[LabResult]) -> RiskAssessment:
    """Score a patient and derive the priority from that same score."""
    score = compute_risk_score(conditions, labs)
    return RiskAssessment(score=score, priority=classify_priority(score))
