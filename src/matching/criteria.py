"""
Criterion rules for research updates.

An update's ``rule_criterion`` is free text. ``parse_criterion`` turns it
into a tagged ``Criterion`` variant using an ordered phrase table (first
matching phrase wins) and ``evaluate_criterion`` checks a patient against
the variant. Text that no phrase covers becomes ``Unrecognized``; its
outcome is decided by an ``UnrecognizedPolicy`` rather than silently.
"""

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

from src.clinical.labs import to_numeric
from src.models.criteria import (
    AllOf,
    ConditionWithMinRisk,
    Criterion,
    HasCondition,
    HasMedication,
    LabThreshold,
    Unrecognized,
)
from src.models.patient import LabResult


logger = logging.getLogger(__name__)

_HBA1C_THRESHOLD = re.compile(r"hba1c\s*[>≥]\s*(\d+(?:\.\d+)?)")


class UnrecognizedPolicy(str, Enum):
    """What an ``Unrecognized`` criterion does to a patient."""

    PASS = "pass"  # Unknown rule text never excludes anyone
    FAIL = "fail"  # Unknown rule text excludes everyone


class MatchablePatient(Protocol):
    """The patient attributes criterion evaluation reads."""

    id: str
    conditions: list[str]
    meds: list[str]
    labs: list[LabResult]
    risk_score: Optional[int]


def _parse_hba1c(normalized: str, text: str) -> Criterion:
    match = _HBA1C_THRESHOLD.search(normalized)
    if not match:
        return Unrecognized(text=text, reason="missing_threshold")
    return LabThreshold(lab="hba1c", op=">", value=float(match.group(1)))


@dataclass(frozen=True)
class CriterionPattern:
    """One row of the phrase table."""

    name: str
    any_of: tuple[str, ...]
    build: Callable[[str, str], Criterion]
    all_of: tuple[str, ...] = ()

    def matches(self, normalized: str) -> bool:
        return all(needle in normalized for needle in self.all_of) and any(
            needle in normalized for needle in self.any_of
        )


# Order matters: the first matching row decides the criterion
CRITERION_PATTERNS: list[CriterionPattern] = [
    CriterionPattern(
        name="hba1c_threshold",
        all_of=(">",),
        any_of=("hba1c",),
        build=_parse_hba1c,
    ),
    CriterionPattern(
        name="her2_eligibility",
        any_of=("eligible her2",),
        build=lambda normalized, text: HasCondition(substring="her2+"),
    ),
    CriterionPattern(
        name="trelegy",
        any_of=("trelegy",),
        build=lambda normalized, text: HasMedication(substring="trelegy"),
    ),
    CriterionPattern(
        name="metformin",
        any_of=("patients on metformin",),
        build=lambda normalized, text: HasMedication(substring="metformin"),
    ),
    CriterionPattern(
        name="blood_pressure",
        any_of=("bp", "130/80"),
        build=lambda normalized, text: HasCondition(substring="hypertension"),
    ),
    CriterionPattern(
        name="severe_asthma",
        any_of=("severe persistent asthma",),
        build=lambda normalized, text: ConditionWithMinRisk(substring="asthma", min_risk=60),
    ),
]


def parse_criterion(text: Optional[str]) -> Optional[Criterion]:
    """
    Parse stored criterion text.

    Returns None for an empty rule (everyone passes), otherwise the variant
    built by the first matching row of ``CRITERION_PATTERNS``, or
    ``Unrecognized`` when no row matches.
    """
    if text is None or not text.strip():
        return None

    normalized = text.lower()
    for pattern in CRITERION_PATTERNS:
        if pattern.matches(normalized):
            criterion = pattern.build(normalized, text)
            if isinstance(criterion, Unrecognized):
                logger.info(f"Criterion matched '{pattern.name}' but is incomplete ({criterion.reason}): {text!r}")
            return criterion

    logger.info(f"Unrecognized criterion rule: {text!r}")
    return Unrecognized(text=text)


def _has_condition(patient: MatchablePatient, substring: str) -> bool:
    needle = substring.lower()
    return any(needle in condition.lower() for condition in patient.conditions)


def _has_medication(patient: MatchablePatient, substring: str) -> bool:
    needle = substring.lower()
    return any(needle in med.lower() for med in patient.meds)


def _compare(value: float, op: str, threshold: float) -> bool:
    if op == ">":
        return value > threshold
    if op == ">=":
        return value >= threshold
    if op == "<":
        return value < threshold
    return value <= threshold


def _meets_lab_threshold(patient: MatchablePatient, criterion: LabThreshold) -> bool:
    needle = criterion.lab.lower()
    lab = next((item for item in patient.labs if needle in item.name.lower()), None)
    if lab is None:
        return False
    value = to_numeric(lab.value)
    if not math.isfinite(value):
        return False
    return _compare(value, criterion.op, criterion.value)


def evaluate_criterion(
    criterion: Optional[Criterion],
    patient: MatchablePatient,
    policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
) -> bool:
    """Check one patient against a parsed criterion."""
    if criterion is None:
        return True

    if isinstance(criterion, LabThreshold):
        return _meets_lab_threshold(patient, criterion)

    if isinstance(criterion, HasCondition):
        return _has_condition(patient, criterion.substring)

    if isinstance(criterion, HasMedication):
        return _has_medication(patient, criterion.substring)

    if isinstance(criterion, ConditionWithMinRisk):
        risk_score = getattr(patient, "risk_score", None) or 0
        return _has_condition(patient, criterion.substring) and risk_score >= criterion.min_risk

    if isinstance(criterion, AllOf):
        return all(evaluate_criterion(item, patient, policy) for item in criterion.criteria)

    if isinstance(criterion, Unrecognized):
        return UnrecognizedPolicy(policy) == UnrecognizedPolicy.PASS

    raise TypeError(f"Unknown criterion variant: {type(criterion).__name__}")


def filter_by_criterion(
    criterion: Optional[Criterion],
    patients: Sequence[MatchablePatient],
    policy: UnrecognizedPolicy = UnrecognizedPolicy.PASS,
) -> list[MatchablePatient]:
    return [patient for patient in patients if evaluate_criterion(criterion, patient, policy)]
