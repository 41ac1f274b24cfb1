"""
Deterministic clinical derivations: lab status and risk score.

Hydration lives in ``src.clinical.hydration``; it depends on the rule
matcher and is imported from there directly.
"""

from src.clinical.labs import classify_lab_status, to_numeric
from src.clinical.risk import assess_risk, classify_priority, compute_risk_score

__all__ = [
    "classify_lab_status",
    "to_numeric",
    "compute_risk_score",
    "classify_priority",
    "assess_risk",
]
