"""
Vital Canvas - Enumerations

Centralized enum definitions shared by the clinical core, the API and the UI.
"""

from enum import Enum


class PriorityLevel(str, Enum):
    """Coarse bucketing of a patient's risk score."""

    CRITICAL = "critical"  # score >= 85
    HIGH = "high"  # score >= 70
    MEDIUM = "medium"  # score >= 50
    LOW = "low"


class UpdateCategory(str, Enum):
    """Category of a research update, derived from its source."""

    GUIDELINES = "Guidelines"
    DRUG_APPROVAL = "Drug Approval"
    POLICY = "Policy"
    RESEARCH = "Research"


class UpdateUrgency(str, Enum):
    """Display urgency of a research update, derived from its category."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LabStatus(str, Enum):
    """Qualitative lab status vocabulary."""

    HIGH = "high"
    ELEVATED = "elevated"
    PRE_DIABETIC = "pre-diabetic"
    CONTROLLED = "controlled"
    LOW = "low"
    GOOD = "good"
    NORMAL = "normal"
    UNKNOWN = "unknown"


class GroupingType(str, Enum):
    """How the grouping service should organise the canvas."""

    VISUAL_GROUP = "visual-group"  # Move cards into clusters
    HIGHLIGHT_FILTER = "highlight-filter"  # Highlight matching patients
    RISK_STRATIFY = "risk-stratify"  # Group by risk level
    CONDITION_CLUSTER = "condition-cluster"  # Group by shared conditions


class RequestStatus(str, Enum):
    """Lifecycle of a user-triggered AI request."""

    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
