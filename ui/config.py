"""
Configuration constants for the Vital Canvas UI.

This module contains priority/category styling, grouping options, and example prompts.
"""

# Priority badge colors
PRIORITY_COLORS = {
    "critical": "#ef4444",
    "high": "#f97316",
    "medium": "#f59e0b",
    "low": "#22c55e",
}

PRIORITY_EMOJIS = {
    "critical": "🔴",
    "high": "🟠",
    "medium": "🟡",
    "low": "🟢",
}

# Research update category colors
CATEGORY_COLORS = {
    "Guidelines": "#0ea5e9",
    "Drug Approval": "#a855f7",
    "Policy": "#64748b",
    "Research": "#14b8a6",
}

# Lab status colors (statuses not listed render muted)
LAB_STATUS_COLORS = {
    "high": "#ef4444",
    "elevated": "#f97316",
    "pre-diabetic": "#f59e0b",
    "low": "#f59e0b",
    "controlled": "#22c55e",
    "good": "#22c55e",
    "normal": "#8b949e",
}

GROUPING_TYPES = {
    "Visual groups": "visual-group",
    "Highlight matches": "highlight-filter",
    "Risk strata": "risk-stratify",
    "Condition clusters": "condition-cluster",
}

# Example prompts for the assistant panel
EXAMPLE_PROMPTS = [
    ("Uncontrolled diabetes", "Which patients have HbA1c above 8 and are on metformin?"),
    ("Risk strata", "Group my patients by risk level and flag who needs follow-up this week."),
    ("Respiratory", "Cluster COPD and asthma patients by current inhaler therapy."),
]

MEDICATION_EXAMPLE = "Suggest alternatives to metformin for a patient with GI intolerance."


def get_priority_color(priority: str) -> str:
    return PRIORITY_COLORS.get(priority, "#64748b")


def get_priority_emoji(priority: str) -> str:
    return PRIORITY_EMOJIS.get(priority, "⚪")


def get_lab_status_color(status: str) -> str:
    return LAB_STATUS_COLORS.get(status, "#6e7681")


def get_category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, "#14b8a6")
