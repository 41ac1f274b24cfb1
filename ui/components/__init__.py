"""
UI components for the Vital Canvas application.

This module contains reusable Streamlit rendering components.
"""

from ui.components.assistant import (
    render_assistant_panel,
    render_grouping_result,
    render_medication_result,
)
from ui.components.patients import render_patient_card, render_patient_grid
from ui.components.updates import render_research_stream

__all__ = [
    # Assistant
    "render_assistant_panel",
    "render_grouping_result",
    "render_medication_result",
    # Patients
    "render_patient_card",
    "render_patient_grid",
    # Research stream
    "render_research_stream",
]
