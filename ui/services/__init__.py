"""
UI services layer for the Vital Canvas application.

This module contains cached clients, services and the per-tab session.
"""

from ui.services.state import (
    get_criteria_analyzer,
    get_dashboard_service,
    get_grouping_service,
    get_llm_client,
    get_matcher,
    get_medication_service,
    get_session,
    get_settings,
)

__all__ = [
    "get_criteria_analyzer",
    "get_dashboard_service",
    "get_grouping_service",
    "get_llm_client",
    "get_matcher",
    "get_medication_service",
    "get_session",
    "get_settings",
]
