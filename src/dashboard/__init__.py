"""Dashboard loading, session state and canvas layout."""

from src.dashboard.layout import initial_position, layout_groups
from src.dashboard.service import DashboardService
from src.dashboard.session import DashboardSession, InputState, RequestTracker

__all__ = [
    "DashboardService",
    "DashboardSession",
    "InputState",
    "RequestTracker",
    "initial_position",
    "layout_groups",
]
