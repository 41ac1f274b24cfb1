"""API schema modules."""

from api.schemas.matching import (
    ErrorResponse,
    GroupRequest,
    GroupResponse,
    MatchRequest,
    MatchResponse,
    RequestContext,
)
from api.schemas.medications import MedicationRequest, MedicationResponse
from api.schemas.updates import DashboardResponse, FindMatchesRequest, FindMatchesResponse

__all__ = [
    "ErrorResponse",
    "GroupRequest",
    "GroupResponse",
    "MatchRequest",
    "MatchResponse",
    "RequestContext",
    "MedicationRequest",
    "MedicationResponse",
    "DashboardResponse",
    "FindMatchesRequest",
    "FindMatchesResponse",
]
