"""Research update and dashboard routes."""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_criteria_analyzer, get_dashboard_service
from api.responses import error_response
from api.schemas.updates import (
    DashboardResponse,
    FindMatchesData,
    FindMatchesRequest,
    FindMatchesResponse,
)
from src.dashboard.service import DashboardService
from src.matching.update_analyzer import UpdateCriteriaAnalyzer, filter_patients_by_criteria


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(dashboard: DashboardService = Depends(get_dashboard_service)):
    """
    Hydrated patients (highest risk first) and research updates.
    
    A failed store read still answers 200, with empty lists and ``error`` set.
    """
    snapshot = await dashboard.load()
    return DashboardResponse(
        patients=snapshot.patients,
        updates=snapshot.updates,
        error=snapshot.error,
        loaded_at=snapshot.loaded_at,
    )


@router.post("/updates/find-matches", response_model=FindMatchesResponse)
async def find_matches(
    request: FindMatchesRequest,
    analyzer: UpdateCriteriaAnalyzer = Depends(get_criteria_analyzer),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """Extract patient criteria from update text and filter the stored pool with them."""
    if not request.update_text or not request.update_text.strip():
        return error_response(400, "Update text is required")
    
    criteria = await analyzer.analyze(request.update_text)
    
    snapshot = await dashboard.load()
    if snapshot.error:
        return error_response(500, "Failed to find matching patients", snapshot.error)
    
    matching = filter_patients_by_criteria(criteria, snapshot.patients)
    logger.info(f"Update {request.update_id or '(unsaved)'} matches {len(matching)} patient(s)")
    
    return FindMatchesResponse(
        data=FindMatchesData(
            update_id=request.update_id,
            criteria=criteria,
            matching_patient_ids=[patient.id for patient in matching],
            matching_patients=matching,
            patient_count=len(matching),
        )
    )
