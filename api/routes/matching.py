"""Patient matching and grouping routes."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from fastapi import APIRouter, Depends

from api.dependencies import get_dashboard_service, get_grouping_factory, get_matcher_factory
from api.responses import error_response
from api.schemas.matching import (
    GroupingMetadata,
    GroupRequest,
    GroupResponse,
    MatchRequest,
    MatchResponse,
    RequestContext,
)
from src.dashboard.service import DashboardService
from src.matching.grouping import AIGroupingService
from src.matching.llm_matcher import LLMPatientMatcher
from src.models.patient import Patient, PatientContext


logger = logging.getLogger(__name__)

router = APIRouter()


async def resolve_pool(
    context: RequestContext,
    dashboard: DashboardService,
) -> tuple[Optional[list[Union[Patient, PatientContext]]], Optional[str]]:
    """The request's patients, or the stored pool when the client sent none."""
    if context.patients is not None:
        return list(context.patients), None
    
    snapshot = await dashboard.load()
    if snapshot.error:
        return None, snapshot.error
    return list(snapshot.patients), None


@router.post("/match", response_model=MatchResponse)
async def match_patients(
    request: MatchRequest,
    matcher_factory: Callable[[], LLMPatientMatcher] = Depends(get_matcher_factory),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """
    Return the ids of the patients a free-text request explicitly applies to.
    """
    if not request.prompt or not request.prompt.strip():
        return error_response(400, "Prompt is required")
    
    matcher = matcher_factory()
    patients, load_error = await resolve_pool(request.context, dashboard)
    if patients is None:
        return error_response(500, "Failed to load patients", load_error)
    
    result = await matcher.match(request.prompt, patients)
    if not result.ok:
        return error_response(500, result.error, result.details)
    
    return MatchResponse(
        matching_patient_ids=result.matching_patient_ids,
        analysis=result.raw_analysis,
        context=request.context.echo(),
    )


@router.post("/group", response_model=GroupResponse)
async def group_patients(
    request: GroupRequest,
    grouping_factory: Callable[[], AIGroupingService] = Depends(get_grouping_factory),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """
    Propose named groupings of the patient pool for the canvas.
    """
    if not request.prompt or not request.prompt.strip():
        return error_response(400, "Prompt is required")
    
    service = grouping_factory()
    patients, load_error = await resolve_pool(request.context, dashboard)
    if patients is None:
        return error_response(500, "Failed to load patients", load_error)
    
    result = await service.group(
        request.prompt,
        patients,
        grouping_type=request.grouping_type,
        highlighted=request.context.highlighted_patients,
    )
    if not result.ok:
        return error_response(500, result.error, result.details)
    
    return GroupResponse(
        analysis=result.analysis,
        groupings=result.groupings,
        highlighted_patients=result.highlighted_patients,
        recommendations=result.recommendations,
        summary=result.summary,
        metadata=GroupingMetadata(
            processed_at=datetime.now(timezone.utc).isoformat(),
            grouping_type=request.grouping_type.value,
            patient_count=len(patients),
        ),
    )
