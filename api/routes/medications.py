"""Medication suggestion routes."""

from typing import Callable

from fastapi import APIRouter, Depends

from api.dependencies import get_medication_factory
from api.responses import error_response
from api.schemas.medications import MedicationRequest, MedicationResponse, MedicationSuggestions
from src.matching.medications import MedicationSuggestionService

router = APIRouter()


@router.post("/medications/suggest", response_model=MedicationResponse)
async def suggest_medications(
    request: MedicationRequest,
    service_factory: Callable[[], MedicationSuggestionService] = Depends(get_medication_factory),
):
    """Suggest alternative medications with coverage and side-effect notes."""
    if not request.prompt or not request.prompt.strip():
        return error_response(400, "Prompt is required")
    
    service = service_factory()
    result = await service.suggest(request.prompt, request.context)
    if not result.ok:
        return error_response(500, result.error, result.details)
    
    return MedicationResponse(
        response=MedicationSuggestions(
            alternatives=result.alternatives,
            analysis=result.analysis,
            recommendations=result.recommendations,
        ),
        raw_analysis=result.analysis,
        context=request.context,
    )
