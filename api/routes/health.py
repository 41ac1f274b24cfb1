"""Health check endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_settings
from src.config import Settings

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic health check, with which backing services are configured."""
    return {
        "status": "healthy",
        "service": "vital-canvas",
        "llm_configured": settings.llm_configured,
        "store_configured": settings.store_configured,
    }


@router.get("/")
async def root():
    """API root."""
    return {
        "name": "Vital Canvas API",
        "version": "1.0.0",
        "docs": "/docs",
    }
