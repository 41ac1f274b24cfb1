"""
FastAPI backend for Vital Canvas.

Serves the hydrated patient/update dashboard and the AI endpoints for
patient matching, canvas grouping, medication suggestions and update
criteria extraction.
"""

import logging
import sys
from pathlib import Path
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api.dependencies import get_settings
from api.routes import health, matching, medications, updates
from src.errors import ConfigurationError
from src.utils.logging import setup_logging

load_dotenv()

settings = get_settings()
setup_logging(level=settings.log_level, log_file=settings.log_file)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info(
        f"Vital Canvas API starting (llm configured: {settings.llm_configured}, "
        f"store configured: {settings.store_configured})"
    )
    yield
    logger.info("Vital Canvas API shutting down")


app = FastAPI(
    title="Vital Canvas API",
    description="Patient risk dashboard with research-update matching and AI grouping",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"{request.url.path} is not configured: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Service is not configured", "details": str(exc)},
    )


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(matching.router, prefix="/api", tags=["Matching"])
app.include_router(medications.router, prefix="/api", tags=["Medications"])
app.include_router(updates.router, prefix="/api", tags=["Updates"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
