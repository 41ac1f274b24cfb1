"""Error bodies shared by the API routes."""

from typing import Optional

from fastapi.responses import JSONResponse


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    """``{"success": false, "error": ..., "details"?: ...}`` with the given status."""
    content = {"success": False, "error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)
