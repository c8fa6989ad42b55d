"""
HTTP rendering of canonical lookup results.
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse

from .models import CanonicalResult, Failure, FailureKind, Found, NotFound

# Status codes used when soft errors are disabled
HARD_ERROR_STATUS = {
    FailureKind.NOT_FOUND_UPSTREAM: 404,
    FailureKind.UPSTREAM_ERROR: 502,
    FailureKind.TRANSPORT_ERROR: 502,
}


def render_result(result: CanonicalResult, soft_errors: bool = True) -> JSONResponse:
    """Render a canonical result as the JSON contract the front-end expects."""
    if isinstance(result, Found):
        return JSONResponse(status_code=200, content={
            "success": True,
            "data": result.data(),
            "idNumber": result.taxpayer_id,
        })

    if isinstance(result, NotFound):
        return JSONResponse(status_code=200, content={
            "success": False,
            "error": "Not Found",
            "message": f"Invalid ID Number: {result.taxpayer_id}",
            "idNumber": result.taxpayer_id,
        })

    return _render_failure(result, soft_errors)


def _render_failure(result: Failure, soft_errors: bool) -> JSONResponse:
    if result.kind is FailureKind.AUTHENTICATION_FAILED:
        return JSONResponse(status_code=401, content={
            "error": "Authentication failed",
            "message": result.message,
        })

    if result.kind is FailureKind.TIMEOUT:
        return JSONResponse(status_code=504, content={
            "error": "Request timeout",
            "message": result.message,
        })

    content: Dict[str, Any] = {
        "success": False,
        "error": result.error,
        "message": result.message,
        "idNumber": result.taxpayer_id,
    }
    status_code = 200 if soft_errors else HARD_ERROR_STATUS[result.kind]
    return JSONResponse(status_code=status_code, content=content)


def render_validation_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})
