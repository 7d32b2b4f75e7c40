"""Handlers for health REST API endpoints.

These endpoints are used to check if service is live and prepared to accept
requests.
"""

import logging
from typing import Any

from fastapi import APIRouter, status, Response
from models.responses import (
    LivenessResponse,
    ReadinessResponse,
)
from configuration import configuration
from app.state import app_state

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["health"])


def check_readiness() -> tuple[bool, str]:
    """
    Check that configuration is loaded and every startup step succeeded.

    Returns:
        tuple[bool, str]: (is_ready, reason)
    """
    if not configuration.is_loaded():
        return False, "Configuration not loaded"

    if not app_state.is_fully_initialized:
        errors = app_state.initialization_status["errors"]
        if errors:
            return False, f"Initialization failed: {errors[0]}"
        failed_checks = [
            name.replace("_", " ")
            for name, passed in app_state.initialization_status["checks"].items()
            if not passed
        ]
        if failed_checks:
            return False, f"Incomplete initialization: {', '.join(failed_checks)}"
        return False, "Application initialization not complete"

    return True, "Service is ready"


get_readiness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Service is ready",
        "model": ReadinessResponse,
    },
    503: {
        "description": "Service is not ready",
        "model": ReadinessResponse,
    },
}


@router.get("/readiness", responses=get_readiness_responses)
async def readiness_probe_get_method(response: Response) -> ReadinessResponse:
    """
    Return the readiness status of the service.

    Returns 200 when fully initialized, 503 otherwise with the reason.
    """
    logger.info("Response to /readiness endpoint")

    ready, reason = check_readiness()
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(ready=ready, reason=reason)


get_liveness_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Service is alive",
        "model": LivenessResponse,
    },
    # HTTP_503_SERVICE_UNAVAILABLE will never be returned when unreachable
}


@router.get("/liveness", responses=get_liveness_responses)
async def liveness_probe_get_method() -> LivenessResponse:
    """
    Return the liveness status of the service.

    Returns:
        LivenessResponse: Indicates that the service is alive.
    """
    logger.info("Response to /liveness endpoint")

    return LivenessResponse(alive=True)
