"""Models for REST API responses."""

from typing import Optional

from pydantic import BaseModel, Field


class ReadinessResponse(BaseModel):
    """Model representing response to a readiness request.

    Attributes:
        ready: If service is ready.
        reason: The reason for the readiness.

    Example:
        ```python
        readiness_response = ReadinessResponse(ready=True, reason="Service is ready")
        ```
    """

    ready: bool = Field(
        ...,
        description="Flag indicating if service is ready",
        examples=[True, False],
    )

    reason: str = Field(
        ...,
        description="The reason for the readiness",
        examples=["Service is ready"],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "ready": True,
                    "reason": "Service is ready",
                }
            ]
        }
    }


class LivenessResponse(BaseModel):
    """Model representing a response to a liveness request.

    Attributes:
        alive: If app is alive.
    """

    alive: bool = Field(
        ...,
        description="Flag indicating that the app is alive",
        examples=[True, False],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "alive": True,
                }
            ]
        }
    }


class DetailModel(BaseModel):
    """Nested detail model for error responses."""

    response: str = Field(..., description="Short summary of the error")
    cause: str = Field(..., description="Detailed explanation of what caused the error")
    code: Optional[str] = Field(None, description="Machine readable error code")


class AbstractErrorResponse(BaseModel):
    """Base class for all error responses.

    Contains a nested `detail` field.
    """

    detail: DetailModel

    def dump_detail(self) -> dict:
        """Return dict in FastAPI HTTPException format."""
        return self.detail.model_dump(exclude_none=True)


class UnauthorizedResponse(AbstractErrorResponse):
    """401 Unauthorized - No credential could be resolved for the caller."""

    def __init__(self, cause: str = "No API key available for the caller"):
        """Initialize an UnauthorizedResponse when the credential chain is empty."""
        super().__init__(
            detail=DetailModel(response="Unauthorized", cause=cause, code="UNAUTHORIZED")
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "response": "Unauthorized",
                        "cause": "No API key available for the caller",
                        "code": "UNAUTHORIZED",
                    }
                }
            ]
        }
    }


class TooManyRequestsResponse(AbstractErrorResponse):
    """429 Too Many Requests - Caller exceeded the request rate."""

    def __init__(self, cause: str = "Rate limit exceeded"):
        """Initialize a TooManyRequestsResponse."""
        super().__init__(
            detail=DetailModel(
                response="Too many requests", cause=cause, code="TOO_MANY_REQUESTS"
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "response": "Too many requests",
                        "cause": "Rate limit of 100 requests per 60 seconds exceeded",
                        "code": "TOO_MANY_REQUESTS",
                    }
                }
            ]
        }
    }


class UpstreamErrorResponse(AbstractErrorResponse):
    """502 Bad Gateway - The LLM gateway rejected the request."""

    def __init__(self, cause: str):
        """Initialize an UpstreamErrorResponse carrying the gateway's message."""
        super().__init__(
            detail=DetailModel(
                response="Upstream gateway error", cause=cause, code="API_ERROR"
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "response": "Upstream gateway error",
                        "cause": "Insufficient credits",
                        "code": "API_ERROR",
                    }
                }
            ]
        }
    }


class GatewayTimeoutResponse(AbstractErrorResponse):
    """504 Gateway Timeout - The upstream call exceeded its ceiling."""

    def __init__(self, cause: str):
        """Initialize a GatewayTimeoutResponse."""
        super().__init__(
            detail=DetailModel(
                response="Upstream request timed out", cause=cause, code="TIMEOUT"
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "response": "Upstream request timed out",
                        "cause": "No response from the gateway within 600 seconds",
                        "code": "TIMEOUT",
                    }
                }
            ]
        }
    }


class InternalServerErrorResponse(AbstractErrorResponse):
    """500 Internal Server Error - Unexpected failure before streaming started."""

    def __init__(self, cause: str):
        """Initialize an InternalServerErrorResponse."""
        super().__init__(
            detail=DetailModel(
                response="Internal server error", cause=cause, code="INTERNAL_ERROR"
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "response": "Internal server error",
                        "cause": "Unexpected error while preparing the request",
                        "code": "INTERNAL_ERROR",
                    }
                }
            ]
        }
    }
