"""Errors raised by the relay before the outbound stream is committed."""

from fastapi import HTTPException, status

from models.responses import (
    AbstractErrorResponse,
    GatewayTimeoutResponse,
    InternalServerErrorResponse,
    TooManyRequestsResponse,
    UnauthorizedResponse,
    UpstreamErrorResponse,
)


class RelayError(Exception):
    """Base class for caller-visible pre-stream errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, cause: str) -> None:
        """Initialize the error with a human readable cause."""
        super().__init__(cause)
        self.cause = cause

    def error_response(self) -> AbstractErrorResponse:
        """Return the response model describing this error."""
        return InternalServerErrorResponse(cause=self.cause)

    def to_http_exception(self) -> HTTPException:
        """Convert the error into a FastAPI HTTP exception."""
        return HTTPException(
            status_code=self.status_code, detail=self.error_response().dump_detail()
        )


class UnauthorizedError(RelayError):
    """No credential could be resolved for the caller."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def error_response(self) -> AbstractErrorResponse:
        """Return the 401 response model."""
        return UnauthorizedResponse(cause=self.cause)


class TooManyRequestsError(RelayError):
    """Caller exceeded the request rate."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def error_response(self) -> AbstractErrorResponse:
        """Return the 429 response model."""
        return TooManyRequestsResponse(cause=self.cause)


class UpstreamError(RelayError):
    """Upstream gateway rejected the call before any byte was streamed."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def error_response(self) -> AbstractErrorResponse:
        """Return the 502 response model."""
        return UpstreamErrorResponse(cause=self.cause)


class UpstreamTimeoutError(RelayError):
    """The overall upstream ceiling expired."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def error_response(self) -> AbstractErrorResponse:
        """Return the 504 response model."""
        return GatewayTimeoutResponse(cause=self.cause)
