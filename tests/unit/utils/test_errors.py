"""Unit tests for exceptions defined in utils/errors module."""

import pytest
from fastapi import HTTPException

from utils.errors import (
    RelayError,
    TooManyRequestsError,
    UnauthorizedError,
    UpstreamError,
    UpstreamTimeoutError,
)


@pytest.mark.parametrize(
    "error_class, status_code, code",
    [
        (RelayError, 500, "INTERNAL_ERROR"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (TooManyRequestsError, 429, "TOO_MANY_REQUESTS"),
        (UpstreamError, 502, "API_ERROR"),
        (UpstreamTimeoutError, 504, "TIMEOUT"),
    ],
)
def test_to_http_exception(error_class: type[RelayError], status_code: int, code: str) -> None:
    """Test the conversion of relay errors into HTTP exceptions."""
    error = error_class("something went wrong")
    assert str(error) == "something went wrong"

    exc = error.to_http_exception()
    assert isinstance(exc, HTTPException)
    assert exc.status_code == status_code
    assert isinstance(exc.detail, dict)
    assert exc.detail["cause"] == "something went wrong"
    assert exc.detail["code"] == code
