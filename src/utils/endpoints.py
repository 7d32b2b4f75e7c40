"""Utility functions and dependencies for endpoint handlers."""

from typing import Optional

from fastapi import HTTPException, status

from configuration import AppConfig, configuration
from services.credentials import CredentialStore, NoopCredentialStore
from services.document_converter import DocumentConverter, get_document_converter
from utils.conversations import SQLConversationTitleStore
from utils.rate_limit import RateLimiter
from utils.types import ConversationTitleStore

_rate_limiter: Optional[RateLimiter] = None


def check_configuration_loaded(config: AppConfig) -> None:
    """
    Ensure the application configuration object is loaded.

    Raises:
        HTTPException: HTTP 500 Internal Server Error with detail `{"response":
        "Configuration is not loaded"}` when configuration is missing.
    """
    if config is None or not config.is_loaded():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"response": "Configuration is not loaded"},
        )


def get_rate_limiter() -> Optional[RateLimiter]:
    """Return the process wide rate limiter, None when rate limiting is off."""
    global _rate_limiter  # pylint: disable=global-statement
    rate_limit = configuration.rate_limit_configuration
    if not rate_limit.enabled:
        return None
    if _rate_limiter is None:
        _rate_limiter = RateLimiter.from_configuration(rate_limit)
    return _rate_limiter


def reset_rate_limiter() -> None:
    """Forget the rate limiter so it is rebuilt from current configuration."""
    global _rate_limiter  # pylint: disable=global-statement
    _rate_limiter = None


def get_credential_store() -> CredentialStore:
    """Return the store holding per-caller credentials."""
    return NoopCredentialStore()


def get_converter() -> DocumentConverter:
    """Return the document converter matching configuration."""
    return get_document_converter(configuration.document_conversion_configuration)


def get_title_store() -> ConversationTitleStore:
    """Return the store persisting conversation titles."""
    return SQLConversationTitleStore()
