"""Resolution of the gateway credential used for a caller.

Order of the chain: the caller's stored credential, the credential carried in
the request, the service credential from configuration.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pydantic import SecretStr

import constants
from utils.errors import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCredential:
    """Credential chosen for one relayed request."""

    api_key: SecretStr
    label: str
    source: str


class CredentialStore(ABC):
    """Base class for stores holding per-caller gateway credentials."""

    @abstractmethod
    async def get_api_key(self, user_id: str) -> Optional[SecretStr]:
        """Return the caller's stored credential, None if there is none."""

    @abstractmethod
    async def get_active_label(self, user_id: str) -> Optional[str]:
        """Return the display label of the caller's active credential."""


class NoopCredentialStore(CredentialStore):
    """Store used when credentials are not kept server side."""

    async def get_api_key(self, user_id: str) -> Optional[SecretStr]:
        """Report that the caller has no stored credential."""
        return None

    async def get_active_label(self, user_id: str) -> Optional[str]:
        """Report that the caller has no labelled credential."""
        return None


async def resolve_credential(
    store: CredentialStore,
    user_id: str,
    request_key: Optional[SecretStr],
    service_key: Optional[SecretStr],
) -> ResolvedCredential:
    """Walk the credential chain for the caller.

    Raises:
        UnauthorizedError: no link of the chain yields a credential.
    """
    stored_key = await store.get_api_key(user_id)
    if stored_key is not None and stored_key.get_secret_value():
        label = await store.get_active_label(user_id)
        logger.debug("Using stored credential of user %s", user_id)
        return ResolvedCredential(
            stored_key, label or constants.UNKNOWN_CREDENTIAL_LABEL, "store"
        )

    if request_key is not None and request_key.get_secret_value():
        label = await store.get_active_label(user_id)
        logger.debug("Using credential carried in the request of user %s", user_id)
        return ResolvedCredential(
            request_key, label or constants.UNKNOWN_CREDENTIAL_LABEL, "request"
        )

    if service_key is not None and service_key.get_secret_value():
        logger.debug("Using service credential for user %s", user_id)
        return ResolvedCredential(
            service_key, constants.SERVICE_CREDENTIAL_LABEL, "service"
        )

    logger.warning("No credential available for user %s", user_id)
    raise UnauthorizedError(f"No API key available for user {user_id}")
