"""Upstream gateway HTTP client retrieval."""

import logging

from typing import Optional

import aiohttp

from models.config import UpstreamConfiguration
from utils.types import Singleton


logger = logging.getLogger(__name__)


class UpstreamClientHolder(metaclass=Singleton):
    """Container for the aiohttp session shared by all relayed streams."""

    _session: Optional[aiohttp.ClientSession] = None

    async def load(self, upstream_config: UpstreamConfiguration) -> None:
        """Open the shared session according to configuration."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        logger.info("Using LLM gateway at %s", upstream_config.url)
        self._session = aiohttp.ClientSession(
            headers=upstream_config.extra_headers(),
            timeout=aiohttp.ClientTimeout(total=upstream_config.timeout),
        )

    def get_client(self) -> aiohttp.ClientSession:
        """Return an initialised aiohttp session."""
        if not self._session:
            raise RuntimeError(
                "Upstream client has not been initialised. Ensure 'load(..)' has been called."
            )
        return self._session

    async def close(self) -> None:
        """Close the shared session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
