"""Per-caller fixed window rate limiting."""

from dataclasses import dataclass
from typing import Optional

from cachetools import TTLCache

import constants
from log import get_logger
from models.config import RateLimitConfiguration
from utils.errors import TooManyRequestsError

logger = get_logger(__name__)


@dataclass
class RateLimitRecord:
    """Requests counted in the current window of one caller."""

    count: int
    reset_time: float


class RateLimiter:
    """Fixed window limiter over an injected TTL store.

    The store evicts a caller's record once its window is over (TTL) and
    bounds the number of tracked callers (maxsize).
    """

    def __init__(
        self,
        max_requests: int,
        window: int,
        store: Optional[TTLCache] = None,
    ) -> None:
        """Initialize the limiter."""
        self.max_requests = max_requests
        self.window = window
        if store is None:
            store = TTLCache(maxsize=constants.DEFAULT_RATE_LIMIT_MAX_ENTRIES, ttl=window)
        self.store: TTLCache = store

    @classmethod
    def from_configuration(cls, config: RateLimitConfiguration) -> "RateLimiter":
        """Create a limiter with its own store sized by configuration."""
        return cls(
            max_requests=config.max_requests,
            window=config.window,
            store=TTLCache(maxsize=config.max_entries, ttl=config.window),
        )

    def check(self, key: str) -> None:
        """Count one request for the key.

        Raises:
            TooManyRequestsError: the key already used up its window.
        """
        now = self.store.timer()
        record: Optional[RateLimitRecord] = self.store.get(key)

        if record is None or now >= record.reset_time:
            self.store[key] = RateLimitRecord(count=1, reset_time=now + self.window)
            return

        if record.count >= self.max_requests:
            retry_after = max(int(record.reset_time - now), 1)
            logger.warning("Rate limit exceeded for %s", key)
            raise TooManyRequestsError(
                f"Rate limit of {self.max_requests} requests per {self.window} "
                f"seconds exceeded, retry in {retry_after} seconds"
            )

        # mutate in place, re-inserting would restart the TTL
        record.count += 1
