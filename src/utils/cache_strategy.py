"""Placement of prompt cache breakpoints."""

from typing import Optional, Sequence

import constants


def is_cache_capable(model: str) -> bool:
    """Check whether the model belongs to a family supporting prompt caching."""
    model_id = model.lower()
    return any(family in model_id for family in constants.CACHE_CAPABLE_MODEL_FAMILIES)


def should_use_cache(model: str, history: Sequence[object]) -> bool:
    """Cache breakpoints are only placed for capable models once history exists."""
    return is_cache_capable(model) and len(history) > 0


def history_cache_boundary(
    history_length: int, recent_window: int = constants.DEFAULT_RECENT_HISTORY_WINDOW
) -> Optional[int]:
    """Return the index of the last old history message, None when all are recent.

    The last `recent_window` messages stay uncached so that the cached prefix
    does not change with every new turn.
    """
    index = history_length - recent_window - 1
    if index < 0:
        return None
    return index
