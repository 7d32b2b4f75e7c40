"""Normalization of gateway usage reports."""

from typing import Any, Optional

from models.stream import UsageRecord


def _number(value: Any) -> float:
    """Return a non-negative number, zero for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(value, 0)


def _optional_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return max(value, 0)


def _nested(raw: dict[str, Any], key: str, field: str) -> Any:
    details = raw.get(key)
    if isinstance(details, dict):
        return details.get(field)
    return None


def normalize_usage(raw: dict[str, Any], api_key_name: str) -> UsageRecord:
    """Build a usage record from a raw usage object.

    The total falls back to prompt plus completion tokens and then to the
    provider native token counts. Missing counters default to zero.
    """
    prompt_tokens = int(_number(raw.get("prompt_tokens")))
    completion_tokens = int(_number(raw.get("completion_tokens")))
    total_tokens = int(
        _number(raw.get("total_tokens"))
        or prompt_tokens + completion_tokens
        or _number(raw.get("native_tokens_prompt"))
        + _number(raw.get("native_tokens_completion"))
    )
    cost = _number(raw.get("cost")) or _number(raw.get("total_cost"))

    reasoning_tokens = _optional_number(
        _nested(raw, "completion_tokens_details", "reasoning_tokens")
    )
    cached_tokens = _optional_number(
        _nested(raw, "prompt_tokens_details", "cached_tokens")
    )

    return UsageRecord(
        cost=cost,
        total_tokens=total_tokens,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        reasoning_tokens=int(reasoning_tokens) if reasoning_tokens is not None else None,
        cached_tokens=int(cached_tokens) if cached_tokens is not None else None,
        upstream_cost=_optional_number(
            _nested(raw, "cost_details", "upstream_inference_cost")
        ),
        api_key_name=api_key_name,
        raw=raw,
    )
