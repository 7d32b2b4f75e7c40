"""Utility functions for metrics handling."""

import metrics
from models.stream import UsageRecord


def update_llm_token_count_from_usage(model: str, usage: UsageRecord) -> None:
    """Update token and cost counters from a normalized usage record."""
    metrics.llm_token_sent_total.labels(model).inc(usage.prompt_tokens)
    metrics.llm_token_received_total.labels(model).inc(usage.completion_tokens)
    metrics.llm_cost_total.labels(model).inc(usage.cost)
