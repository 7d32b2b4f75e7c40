"""Metrics module for the chat relay."""

from prometheus_client import (
    Counter,
    Histogram,
)

# Counter to track REST API calls
# This will be used to count how many times each API endpoint is called
# and the status code of the response
rest_api_calls_total = Counter(
    "cr_rest_api_calls_total", "REST API calls counter", ["path", "status_code"]
)

# Histogram to measure response durations
# This will be used to track how long it takes to handle requests
response_duration_seconds = Histogram(
    "cr_response_duration_seconds", "Response durations", ["path"]
)

# Metric that counts how many LLM calls were made for each model
llm_calls_total = Counter("cr_llm_calls_total", "LLM calls counter", ["model"])

# Metric that counts how many LLM calls failed before streaming started
llm_calls_failures_total = Counter("cr_llm_calls_failures_total", "LLM calls failures")

# Metric that counts error chunks sent by the gateway in the middle of a stream
llm_midstream_errors_total = Counter(
    "cr_llm_midstream_errors_total", "Errors reported inside the upstream stream"
)

# Metric that counts data lines that could not be decoded
stream_chunk_parse_failures_total = Counter(
    "cr_stream_chunk_parse_failures_total", "Malformed upstream stream chunks"
)

llm_token_sent_total = Counter("cr_llm_token_sent_total", "LLM tokens sent", ["model"])

llm_token_received_total = Counter(
    "cr_llm_token_received_total", "LLM tokens received", ["model"]
)

llm_cost_total = Counter("cr_llm_cost_total", "Accumulated LLM cost", ["model"])
