"""Unit tests for functions defined in metrics/utils.py"""

from pytest_mock import MockerFixture

from metrics.utils import update_llm_token_count_from_usage
from models.stream import UsageRecord


def test_update_llm_token_count_from_usage(mocker: MockerFixture) -> None:
    """Test that token and cost counters are incremented per model."""
    mock_sent = mocker.patch("metrics.llm_token_sent_total")
    mock_received = mocker.patch("metrics.llm_token_received_total")
    mock_cost = mocker.patch("metrics.llm_cost_total")

    usage = UsageRecord(
        prompt_tokens=120, completion_tokens=30, total_tokens=150, cost=0.25,
        api_key_name="default",
    )
    update_llm_token_count_from_usage("anthropic/claude-sonnet-4", usage)

    mock_sent.labels.assert_called_once_with("anthropic/claude-sonnet-4")
    mock_sent.labels.return_value.inc.assert_called_once_with(120)
    mock_received.labels.assert_called_once_with("anthropic/claude-sonnet-4")
    mock_received.labels.return_value.inc.assert_called_once_with(30)
    mock_cost.labels.return_value.inc.assert_called_once_with(0.25)
