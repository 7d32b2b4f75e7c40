"""Unit tests for the /health REST API endpoint."""

from typing import Iterable

import pytest
from pytest_mock import MockerFixture

from app.endpoints.health import (
    check_readiness,
    liveness_probe_get_method,
    readiness_probe_get_method,
)
from app.state import STARTUP_CHECKS, ApplicationState
from configuration import AppConfig


@pytest.fixture(name="ready_state")
def ready_state_fixture(mocker: MockerFixture) -> ApplicationState:
    """Replace the global state with a fully initialized one."""
    state = ApplicationState()
    for check in STARTUP_CHECKS:
        state.mark_check_complete(check, True)
    state.mark_initialization_complete()
    mocker.patch("app.endpoints.health.app_state", state)
    return state


@pytest.fixture(autouse=True)
def _reset_app_config() -> Iterable[None]:
    yield
    AppConfig()._configuration = None  # pylint: disable=protected-access


@pytest.mark.asyncio
async def test_readiness_probe_success(
    mocker: MockerFixture, app_config: AppConfig, ready_state: ApplicationState
) -> None:
    """Test the readiness endpoint handler when the service is ready."""
    assert app_config.is_loaded()
    assert ready_state.is_fully_initialized
    mock_response = mocker.Mock()
    mock_response.status_code = 200

    response = await readiness_probe_get_method(response=mock_response)

    assert response.ready is True
    assert response.reason == "Service is ready"
    assert mock_response.status_code == 200


@pytest.mark.asyncio
async def test_readiness_probe_without_configuration(
    mocker: MockerFixture, ready_state: ApplicationState
) -> None:
    """Test the readiness endpoint handler before configuration is loaded."""
    assert ready_state.is_fully_initialized
    AppConfig()._configuration = None  # pylint: disable=protected-access
    mock_response = mocker.Mock()

    response = await readiness_probe_get_method(response=mock_response)

    assert response.ready is False
    assert response.reason == "Configuration not loaded"
    assert mock_response.status_code == 503


def test_readiness_with_failed_check(mocker: MockerFixture, app_config: AppConfig) -> None:
    """Test the reason reported for a failed startup check."""
    assert app_config.is_loaded()
    state = ApplicationState()
    state.mark_check_complete("configuration_loaded", True)
    state.mark_check_complete("database_initialized", False, "disk full")
    mocker.patch("app.endpoints.health.app_state", state)

    assert check_readiness() == (False, "Initialization failed: database_initialized: disk full")


def test_readiness_with_pending_checks(mocker: MockerFixture, app_config: AppConfig) -> None:
    """Test the reason reported while startup checks are pending."""
    assert app_config.is_loaded()
    state = ApplicationState()
    state.mark_check_complete("configuration_loaded", True)
    mocker.patch("app.endpoints.health.app_state", state)

    assert check_readiness() == (
        False,
        "Incomplete initialization: database initialized, upstream client initialized",
    )


def test_readiness_before_completion(mocker: MockerFixture, app_config: AppConfig) -> None:
    """Test the reason reported when checks passed but startup did not finish."""
    assert app_config.is_loaded()
    state = ApplicationState()
    for check in STARTUP_CHECKS:
        state.mark_check_complete(check, True)
    mocker.patch("app.endpoints.health.app_state", state)

    assert check_readiness() == (False, "Application initialization not complete")


@pytest.mark.asyncio
async def test_liveness_probe() -> None:
    """Test the liveness endpoint handler."""
    response = await liveness_probe_get_method()
    assert response is not None
    assert response.alive is True
