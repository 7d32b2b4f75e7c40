"""Unit tests for the app/main.py lifespan."""

import importlib
from types import ModuleType
from typing import Any, Iterable

import pytest
from pytest_mock import MockerFixture

import constants
from configuration import AppConfig
from tests.unit.utils.relay_helpers import make_config_dict


@pytest.fixture(name="main_module")
def main_module_fixture() -> Iterable[ModuleType]:
    """Import the application module with configuration loaded."""
    AppConfig().init_from_dict(make_config_dict())
    yield importlib.import_module("app.main")
    AppConfig()._configuration = None  # pylint: disable=protected-access


def setup_lifespan_mocks(mocker: MockerFixture) -> dict[str, Any]:
    """Replace startup collaborators with mocks."""
    holder = mocker.MagicMock()
    holder.load = mocker.AsyncMock()
    holder.close = mocker.AsyncMock()
    return {
        "app_state": mocker.patch("app.main.app_state"),
        "initialize_database": mocker.patch("app.main.initialize_database"),
        "create_tables": mocker.patch("app.main.create_tables"),
        "holder": mocker.patch("app.main.UpstreamClientHolder", return_value=holder).return_value,
    }


def test_app_routes(main_module: ModuleType) -> None:
    """Test that the relay, health and metrics routes are served."""
    assert "/v1/chat" in main_module.app_routes_paths
    assert "/readiness" in main_module.app_routes_paths
    assert "/liveness" in main_module.app_routes_paths
    assert "/metrics" in main_module.app_routes_paths
    assert main_module.app.title == "test service - OpenAPI"


@pytest.mark.asyncio
async def test_lifespan_success(
    mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch, main_module: ModuleType
) -> None:
    """Test that every startup step is tracked and the session is closed."""
    monkeypatch.delenv(constants.CONFIG_PATH_ENV_VARIABLE, raising=False)
    mocks = setup_lifespan_mocks(mocker)

    async with main_module.lifespan(main_module.app):
        mocks["initialize_database"].assert_called_once()
        mocks["create_tables"].assert_called_once()
        mocks["holder"].load.assert_awaited_once()
        mocks["app_state"].mark_check_complete.assert_any_call("configuration_loaded", True)
        mocks["app_state"].mark_check_complete.assert_any_call("database_initialized", True)
        mocks["app_state"].mark_check_complete.assert_any_call(
            "upstream_client_initialized", True
        )
        mocks["app_state"].mark_initialization_complete.assert_called_once()
        mocks["holder"].close.assert_not_awaited()

    mocks["holder"].close.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_database_failure(
    mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch, main_module: ModuleType
) -> None:
    """Test that a database failure is recorded and startup continues."""
    monkeypatch.delenv(constants.CONFIG_PATH_ENV_VARIABLE, raising=False)
    mocks = setup_lifespan_mocks(mocker)
    mocks["initialize_database"].side_effect = FileNotFoundError("no such directory")

    async with main_module.lifespan(main_module.app):
        mocks["app_state"].mark_check_complete.assert_any_call(
            "database_initialized", False, "no such directory"
        )
        mocks["create_tables"].assert_not_called()
        mocks["holder"].load.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_loads_configuration_from_environment(
    mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch, main_module: ModuleType
) -> None:
    """Test that workers load the configuration file named by the environment."""
    monkeypatch.setenv(constants.CONFIG_PATH_ENV_VARIABLE, "chat-relay.yaml")
    setup_lifespan_mocks(mocker)
    mock_load = mocker.patch.object(main_module.configuration, "load_configuration")

    async with main_module.lifespan(main_module.app):
        mock_load.assert_called_once_with("chat-relay.yaml")
