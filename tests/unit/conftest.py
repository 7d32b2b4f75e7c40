"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from typing import Iterable

import pytest

from configuration import AppConfig
from tests.unit.utils.relay_helpers import make_config_dict


@pytest.fixture(name="app_config")
def app_config_fixture() -> Iterable[AppConfig]:
    """Load a minimal configuration and reset it after the test."""
    cfg = AppConfig()
    cfg.init_from_dict(make_config_dict())
    yield cfg
    cfg._configuration = None  # pylint: disable=protected-access
