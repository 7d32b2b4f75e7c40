"""Configuration loader."""

import logging
import os
import re
from typing import Any, Optional

import yaml
from models.config import (
    Configuration,
    Customization,
    DatabaseConfiguration,
    DocumentConversionConfiguration,
    RateLimitConfiguration,
    ServiceConfiguration,
    UpstreamConfiguration,
)


logger = logging.getLogger(__name__)


class LogicError(Exception):
    """Error in application logic."""


ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def _substitute_env_var(match: re.Match) -> str:
    name, default = match.group(1), match.group(2)
    value = os.environ.get(name)
    if value is not None:
        return value
    if default is None:
        raise ValueError(f"Environment variable '{name}' is not set")
    return default


def replace_env_vars(value: Any) -> Any:
    """Substitute ${VAR} and ${VAR:-default} references in a loaded YAML document."""
    if isinstance(value, dict):
        return {k: replace_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [replace_env_vars(v) for v in value]
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_substitute_env_var, value)
    return value


class AppConfig:
    """Singleton class to load and store the configuration."""

    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "AppConfig":
        """Create a new instance of the class."""
        if not isinstance(cls._instance, cls):
            cls._instance = super().__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        """Initialize the class instance."""
        self._configuration: Optional[Configuration] = None

    def load_configuration(self, filename: str) -> None:
        """Load configuration from YAML file."""
        with open(filename, encoding="utf-8") as fin:
            config_dict = yaml.safe_load(fin)
            config_dict = replace_env_vars(config_dict)
            logger.info("Loaded configuration from %s", filename)
            self.init_from_dict(config_dict)

    def init_from_dict(self, config_dict: dict[Any, Any]) -> None:
        """Initialize configuration from a dictionary."""
        self._configuration = Configuration(**config_dict)

    def is_loaded(self) -> bool:
        """Check whether configuration has been loaded."""
        return self._configuration is not None

    @property
    def configuration(self) -> Configuration:
        """Return the whole configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration

    @property
    def service_configuration(self) -> ServiceConfiguration:
        """Return service configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.service

    @property
    def upstream_configuration(self) -> UpstreamConfiguration:
        """Return upstream gateway configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.upstream

    @property
    def customization(self) -> Optional[Customization]:
        """Return customization configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.customization

    @property
    def rate_limit_configuration(self) -> RateLimitConfiguration:
        """Return rate limit configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.rate_limit

    @property
    def document_conversion_configuration(self) -> DocumentConversionConfiguration:
        """Return document conversion configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.document_conversion

    @property
    def database_configuration(self) -> DatabaseConfiguration:
        """Return database configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.database


configuration: AppConfig = AppConfig()
