"""Model with service configuration."""

from pathlib import Path
from typing import Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    FilePath,
    NonNegativeInt,
    PositiveInt,
    SecretStr,
    model_validator,
)
from typing_extensions import Literal, Self

import constants
from utils import checks


class ConfigurationBase(BaseModel):
    """Base class for all configuration models that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class CORSConfiguration(ConfigurationBase):
    """CORS configuration."""

    allow_origins: list[str] = [
        "*"
    ]  # not AnyHttpUrl: we need to support "*" that is not valid URL
    allow_credentials: bool = False
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @model_validator(mode="after")
    def check_cors_configuration(self) -> Self:
        """Check CORS configuration."""
        # credentials are not allowed with wildcard origins per CORS/Fetch spec.
        # see https://fastapi.tiangolo.com/tutorial/cors/
        if self.allow_credentials and "*" in self.allow_origins:
            raise ValueError(
                "Invalid CORS configuration: allow_credentials can not be set to true when "
                "allow origins contains '*' wildcard."
                "Use explicit origins or disable credential."
            )
        return self


class ServiceConfiguration(ConfigurationBase):
    """Service configuration."""

    host: str = "localhost"
    port: PositiveInt = 8080
    workers: PositiveInt = 1
    color_log: bool = True
    access_log: bool = True
    cors: CORSConfiguration = Field(default_factory=CORSConfiguration)

    @model_validator(mode="after")
    def check_service_configuration(self) -> Self:
        """Check service configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        return self


class UpstreamConfiguration(ConfigurationBase):
    """LLM gateway the chat requests are relayed to."""

    url: AnyHttpUrl = AnyHttpUrl(constants.DEFAULT_UPSTREAM_URL)
    # service-level credential, the last link of the credential chain
    api_key: Optional[SecretStr] = None
    referer: Optional[str] = None
    title: Optional[str] = None
    timeout: PositiveInt = constants.DEFAULT_UPSTREAM_TIMEOUT
    default_model: str = constants.DEFAULT_MODEL
    default_max_tokens: PositiveInt = constants.DEFAULT_MAX_TOKENS

    def extra_headers(self) -> dict[str, str]:
        """Return attribution headers sent with every upstream call."""
        headers: dict[str, str] = {}
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers


class Customization(ConfigurationBase):
    """Service customization."""

    system_prompt_path: Optional[FilePath] = None
    system_prompt: Optional[str] = None
    recent_history_window: NonNegativeInt = constants.DEFAULT_RECENT_HISTORY_WINDOW

    @model_validator(mode="after")
    def check_customization_model(self) -> Self:
        """Load the default system prompt from file when configured."""
        if self.system_prompt_path is not None:
            self.system_prompt = checks.read_prompt_file(
                self.system_prompt_path, "system prompt"
            )
        return self


class RateLimitConfiguration(ConfigurationBase):
    """Per-caller fixed window rate limiting."""

    enabled: bool = True
    max_requests: PositiveInt = constants.DEFAULT_RATE_LIMIT_MAX_REQUESTS
    window: PositiveInt = constants.DEFAULT_RATE_LIMIT_WINDOW
    max_entries: PositiveInt = constants.DEFAULT_RATE_LIMIT_MAX_ENTRIES


class DocumentConversionConfiguration(ConfigurationBase):
    """External service converting word-processor documents to PDF."""

    url: Optional[AnyHttpUrl] = None
    timeout: PositiveInt = 120


class SQLiteDatabaseConfiguration(ConfigurationBase):
    """SQLite database configuration."""

    db_path: str


class PostgreSQLDatabaseConfiguration(ConfigurationBase):
    """PostgreSQL database configuration."""

    host: str = "localhost"
    port: PositiveInt = 5432
    db: str
    user: str
    password: SecretStr
    ssl_mode: str = "prefer"

    @model_validator(mode="after")
    def check_postgres_configuration(self) -> Self:
        """Check PostgreSQL configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        return self


class DatabaseConfiguration(ConfigurationBase):
    """Database configuration."""

    sqlite: Optional[SQLiteDatabaseConfiguration] = None
    postgres: Optional[PostgreSQLDatabaseConfiguration] = None

    @model_validator(mode="after")
    def check_database_configuration(self) -> Self:
        """Check that exactly one database type is configured."""
        total_configured_dbs = sum([self.sqlite is not None, self.postgres is not None])

        if total_configured_dbs == 0:
            # Default to SQLite in a (hopefully) tmpfs if no database configuration is provided.
            sqlite_file_name = "/tmp/chat-relay.db"
            self.sqlite = SQLiteDatabaseConfiguration(db_path=sqlite_file_name)
        elif total_configured_dbs > 1:
            raise ValueError("Only one database configuration can be provided")

        return self

    @property
    def db_type(self) -> Literal["sqlite", "postgres"]:
        """Return the configured database type."""
        if self.sqlite is not None:
            return "sqlite"
        if self.postgres is not None:
            return "postgres"
        raise ValueError("No database configuration found")

    @property
    def config(self) -> SQLiteDatabaseConfiguration | PostgreSQLDatabaseConfiguration:
        """Return the active database configuration."""
        if self.sqlite is not None:
            return self.sqlite
        if self.postgres is not None:
            return self.postgres
        raise ValueError("No database configuration found")


class Configuration(ConfigurationBase):
    """Global service configuration."""

    name: str
    service: ServiceConfiguration = Field(default_factory=ServiceConfiguration)
    upstream: UpstreamConfiguration = Field(default_factory=UpstreamConfiguration)
    customization: Optional[Customization] = None
    rate_limit: RateLimitConfiguration = Field(default_factory=RateLimitConfiguration)
    document_conversion: DocumentConversionConfiguration = Field(
        default_factory=DocumentConversionConfiguration
    )
    database: DatabaseConfiguration = Field(default_factory=DatabaseConfiguration)

    def dump(self, filename: str | Path = "configuration.json") -> None:
        """Dump actual configuration into JSON file."""
        with open(filename, "w", encoding="utf-8") as fout:
            fout.write(self.model_dump_json(indent=4))
