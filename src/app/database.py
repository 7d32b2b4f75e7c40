"""Database engine holding the conversation records."""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import sessionmaker, Session

from configuration import configuration
from log import get_logger
from models.config import SQLiteDatabaseConfiguration, PostgreSQLDatabaseConfiguration
from models.database.base import Base
from utils.checks import directory_check

logger = get_logger(__name__)

engine: Engine | None = None
session_local: sessionmaker | None = None


def get_engine() -> Engine:
    """Return the engine created by `initialize_database`."""
    if engine is None:
        raise RuntimeError(
            "Database engine not initialized. Call initialize_database() first."
        )
    return engine


def get_session() -> Session:
    """Open a new session bound to the engine."""
    if session_local is None:
        raise RuntimeError(
            "Database session not initialized. Call initialize_database() first."
        )
    return session_local()


def create_tables() -> None:
    """Create the conversation tables when they do not exist yet."""
    Base.metadata.create_all(get_engine())


def database_url(
    config: SQLiteDatabaseConfiguration | PostgreSQLDatabaseConfiguration,
) -> URL:
    """Build the connection URL for the configured database."""
    if isinstance(config, SQLiteDatabaseConfiguration):
        directory_check(Path(config.db_path).parent, "SQLite database directory")
        return URL.create("sqlite", database=config.db_path)
    return URL.create(
        "postgresql+psycopg2",
        username=config.user,
        password=config.password.get_secret_value(),
        host=config.host,
        port=config.port,
        database=config.db,
        query={"sslmode": config.ssl_mode},
    )


def _create_engine(url: URL, **kwargs: Any) -> Engine:
    try:
        return create_engine(url, **kwargs)
    except Exception as e:
        logger.exception("Failed to create %s engine", url.get_backend_name())
        raise RuntimeError(
            f"Database engine creation failed for {url.get_backend_name()}: {e}"
        ) from e


def initialize_database() -> None:
    """Create the engine and session factory from the database configuration."""
    global engine, session_local  # pylint: disable=global-statement

    db_config = configuration.database_configuration
    logger.info("Initialize %s database", db_config.db_type)

    # echo SQL statements only when debugging
    engine = _create_engine(
        database_url(db_config.config),
        echo=logger.isEnabledFor(logging.DEBUG),
        pool_pre_ping=True,
    )
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
