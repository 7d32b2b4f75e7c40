"""Unit tests for app.database module."""

# pylint: disable=protected-access

from pathlib import Path
from typing import Generator

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import Session

from app import database
from models.config import PostgreSQLDatabaseConfiguration, SQLiteDatabaseConfiguration
from utils.checks import InvalidConfigurationError


@pytest.fixture(name="reset_database_state")
def reset_database_state_fixture() -> Generator:
    """Keep the module level engine untouched by the test."""
    original = database.engine, database.session_local
    database.engine = None
    database.session_local = None
    yield
    database.engine, database.session_local = original


@pytest.fixture(name="postgres_config")
def postgres_config_fixture() -> PostgreSQLDatabaseConfiguration:
    """PostgreSQL configuration with a non default port."""
    return PostgreSQLDatabaseConfiguration(
        host="db.local",
        port=5433,
        db="relay",
        user="relay",
        password="secret",
    )


@pytest.mark.usefixtures("reset_database_state")
def test_accessors_before_initialization() -> None:
    """Test that engine and session are unavailable before initialization."""
    with pytest.raises(RuntimeError, match="Database engine not initialized"):
        database.get_engine()
    with pytest.raises(RuntimeError, match="Database session not initialized"):
        database.get_session()


@pytest.mark.usefixtures("reset_database_state")
def test_accessors_after_initialization(mocker: MockerFixture) -> None:
    """Test that the accessors hand out the module level engine and sessions."""
    mock_engine = mocker.MagicMock(spec=Engine)
    mock_session = mocker.MagicMock(spec=Session)
    database.engine = mock_engine
    database.session_local = mocker.MagicMock(return_value=mock_session)

    assert database.get_engine() is mock_engine
    assert database.get_session() is mock_session


def test_create_tables(mocker: MockerFixture) -> None:
    """Test create_tables creates the metadata on the engine."""
    mock_base = mocker.patch("app.database.Base")
    mock_engine = mocker.MagicMock(spec=Engine)
    mocker.patch("app.database.get_engine", return_value=mock_engine)

    database.create_tables()

    mock_base.metadata.create_all.assert_called_once_with(mock_engine)


def test_sqlite_url(tmp_path: Path) -> None:
    """Test the URL of a SQLite file in an existing directory."""
    db_path = tmp_path / "relay.db"
    url = database.database_url(SQLiteDatabaseConfiguration(db_path=str(db_path)))

    assert url.get_backend_name() == "sqlite"
    assert url.database == str(db_path)


def test_sqlite_url_missing_directory() -> None:
    """Test that a SQLite file in a missing directory is rejected."""
    config = SQLiteDatabaseConfiguration(db_path="/nonexistent/path/relay.db")
    with pytest.raises(InvalidConfigurationError, match="is not a directory"):
        database.database_url(config)


def test_postgres_url(postgres_config: PostgreSQLDatabaseConfiguration) -> None:
    """Test the URL built for PostgreSQL, the password stays hidden when rendered."""
    url = database.database_url(postgres_config)

    assert url.drivername == "postgresql+psycopg2"
    assert (url.username, url.host, url.port, url.database) == (
        "relay",
        "db.local",
        5433,
        "relay",
    )
    assert url.password == "secret"
    assert url.query == {"sslmode": "prefer"}
    assert "secret" not in str(url)


def test_sqlite_engine(tmp_path: Path) -> None:
    """Test that a real SQLite engine is created."""
    url = database.database_url(
        SQLiteDatabaseConfiguration(db_path=str(tmp_path / "relay.db"))
    )
    engine = database._create_engine(url)

    assert isinstance(engine, Engine)
    assert engine.url.database == str(tmp_path / "relay.db")


def test_engine_creation_failure(
    mocker: MockerFixture, postgres_config: PostgreSQLDatabaseConfiguration
) -> None:
    """Test that engine creation failures are wrapped."""
    mocker.patch("app.database.create_engine", side_effect=Exception("no driver"))

    with pytest.raises(
        RuntimeError, match="Database engine creation failed for postgresql: no driver"
    ):
        database._create_engine(database.database_url(postgres_config))


@pytest.mark.usefixtures("reset_database_state")
@pytest.mark.parametrize("debug", [False, True])
def test_initialize_database(
    mocker: MockerFixture, postgres_config: PostgreSQLDatabaseConfiguration, debug: bool
) -> None:
    """Test that initialization builds the engine and the session factory."""
    mock_configuration = mocker.patch("app.database.configuration")
    mock_configuration.database_configuration.db_type = "postgres"
    mock_configuration.database_configuration.config = postgres_config
    mock_create_engine = mocker.patch("app.database.create_engine")
    mock_sessionmaker = mocker.patch("app.database.sessionmaker")
    mocker.patch("app.database.logger").isEnabledFor.return_value = debug

    database.initialize_database()

    url = mock_create_engine.call_args.args[0]
    assert url.host == "db.local"
    assert mock_create_engine.call_args.kwargs == {
        "echo": debug,
        "pool_pre_ping": True,
    }
    mock_sessionmaker.assert_called_once_with(
        autocommit=False, autoflush=False, bind=mock_create_engine.return_value
    )
    assert database.engine is mock_create_engine.return_value
    assert database.session_local is mock_sessionmaker.return_value
