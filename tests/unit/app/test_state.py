"""Unit tests for the application initialization state."""

from app.state import STARTUP_CHECKS, ApplicationState


def test_initial_state() -> None:
    """Test that a fresh state is not initialized."""
    state = ApplicationState()
    status = state.initialization_status
    assert state.is_fully_initialized is False
    assert status["complete"] is False
    assert status["checks"] == dict.fromkeys(STARTUP_CHECKS, False)
    assert status["errors"] == []


def test_fully_initialized() -> None:
    """Test that all checks and the completion mark are required."""
    state = ApplicationState()
    for check in STARTUP_CHECKS:
        state.mark_check_complete(check, True)
    assert state.is_fully_initialized is False

    state.mark_initialization_complete()
    assert state.is_fully_initialized is True


def test_failed_check() -> None:
    """Test that a failed check records its error."""
    state = ApplicationState()
    for check in STARTUP_CHECKS:
        state.mark_check_complete(check, True)
    state.mark_check_complete("database_initialized", False, "disk full")
    state.mark_initialization_complete()

    assert state.is_fully_initialized is False
    assert state.initialization_status["errors"] == ["database_initialized: disk full"]


def test_unknown_check_is_ignored() -> None:
    """Test that unknown check names do not change the state."""
    state = ApplicationState()
    state.mark_check_complete("vector_store_connected", True)
    assert "vector_store_connected" not in state.initialization_status["checks"]


def test_status_is_a_copy() -> None:
    """Test that the reported status can not mutate the state."""
    state = ApplicationState()
    state.initialization_status["checks"]["configuration_loaded"] = True
    assert state.initialization_status["checks"]["configuration_loaded"] is False
