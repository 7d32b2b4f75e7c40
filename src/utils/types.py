"""Common types for the project."""

from typing import Any, Protocol


class Singleton(type):
    """Metaclass for Singleton support."""

    _instances = {}  # type: ignore

    def __call__(cls, *args, **kwargs):  # type: ignore
        """Ensure a single instance is created."""
        if cls not in cls._instances:
            cls._instances[cls] = super(Singleton, cls).__call__(*args, **kwargs)
        return cls._instances[cls]


class ConversationTitleStore(Protocol):
    """Persistence collaborator mutated by auto-naming."""

    def update_title(self, user_id: str, conversation_id: str, title: str) -> None:
        """Persist a title and clear the untitled and first-message flags."""

    def mark_started(self, user_id: str, conversation_id: str) -> None:
        """Clear the untitled and first-message flags, keeping the title."""


JSONObject = dict[str, Any]
