"""Persistence of conversation titles."""

from datetime import datetime, UTC

from app.database import get_session
from log import get_logger
from models.database.conversations import UserConversation

logger = get_logger(__name__)


class SQLConversationTitleStore:
    """Title store backed by the `user_conversation` table."""

    def _update(self, user_id: str, conversation_id: str, **fields: object) -> None:
        with get_session() as session:
            conversation = (
                session.query(UserConversation)
                .filter_by(id=conversation_id, user_id=user_id)
                .first()
            )
            if conversation is None:
                logger.debug(
                    "Creating conversation record %s for user %s",
                    conversation_id,
                    user_id,
                )
                conversation = UserConversation(id=conversation_id, user_id=user_id)
                session.add(conversation)
            for name, value in fields.items():
                setattr(conversation, name, value)
            conversation.updated_at = datetime.now(UTC)
            session.commit()

    def update_title(self, user_id: str, conversation_id: str, title: str) -> None:
        """Persist a title and clear the untitled and first-message flags."""
        self._update(
            user_id,
            conversation_id,
            name=title,
            is_temporary=False,
            is_first_message=False,
        )

    def mark_started(self, user_id: str, conversation_id: str) -> None:
        """Clear the untitled and first-message flags, keeping the title."""
        self._update(
            user_id, conversation_id, is_temporary=False, is_first_message=False
        )
