"""User conversation models."""

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime, func

from models.database.base import Base


class UserConversation(Base):  # pylint: disable=too-few-public-methods
    """Model for storing user conversation metadata touched by auto-naming."""

    __tablename__ = "user_conversation"

    # The conversation ID
    id: Mapped[str] = mapped_column(primary_key=True)

    # The user ID associated with the conversation
    user_id: Mapped[str] = mapped_column(index=True)

    # Visible title, a placeholder until the conversation is named
    name: Mapped[str] = mapped_column(default="")

    # Untitled conversation created implicitly by the first message
    is_temporary: Mapped[bool] = mapped_column(default=True)
    is_first_message: Mapped[bool] = mapped_column(default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),  # pylint: disable=not-callable
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),  # pylint: disable=not-callable
    )
