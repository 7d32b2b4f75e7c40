"""Conversation auto-naming from the first model response."""

import logging
import re
from typing import Optional

import constants
from models.stream import NamingResult
from utils.types import ConversationTitleStore

logger = logging.getLogger(__name__)

NAME_TAG_PATTERN = re.compile(r"<name>(.+?)</name>", re.IGNORECASE)
CONTROL_CHARACTERS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
WHITESPACE_RUN = re.compile(r"\s+")


def clean_title(title: str) -> str:
    """Remove control characters, collapse whitespace, then clamp the length."""
    title = CONTROL_CHARACTERS.sub("", title)
    title = WHITESPACE_RUN.sub(" ", title).strip()
    if len(title) > constants.CHAT_NAME_MAX_LENGTH:
        keep = constants.CHAT_NAME_MAX_LENGTH - len(constants.CHAT_NAME_ELLIPSIS)
        title = title[:keep].rstrip() + constants.CHAT_NAME_ELLIPSIS
    return title


def extract_chat_name(response: str) -> Optional[NamingResult]:
    """Extract the title tag from the full response, None when there is none."""
    match = NAME_TAG_PATTERN.search(response)
    if match is None:
        return None
    title = clean_title(match.group(1))
    if not title:
        return None
    cleaned = NAME_TAG_PATTERN.sub("", response).strip()
    return NamingResult(chat_name=title, cleaned_response=cleaned)


def process_auto_naming(
    store: ConversationTitleStore,
    user_id: str,
    conversation_id: str,
    full_response: str,
) -> Optional[NamingResult]:
    """Persist the extracted title, or just mark the conversation as started.

    Failures are logged and never propagated.
    """
    try:
        result = extract_chat_name(full_response)
        if result is not None:
            store.update_title(user_id, conversation_id, result.chat_name)
            logger.info(
                "Conversation %s named '%s'", conversation_id, result.chat_name
            )
            return result

        logger.warning("No title found in response of conversation %s", conversation_id)
        store.mark_started(user_id, conversation_id)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Auto-naming of conversation %s failed", conversation_id)
        try:
            store.mark_started(user_id, conversation_id)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception(
                "Unable to mark conversation %s as started", conversation_id
            )
    return None
