"""Assembly of multimodal message bodies from text and attachments."""

import logging
import re
from typing import Any, Optional, Sequence, Union

import constants
from models.requests import Attachment
from services.document_converter import DocumentConverter

logger = logging.getLogger(__name__)

ContentPart = dict[str, Any]
MessageContent = Union[str, list[ContentPart]]

DOCX_SUFFIX = re.compile(r"\.docx$", re.IGNORECASE)


def text_part(text: str, cache: bool = False) -> ContentPart:
    """Return a text content part, optionally marked as a cache breakpoint."""
    part: ContentPart = {"type": "text", "text": text}
    if cache:
        part["cache_control"] = dict(constants.CACHE_CONTROL_EPHEMERAL)
    return part


def add_cache_directive(parts: list[ContentPart]) -> bool:
    """Attach a cache directive to the last text part.

    Returns False when the list holds no text part at all.
    """
    for part in reversed(parts):
        if part.get("type") == "text":
            part["cache_control"] = dict(constants.CACHE_CONTROL_EPHEMERAL)
            return True
    return False


def file_part(filename: str, file_data: str) -> ContentPart:
    """Return a file reference content part."""
    return {"type": "file", "file": {"filename": filename, "file_data": file_data}}


async def attachment_part(
    attachment: Attachment, converter: DocumentConverter
) -> Optional[ContentPart]:
    """Return the content part for one attachment, None when it is skipped."""
    mime_type = attachment.type

    if mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": attachment.url}}

    if mime_type in (constants.MIME_TYPE_PDF, constants.MIME_TYPE_TEXT):
        return file_part(attachment.name, attachment.url)

    if mime_type == constants.MIME_TYPE_DOCX:
        result = await converter.convert_to_pdf(attachment.url, attachment.name)
        if result.success and result.pdf_base64:
            return file_part(
                DOCX_SUFFIX.sub(".pdf", attachment.name),
                f"data:{constants.MIME_TYPE_PDF};base64,{result.pdf_base64}",
            )
        logger.error(
            "Failed to convert %s to PDF, forwarding original document: %s",
            attachment.name,
            result.error,
        )
        return file_part(attachment.name, attachment.url)

    if mime_type.startswith("audio/"):
        if not attachment.base64:
            logger.warning("Audio attachment %s has no inline data, skipped", attachment.name)
            return None
        audio_format = "wav" if "wav" in mime_type else "mp3"
        return {
            "type": "input_audio",
            "input_audio": {"data": attachment.base64, "format": audio_format},
        }

    logger.debug("Attachment %s of type %s is not forwarded", attachment.name, mime_type)
    return None


async def build_message_content(
    text: str,
    attachments: Optional[Sequence[Attachment]],
    converter: DocumentConverter,
    add_cache_control: bool = False,
) -> MessageContent:
    """Build the body of one message.

    Plain text is returned as-is when there is nothing to attach and no cache
    breakpoint is requested. Otherwise the body is a list starting with the
    text part, followed by one part per forwarded attachment, in input order.
    """
    if not attachments and not add_cache_control:
        return text

    parts: list[ContentPart] = [text_part(text)]
    for attachment in attachments or []:
        part = await attachment_part(attachment, converter)
        if part is not None:
            parts.append(part)

    if add_cache_control:
        add_cache_directive(parts)
    return parts
