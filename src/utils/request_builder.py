"""Assembly of the outbound request sent to the LLM gateway."""

import logging
from typing import Any, Optional, Sequence

import constants
from models.config import UpstreamConfiguration
from models.requests import Attachment, ChatRequest, WebSearchConfig
from services.document_converter import DocumentConverter
from utils.cache_strategy import history_cache_boundary, should_use_cache
from utils.content import build_message_content
from utils.prompts import compose_system_content

logger = logging.getLogger(__name__)


async def build_messages(
    request: ChatRequest,
    model: str,
    converter: DocumentConverter,
    recent_window: int = constants.DEFAULT_RECENT_HISTORY_WINDOW,
) -> list[dict[str, Any]]:
    """Build the ordered message list: system, history, current turn."""
    use_cache = should_use_cache(model, request.history)
    boundary = (
        history_cache_boundary(len(request.history), recent_window)
        if use_cache
        else None
    )
    logger.info(
        "Cache strategy for model %s: enabled=%s, history boundary=%s",
        model,
        use_cache,
        boundary,
    )

    messages: list[dict[str, Any]] = [
        {"role": "system", "content": compose_system_content(request, use_cache)}
    ]

    for index, turn in enumerate(request.history):
        content = await build_message_content(
            turn.content,
            turn.active_attachments(),
            converter,
            add_cache_control=index == boundary,
        )
        messages.append({"role": turn.role, "content": content})

    # an empty current turn with history means the caller pre-seeded every turn
    if request.message.strip() or not request.history:
        content = await build_message_content(
            request.message, request.attachments, converter
        )
        messages.append({"role": "user", "content": content})

    return messages


def build_plugins(
    attachments: Optional[Sequence[Attachment]],
    pdf_engine: Optional[str],
    web_search: Optional[WebSearchConfig],
) -> Optional[list[dict[str, Any]]]:
    """Return plugin descriptors for document parsing and web search."""
    plugins: list[dict[str, Any]] = []

    has_documents = any(
        attachment.type in constants.DOCUMENT_MIME_TYPES
        for attachment in attachments or []
    )
    if has_documents and pdf_engine:
        plugins.append({"id": "file-parser", "pdf": {"engine": pdf_engine}})

    if web_search is not None and web_search.enabled:
        plugin: dict[str, Any] = {"id": "web"}
        if web_search.engine is not None:
            plugin["engine"] = web_search.engine
        if web_search.max_results is not None:
            plugin["max_results"] = web_search.max_results
        if web_search.search_prompt is not None:
            plugin["search_prompt"] = web_search.search_prompt
        plugins.append(plugin)

    return plugins or None


def presence_penalty_from_repetition(repetition_penalty: Optional[float]) -> Optional[float]:
    """Map a repetition penalty (0 to 2, neutral 1) onto the presence penalty scale."""
    if repetition_penalty is None or repetition_penalty == 1.0:
        return None
    return (repetition_penalty - 1) * 2


def supports_image_generation(model: str) -> bool:
    """Check whether the model can produce images."""
    model_id = model.lower()
    return "gemini" in model_id and "image" in model_id


async def build_upstream_request(
    request: ChatRequest,
    upstream: UpstreamConfiguration,
    converter: DocumentConverter,
    recent_window: int = constants.DEFAULT_RECENT_HISTORY_WINDOW,
) -> dict[str, Any]:
    """Build the JSON body of the upstream call."""
    model = request.model or upstream.default_model
    messages = await build_messages(request, model, converter, recent_window)

    max_tokens = request.max_tokens or upstream.default_max_tokens
    if request.persona is not None and request.persona.max_tokens:
        max_tokens = request.persona.max_tokens

    payload: dict[str, Any] = {
        "model": model,
        "messages": messages,
        "stream": True,
        "max_tokens": max_tokens,
        "usage": {"include": True},
    }

    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.frequency_penalty is not None:
        payload["frequency_penalty"] = request.frequency_penalty
    presence_penalty = presence_penalty_from_repetition(request.repetition_penalty)
    if presence_penalty is not None:
        payload["presence_penalty"] = presence_penalty

    if request.generate_images and supports_image_generation(model):
        payload["modalities"] = ["image", "text"]

    plugins = build_plugins(request.attachments, request.pdf_engine, request.web_search)
    if plugins:
        payload["plugins"] = plugins

    reasoning = request.reasoning
    if reasoning is not None and reasoning.enabled:
        reasoning_config: dict[str, Any] = {"enabled": True}
        if reasoning.effort is not None:
            reasoning_config["effort"] = reasoning.effort
        if reasoning.max_tokens is not None:
            reasoning_config["max_tokens"] = reasoning.max_tokens
        if reasoning.exclude is not None:
            reasoning_config["exclude"] = reasoning.exclude
        payload["reasoning"] = reasoning_config
        payload["include_reasoning"] = reasoning.exclude is not True

    return payload
