"""Handler for REST API call relaying a chat request as a stream of events."""

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

import constants
from client import UpstreamClientHolder
from configuration import configuration
from models.requests import ChatRequest
from models.responses import (
    GatewayTimeoutResponse,
    InternalServerErrorResponse,
    TooManyRequestsResponse,
    UnauthorizedResponse,
    UpstreamErrorResponse,
)
from services.credentials import CredentialStore, resolve_credential
from services.document_converter import DocumentConverter
from services.relay import StreamRelay
from utils.endpoints import (
    check_configuration_loaded,
    get_converter,
    get_credential_store,
    get_rate_limiter,
    get_title_store,
)
from utils.errors import RelayError
from utils.rate_limit import RateLimiter
from utils.request_builder import build_upstream_request
from utils.types import ConversationTitleStore

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["chat"])


chat_responses: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Stream of `data:` framed JSON events ending with `data: [DONE]`",
        "content": {
            constants.MEDIA_TYPE_EVENT_STREAM: {
                "schema": {"type": "string"},
                "example": (
                    'data: {"content": "Hello", "finish_reason": null}\n\n'
                    "data: [DONE]\n\n"
                ),
            }
        },
    },
    401: {"description": "No credential available", "model": UnauthorizedResponse},
    429: {"description": "Rate limit exceeded", "model": TooManyRequestsResponse},
    500: {"description": "Internal error", "model": InternalServerErrorResponse},
    502: {"description": "Gateway rejected the call", "model": UpstreamErrorResponse},
    504: {"description": "Gateway timed out", "model": GatewayTimeoutResponse},
}


@router.post("/chat", responses=chat_responses)
async def chat_endpoint_handler(
    chat_request: ChatRequest,
    rate_limiter: Annotated[Optional[RateLimiter], Depends(get_rate_limiter)],
    credential_store: Annotated[CredentialStore, Depends(get_credential_store)],
    converter: Annotated[DocumentConverter, Depends(get_converter)],
    title_store: Annotated[ConversationTitleStore, Depends(get_title_store)],
) -> StreamingResponse:
    """
    Relay a chat request to the LLM gateway and stream the answer back.

    Rate limiting, credential resolution, request assembly and the upstream
    call happen before the response is started; their failures are returned
    as regular HTTP errors. Once streaming has started, failures are reported
    as a final error event.

    Returns:
        StreamingResponse: `text/event-stream` response with normalized events.
    """
    check_configuration_loaded(configuration)
    upstream = configuration.upstream_configuration
    customization = configuration.customization

    logger.info(
        "Chat request for conversation %s of user %s (history: %d turns)",
        chat_request.conversation_id,
        chat_request.user_id,
        len(chat_request.history),
    )

    try:
        if rate_limiter is not None:
            rate_limiter.check(chat_request.user_id)

        credential = await resolve_credential(
            credential_store,
            chat_request.user_id,
            chat_request.api_key,
            upstream.api_key,
        )

        payload = await build_upstream_request(
            chat_request,
            upstream,
            converter,
            recent_window=(
                customization.recent_history_window
                if customization is not None
                else constants.DEFAULT_RECENT_HISTORY_WINDOW
            ),
        )

        relay = StreamRelay(
            UpstreamClientHolder().get_client(),
            str(upstream.url),
            payload,
            credential,
            user_id=chat_request.user_id,
            conversation_id=chat_request.conversation_id,
            naming_requested=chat_request.naming_requested,
            title_store=title_store,
            timeout=upstream.timeout,
            extra_headers=upstream.extra_headers(),
        )
        await relay.open()
    except RelayError as e:
        raise e.to_http_exception() from e
    except Exception as e:
        logger.exception("Unable to start relaying the chat request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=InternalServerErrorResponse(cause=str(e)).dump_detail(),
        ) from e

    return StreamingResponse(
        relay.events(), media_type=constants.MEDIA_TYPE_EVENT_STREAM
    )
