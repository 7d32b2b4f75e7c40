"""Relay of one upstream completion stream to one caller.

The relay issues the upstream call, decodes the `data:` framed event stream
incrementally and forwards normalized events. Its life cycle is tracked by a
`RelayState`; whether the caller already received the response head is tracked
by `headers_committed`, which decides if a failure can still be reported as a
regular HTTP error or has to be written as a final event on the open stream.
"""

import asyncio
import codecs
import json
from typing import Any, AsyncIterator, Optional

import aiohttp

import constants
import metrics
from log import get_logger
from metrics.utils import update_llm_token_count_from_usage
from models.stream import RelayState, StreamEvent
from services.credentials import ResolvedCredential
from utils.errors import UpstreamError, UpstreamTimeoutError
from utils.naming import process_auto_naming
from utils.reasoning import extract_reasoning_text
from utils.types import ConversationTitleStore
from utils.usage import normalize_usage

logger = get_logger(__name__)

DONE_EVENT = f"{constants.SSE_DATA_PREFIX}{constants.SSE_DONE_SENTINEL}\n\n"


def format_stream_data(d: dict) -> str:
    """Format a dict as a `data:` framed event."""
    data = json.dumps(d)
    return f"data: {data}\n\n"


def error_event(message: str, code: str) -> str:
    """Format the final event written when the stream fails after commit."""
    return format_stream_data(
        StreamEvent(
            error={"message": message, "code": code},
            finish_reason=constants.FINISH_REASON_ERROR,
        ).to_wire()
    )


class StreamRelay:  # pylint: disable=too-many-instance-attributes
    """Relay one upstream stream to one caller."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        session: aiohttp.ClientSession,
        url: str,
        payload: dict[str, Any],
        credential: ResolvedCredential,
        *,
        user_id: str,
        conversation_id: str,
        naming_requested: bool = False,
        title_store: Optional[ConversationTitleStore] = None,
        timeout: int = constants.DEFAULT_UPSTREAM_TIMEOUT,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> None:
        """Initialize the relay for a prepared upstream payload."""
        self.session = session
        self.url = url
        self.payload = payload
        self.credential = credential
        self.user_id = user_id
        self.conversation_id = conversation_id
        self.naming_requested = naming_requested
        self.title_store = title_store
        self.timeout = timeout
        self.extra_headers = extra_headers or {}

        self.state = RelayState.INIT
        self.headers_committed = False
        self._response: Optional[aiohttp.ClientResponse] = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._full_response: list[str] = []

    @property
    def model(self) -> str:
        """Model the payload is addressed to."""
        return str(self.payload.get("model", ""))

    @property
    def full_response(self) -> str:
        """Content accumulated so far."""
        return "".join(self._full_response)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.credential.api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        headers.update(self.extra_headers)
        return headers

    async def open(self) -> None:
        """Issue the upstream call.

        Raises:
            UpstreamTimeoutError: the call did not complete within the ceiling.
            UpstreamError: the gateway could not be reached or rejected the call.
        """
        metrics.llm_calls_total.labels(self.model).inc()
        logger.info(
            "Relaying conversation %s of user %s to model %s",
            self.conversation_id,
            self.user_id,
            self.model,
        )
        try:
            response = await self.session.post(
                self.url,
                json=self.payload,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        except asyncio.TimeoutError as e:
            metrics.llm_calls_failures_total.inc()
            self.state = RelayState.ABORTED_TIMEOUT
            logger.warning("Upstream call timed out after %s seconds", self.timeout)
            raise UpstreamTimeoutError(
                f"No response from the LLM gateway within {self.timeout} seconds"
            ) from e
        except aiohttp.ClientError as e:
            metrics.llm_calls_failures_total.inc()
            self.state = RelayState.ABORTED_UPSTREAM_ERROR
            logger.error("Unable to reach the LLM gateway: %s", e)
            raise UpstreamError(f"Unable to reach the LLM gateway: {e}") from e

        if not response.ok:
            message = await self._read_error_message(response)
            response.release()
            metrics.llm_calls_failures_total.inc()
            self.state = RelayState.ABORTED_UPSTREAM_ERROR
            logger.error("LLM gateway rejected the call (%s): %s", response.status, message)
            raise UpstreamError(message)

        self._response = response
        self.state = RelayState.STREAMING

    @staticmethod
    async def _read_error_message(response: aiohttp.ClientResponse) -> str:
        try:
            body = await response.json(content_type=None)
        except (aiohttp.ClientError, ValueError):
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        return message or f"LLM gateway returned HTTP {response.status}"

    async def events(self) -> AsyncIterator[str]:
        """Yield the outbound events until the stream terminates.

        The upstream response is released on every exit path, including
        cancellation when the caller disconnects.
        """
        if self._response is None:
            raise RuntimeError("Relay has not been opened. Ensure 'open()' has been called.")
        # the response head is sent before the first item is pulled
        self.headers_committed = True
        try:
            async for data in self._response.content.iter_any():
                for item in self.feed(data):
                    yield item
                if self.state.is_terminal:
                    break
            else:
                for item in self.flush():
                    yield item
                if self.state is RelayState.STREAMING:
                    logger.info("Upstream stream ended without the end-of-stream sentinel")
                    self.state = RelayState.COMPLETED
        except asyncio.TimeoutError:
            self.state = RelayState.ABORTED_TIMEOUT
            logger.warning("Upstream stream timed out after %s seconds", self.timeout)
            yield error_event(
                f"Upstream stream timed out after {self.timeout} seconds",
                constants.ERROR_CODE_TIMEOUT,
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.state = RelayState.ABORTED_MIDSTREAM_ERROR
            logger.exception("Streaming failed after the response was committed")
            yield error_event(str(e), constants.ERROR_CODE_STREAMING)
        finally:
            self.close()
        logger.info(
            "Stream of conversation %s finished in state %s",
            self.conversation_id,
            self.state.value,
        )

    def close(self) -> None:
        """Release the upstream response."""
        if self._response is not None:
            self._response.release()
            self._response = None

    def feed(self, data: bytes) -> list[str]:
        """Decode a piece of the upstream body and handle each complete line.

        A trailing partial line is kept until the next piece arrives.
        """
        self._buffer += self._decoder.decode(data)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return self._handle_lines(lines)

    def flush(self) -> list[str]:
        """Handle whatever is left once the upstream body ended."""
        self._buffer += self._decoder.decode(b"", final=True)
        remaining, self._buffer = self._buffer, ""
        return self._handle_lines([remaining])

    def _handle_lines(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        for line in lines:
            if self.state.is_terminal:
                break
            out.extend(self.handle_line(line))
        return out

    def handle_line(self, line: str) -> list[str]:
        """Handle one line of the upstream stream, returning events to forward."""
        line = line.strip()
        if not line or line.startswith(constants.SSE_COMMENT_PREFIX):
            return []
        if not line.startswith(constants.SSE_DATA_PREFIX):
            return []

        data = line[len(constants.SSE_DATA_PREFIX) :]
        if data == constants.SSE_DONE_SENTINEL:
            return self._complete()

        try:
            chunk = json.loads(data)
        except json.JSONDecodeError:
            metrics.stream_chunk_parse_failures_total.inc()
            logger.warning(
                "Failed to parse upstream chunk: %s",
                data[:200] + "..." if len(data) > 200 else data,
            )
            return []
        if not isinstance(chunk, dict):
            return []

        if chunk.get("error"):
            return [self._midstream_error(chunk["error"])]

        event = self.normalize_chunk(chunk)
        if event is None:
            return []
        return [format_stream_data(event.to_wire())]

    def normalize_chunk(self, chunk: dict[str, Any]) -> Optional[StreamEvent]:
        """Extract the forwarded fields of one chunk, None when there are none."""
        choices = chunk.get("choices")
        choice = choices[0] if isinstance(choices, list) and choices else {}
        if not isinstance(choice, dict):
            choice = {}
        delta = choice.get("delta")
        if not isinstance(delta, dict):
            delta = {}
        message = chunk.get("message")
        if not isinstance(message, dict):
            message = {}

        content = delta.get("content")
        if not isinstance(content, str) or not content:
            content = None
        else:
            self._full_response.append(content)

        usage = None
        raw_usage = chunk.get("usage")
        if isinstance(raw_usage, dict) and raw_usage:
            usage = normalize_usage(raw_usage, self.credential.label)
            update_llm_token_count_from_usage(self.model, usage)

        event = StreamEvent(
            content=content,
            reasoning=extract_reasoning_text(delta.get("reasoning")),
            # message level list wins, the two are never merged
            images=message.get("images") or delta.get("images") or None,
            annotations=message.get("annotations") or delta.get("annotations") or None,
            usage=usage,
            finish_reason=choice.get("finish_reason"),
        )
        if not event.has_payload():
            return None
        return event

    def _midstream_error(self, error: Any) -> str:
        metrics.llm_midstream_errors_total.inc()
        self.state = RelayState.ABORTED_MIDSTREAM_ERROR
        logger.error("LLM gateway reported an error mid-stream: %s", error)
        if not isinstance(error, dict):
            error = {"message": str(error)}
        return format_stream_data(
            StreamEvent(error=error, finish_reason=constants.FINISH_REASON_ERROR).to_wire()
        )

    def _complete(self) -> list[str]:
        out: list[str] = []
        full_response = self.full_response
        if self.naming_requested and full_response:
            out.extend(self._auto_name(full_response))
        out.append(DONE_EVENT)
        self.state = RelayState.COMPLETED
        return out

    def _auto_name(self, full_response: str) -> list[str]:
        if self.title_store is None:
            logger.warning("Auto-naming requested but no title store is available")
            return []
        result = process_auto_naming(
            self.title_store, self.user_id, self.conversation_id, full_response
        )
        if result is None:
            return []
        return [
            format_stream_data(
                StreamEvent(
                    chat_name=result.chat_name,
                    cleaned_response=result.cleaned_response,
                    finish_reason=constants.FINISH_REASON_CHAT_NAME_UPDATED,
                ).to_wire()
            )
        ]
