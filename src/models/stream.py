"""Models describing the normalized event stream produced by the relay."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt


class RelayState(str, Enum):
    """States of a single relayed stream."""

    INIT = "init"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ABORTED_TIMEOUT = "aborted_timeout"
    ABORTED_UPSTREAM_ERROR = "aborted_upstream_error"
    ABORTED_MIDSTREAM_ERROR = "aborted_midstream_error"

    @property
    def is_terminal(self) -> bool:
        """Whether no further events can follow."""
        return self not in (RelayState.INIT, RelayState.STREAMING)


class UsageRecord(BaseModel):
    """Normalized token and cost accounting for one response."""

    model_config = ConfigDict(populate_by_name=True)

    cost: NonNegativeFloat = 0
    total_tokens: NonNegativeInt = Field(0, serialization_alias="totalTokens")
    prompt_tokens: NonNegativeInt = Field(0, serialization_alias="promptTokens")
    completion_tokens: NonNegativeInt = Field(
        0, serialization_alias="completionTokens"
    )
    reasoning_tokens: Optional[NonNegativeInt] = Field(
        None, serialization_alias="reasoningTokens"
    )
    cached_tokens: Optional[NonNegativeInt] = Field(
        None, serialization_alias="cachedTokens"
    )
    upstream_cost: Optional[NonNegativeFloat] = Field(
        None, serialization_alias="upstreamCost"
    )
    api_key_name: str = Field(serialization_alias="apiKeyName")
    raw: dict[str, Any] = Field(default_factory=dict)

    def to_event(self) -> dict[str, Any]:
        """Return the wire form used inside stream events."""
        return self.model_dump(by_alias=True, exclude_none=True)


class NamingResult(BaseModel):
    """Conversation title extracted from the first response."""

    chat_name: str
    cleaned_response: str


class StreamEvent(BaseModel):
    """One normalized event forwarded to the caller.

    Absent fields are omitted from the wire form, except `finish_reason`
    which is always present.
    """

    content: Optional[str] = None
    reasoning: Optional[str] = None
    images: Optional[list[Any]] = None
    annotations: Optional[list[Any]] = None
    usage: Optional[UsageRecord] = None
    chat_name: Optional[str] = None
    cleaned_response: Optional[str] = None
    error: Optional[dict[str, Any]] = None
    finish_reason: Optional[str] = None

    def has_payload(self) -> bool:
        """Whether the event carries anything besides the finish reason."""
        return any(
            value is not None
            for value in (
                self.content,
                self.reasoning,
                self.images,
                self.annotations,
                self.usage,
                self.chat_name,
                self.cleaned_response,
                self.error,
            )
        )

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON object written after the `data:` prefix."""
        data: dict[str, Any] = {}
        if self.content is not None:
            data["content"] = self.content
        if self.reasoning is not None:
            data["reasoning"] = self.reasoning
        if self.images is not None:
            data["images"] = self.images
        if self.annotations is not None:
            data["annotations"] = self.annotations
        if self.usage is not None:
            data["usage"] = self.usage.to_event()
        if self.chat_name is not None:
            data["chatName"] = self.chat_name
        if self.cleaned_response is not None:
            data["cleanedResponse"] = self.cleaned_response
        if self.error is not None:
            data["error"] = self.error
        data["finish_reason"] = self.finish_reason
        return data
