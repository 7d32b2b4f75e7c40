"""Models for REST API requests."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel

import constants


class RequestModel(BaseModel):
    """Base class for request models accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True
    )


class Attachment(RequestModel):
    """Model representing a file attached to a chat message.

    Attributes:
        id: Attachment identifier.
        name: Display (file) name.
        type: MIME type of the attachment.
        size: Size in bytes.
        url: Retrieval locator, usually a signed storage URL.
        base64: Optional pre-fetched inline encoding, required for audio.
        is_active: False when the user disabled the attachment in history.
    """

    id: str = Field(description="Attachment identifier", examples=["att-1"])
    name: str = Field(description="Display name", examples=["notes.pdf"])
    type: str = Field(
        description="MIME type of the attachment", examples=[constants.MIME_TYPE_PDF]
    )
    size: int = Field(0, ge=0, description="Size in bytes", examples=[20480])
    url: str = Field(
        description="Retrieval locator", examples=["https://files.example.com/notes.pdf"]
    )
    base64: Optional[str] = Field(
        None, description="Pre-fetched inline encoding of the content"
    )
    is_active: Optional[bool] = Field(
        None, description="Whether the attachment is still part of the context"
    )


class ConversationTurn(RequestModel):
    """One prior turn of the conversation."""

    role: Literal["user", "assistant"]
    content: str = ""
    attachments: Optional[list[Attachment]] = None

    def active_attachments(self) -> list[Attachment]:
        """Return attachments not explicitly disabled by the user."""
        return [a for a in self.attachments or [] if a.is_active is not False]


class Memory(RequestModel):
    """A note the user asked the assistant to remember."""

    id: Optional[str] = None
    content: str


class AIPersonality(RequestModel):
    """A custom personality layered on top of the default prompt."""

    id: Optional[str] = None
    name: str
    description: str
    is_active: bool = False


class PersonaConfig(RequestModel):
    """A complete identity replacing the default system prompt."""

    persona_id: Optional[str] = None
    name: str
    personality: str = ""
    description: str = ""
    dialog_examples: Optional[str] = None
    first_message: Optional[str] = None
    always_do: Optional[str] = None
    never_do: Optional[str] = None
    max_tokens: Optional[int] = Field(None, gt=0)


class ReasoningConfig(RequestModel):
    """Reasoning (thinking) settings forwarded to the model."""

    enabled: bool = False
    effort: Optional[Literal["low", "medium", "high"]] = None
    max_tokens: Optional[int] = Field(None, gt=0)
    exclude: Optional[bool] = None


class WebSearchConfig(RequestModel):
    """Web search plugin settings."""

    enabled: bool = False
    engine: Optional[Literal["native", "exa"]] = None
    max_results: Optional[int] = Field(None, gt=0)
    search_prompt: Optional[str] = None


class ChatRequest(RequestModel):
    """Model representing a chat request relayed to the LLM gateway.

    Attributes:
        conversation_id: Conversation the message belongs to.
        user_id: Caller identifier.
        message: Text of the current turn, may be empty when history already
            carries the whole turn sequence.
        history: Prior turns, oldest first.
        model: Model identifier, defaults to the configured model.
        api_key: Credential carried in the request.

    Example:
        ```python
        chat_request = ChatRequest(
            conversation_id="chat-1", user_id="user-1", message="Hello"
        )
        ```
    """

    conversation_id: str = Field(description="Conversation ID", examples=["chat-1"])
    user_id: str = Field(description="Caller ID", examples=["user-1"])
    message: str = Field("", description="Text of the current turn")
    history: list[ConversationTurn] = Field(default_factory=list)
    model: Optional[str] = Field(None, examples=[constants.DEFAULT_MODEL])
    api_key: Optional[SecretStr] = None
    attachments: Optional[list[Attachment]] = None
    pdf_engine: Optional[Literal["pdf-text", "mistral-ocr", "native"]] = (
        constants.DEFAULT_PDF_ENGINE
    )
    reasoning: Optional[ReasoningConfig] = None
    web_search: Optional[WebSearchConfig] = None
    guided_study: bool = False
    global_memories: list[Memory] = Field(default_factory=list)
    chat_memories: list[Memory] = Field(default_factory=list)
    ai_personalities: list[AIPersonality] = Field(default_factory=list)
    persona: Optional[PersonaConfig] = None
    custom_system_prompt: Optional[str] = None
    generate_images: bool = False
    is_first_message: bool = False
    is_auto_created_chat: bool = False
    user_name: Optional[str] = None
    user_nickname: Optional[str] = None
    user_about: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)
    frequency_penalty: Optional[float] = Field(None, ge=-2.0, le=2.0)
    repetition_penalty: Optional[float] = Field(None, ge=0.0, le=2.0)

    # provides examples for /docs endpoint
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "conversationId": "chat-1",
                    "userId": "user-1",
                    "message": "Outline a term paper about tidal locking",
                    "model": "anthropic/claude-sonnet-4",
                    "isFirstMessage": True,
                    "isAutoCreatedChat": True,
                }
            ]
        },
    )

    @property
    def naming_requested(self) -> bool:
        """Whether the model is asked to emit a conversation title."""
        return (
            self.is_first_message
            and self.is_auto_created_chat
            and not self.custom_system_prompt
            and self.persona is None
        )
