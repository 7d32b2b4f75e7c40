"""System prompt composition.

The active prompt is selected by precedence: persona, custom prompt, guided
study prompt, default prompt. The default and guided prompts are followed by
user context, memories, the active personality and, on the first turn of an
auto-created conversation, the naming instruction.
"""

from typing import Optional, Sequence

import constants
from configuration import configuration
from models.requests import AIPersonality, ChatRequest, Memory, PersonaConfig
from utils.content import MessageContent, text_part


def get_default_system_prompt() -> str:
    """Return the default assistant prompt, preferring the configured one."""
    if (
        configuration.is_loaded()
        and configuration.customization is not None
        and configuration.customization.system_prompt is not None
    ):
        return configuration.customization.system_prompt
    return constants.DEFAULT_SYSTEM_PROMPT


def build_user_context(
    user_name: Optional[str], user_nickname: Optional[str], user_about: Optional[str]
) -> str:
    """Describe the user, preferring the nickname over the display name."""
    if not user_name and not user_nickname and not user_about:
        return ""

    context = "\n\n## About the user\n\n"
    name = user_nickname or user_name
    if name:
        context += f"**Name**: {name}\n\n"
        context += f'Use "{name}" when addressing the user personally.\n\n'
    if user_about:
        context += f"**About the user**: {user_about}\n\n"
        context += "Use this information to tailor your answers to the user.\n"
    return context


def build_memories_context(
    global_memories: Sequence[Memory], chat_memories: Sequence[Memory]
) -> str:
    """List global then conversation memories with the rules to apply them."""
    if not global_memories and not chat_memories:
        return ""

    context = "\n\n# Context: user memories\n\n"
    context += (
        "The user saved information about themselves and about this conversation. "
        "Use these memories to personalise answers and keep continuity.\n\n"
    )
    if global_memories:
        context += "## Global memories\n\n"
        for index, memory in enumerate(global_memories, start=1):
            context += f"{index}. {memory.content}\n"
        context += "\n"
    if chat_memories:
        context += "## Memories of this conversation\n\n"
        for index, memory in enumerate(chat_memories, start=1):
            context += f"{index}. {memory.content}\n"
        context += "\n"

    context += "---\n\n## How to use the memories\n\n"
    context += (
        "Weave the memories into answers when relevant, without announcing that "
        "a memory is being used.\n\n"
    )
    context += (
        "When a global memory conflicts with a memory of this conversation, the "
        "conversation memory wins.\n\n"
    )
    context += (
        "If a memory looks outdated compared to the conversation, acknowledge the "
        "change politely. Never invent facts that are not in the memories or the "
        "conversation.\n\n"
    )
    context += "Treat all memories as confidential.\n"
    return context


def build_personality_context(personalities: Sequence[AIPersonality]) -> str:
    """Describe the first active custom personality."""
    active = next((p for p in personalities if p.is_active), None)
    if active is None:
        return ""

    return f"""

# Active custom personality

The user defined a custom personality for you. It takes precedence over any
default behaviour instruction.

---

## Personality: {active.name}

{active.description}

---

1. Follow the personality guidelines above strictly.
2. Adapt tone, style and approach to the personality.
3. Stay consistent with it for the whole conversation.
4. Combine it naturally with the rest of the context (memories, user details).

Where the personality says nothing, fall back to your default behaviour while
keeping its tone.

"""


def build_persona_system_prompt(persona: PersonaConfig, memories: str) -> str:
    """Build the prompt replacing the assistant identity with a persona."""
    guidelines = ""
    if persona.always_do:
        guidelines += f"\n## Always do\n\n{persona.always_do}\n"
    if persona.never_do:
        guidelines += f"\n## Never do\n\n{persona.never_do}\n"
    if persona.always_do and persona.never_do:
        guidelines += (
            "\nThese guidelines have top priority. When a request conflicts with "
            "them, follow the guidelines and politely explain the limits of your "
            "persona.\n"
        )

    dialog_examples = ""
    if persona.dialog_examples:
        dialog_examples = (
            f"\n## Dialog examples\n\n{persona.dialog_examples}\n\n"
            "Use these examples as a reference for style and tone, not as scripts.\n"
        )

    memories_section = f"\n## What you know about the user\n\n{memories}" if memories else ""

    return f"""## Identity

You are **{persona.name}**.

This is not a role you play on the surface. This persona defines who you are
in this conversation and every answer is shaped by it.

## Personality

{persona.personality}

Let these traits show through vocabulary and tone without announcing them.

## Background and expertise

{persona.description}

Answer from this expertise. Be honest about topics outside of it.
{guidelines}{dialog_examples}
## Staying in character

Stay in character for the whole conversation. Leave the persona only when the
user asks for it explicitly.

## Activation

From now on you are **{persona.name}**.
{memories_section}"""


def get_naming_prompt() -> str:
    """Return the instruction asking the model to title the conversation."""
    max_length = constants.CHAT_NAME_PROMPT_MAX_LENGTH
    return f"""

## Conversation title

Besides answering the user normally, generate a short descriptive title for
this conversation. It becomes the visible title of the chat.

- At most **{max_length} characters**
- Reflect the main topic of the first message precisely
- Avoid generic titles such as "Question" or "Help"
- No final punctuation, quotes, emojis, hashtags or formatting
- Capitalise the important words

After your answer, add the title inside the tag:

<name>Descriptive Chat Title</name>

The tag is extracted automatically and is not shown to the user.
"""


def compose_system_content(request: ChatRequest, use_cache: bool) -> MessageContent:
    """Return the body of the system message for the request.

    With caching enabled a persona or custom prompt becomes a single cache
    annotated text part, while the default and guided prompts become one cache
    annotated part per non-empty block. Without caching all blocks are
    concatenated into a plain string.
    """
    memories = build_memories_context(request.global_memories, request.chat_memories)

    exclusive_prompt: Optional[str] = None
    if request.persona is not None:
        exclusive_prompt = build_persona_system_prompt(request.persona, memories)
    elif request.custom_system_prompt:
        exclusive_prompt = request.custom_system_prompt

    if exclusive_prompt is not None:
        if use_cache:
            return [text_part(exclusive_prompt, cache=True)]
        return exclusive_prompt

    base_prompt = (
        constants.GUIDED_STUDY_SYSTEM_PROMPT
        if request.guided_study
        else get_default_system_prompt()
    )
    blocks = [
        base_prompt,
        build_user_context(
            request.user_name, request.user_nickname, request.user_about
        ),
        memories,
        build_personality_context(request.ai_personalities),
        get_naming_prompt() if request.naming_requested else "",
    ]

    if use_cache:
        return [text_part(block, cache=True) for block in blocks if block]
    return "".join(blocks)
