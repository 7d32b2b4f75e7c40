"""Constants used in business logic."""

DEFAULT_UPSTREAM_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-2.5-flash"

# Upstream is always asked for an explicit response-length ceiling
DEFAULT_MAX_TOKENS = 4096

# Overall ceiling for one upstream call, in seconds
DEFAULT_UPSTREAM_TIMEOUT = 600

# Number of trailing history turns that are never cache-annotated
DEFAULT_RECENT_HISTORY_WINDOW = 5

# Model families that understand cache_control breakpoints
CACHE_CAPABLE_MODEL_FAMILIES = ("claude", "anthropic")

CACHE_CONTROL_EPHEMERAL = {"type": "ephemeral"}

# Attachment MIME types
MIME_TYPE_PDF = "application/pdf"
MIME_TYPE_TEXT = "text/plain"
MIME_TYPE_DOCX = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
DOCUMENT_MIME_TYPES = frozenset({MIME_TYPE_PDF, MIME_TYPE_TEXT, MIME_TYPE_DOCX})

# Document parsing engines understood by the file-parser plugin
PDF_ENGINE_TEXT = "pdf-text"
PDF_ENGINE_MISTRAL_OCR = "mistral-ocr"
PDF_ENGINE_NATIVE = "native"
DEFAULT_PDF_ENGINE = PDF_ENGINE_TEXT

# SSE framing
SSE_DATA_PREFIX = "data: "
SSE_COMMENT_PREFIX = ":"
SSE_DONE_SENTINEL = "[DONE]"
MEDIA_TYPE_EVENT_STREAM = "text/event-stream"

# Finish reasons emitted by the relay itself
FINISH_REASON_ERROR = "error"
FINISH_REASON_CHAT_NAME_UPDATED = "chat_name_updated"

# Error codes carried in error events
ERROR_CODE_STREAMING = "STREAMING_ERROR"
ERROR_CODE_TIMEOUT = "TIMEOUT"

# Auto-naming
CHAT_NAME_MAX_LENGTH = 60
CHAT_NAME_ELLIPSIS = "..."
CHAT_NAME_PROMPT_MAX_LENGTH = 50

# Credential labels used in usage records
UNKNOWN_CREDENTIAL_LABEL = "unknown"
SERVICE_CREDENTIAL_LABEL = "default"

# Rate limiting
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100
DEFAULT_RATE_LIMIT_WINDOW = 60
DEFAULT_RATE_LIMIT_MAX_ENTRIES = 10000

# Environment variable holding the configuration path for uvicorn workers
CONFIG_PATH_ENV_VARIABLE = "CHAT_RELAY_CONFIG_PATH"

# Default assistant prompt used when no persona, custom prompt or guided
# study mode is requested and no prompt is configured
DEFAULT_SYSTEM_PROMPT = """# System Prompt

You are a helpful, accurate and authentic AI assistant. Your goal is to
provide reliable information and to interact genuinely with users.

## Core principles

- Give accurate answers grounded in facts. Never invent information. When you
  do not know something, say so clearly.
- Distinguish explicitly between facts, inferences and speculation.
- Be warm but honest; avoid flattery.
- Adapt tone and formality to the user and the context.

## Formatting

- Keep casual answers short and conversational.
- Use Markdown with restraint for technical answers.
- Use $...$ for inline math and $$...$$ for display equations, with proper
  LaTeX commands instead of Unicode symbols.
- Use fenced code blocks with a language tag for multi-line code.
- Use ```smiles blocks for 2D molecular structures and ```graph blocks with a
  JSON specification for charts.

## Reasoning

- Read tricky questions carefully and question implicit assumptions.
- For any arithmetic, compute step by step and check the result before
  answering.
"""

GUIDED_STUDY_SYSTEM_PROMPT = """# Guided Study Mode

You are a tutor working in GUIDED STUDY mode. Follow these rules strictly.

## Goal

Build autonomy, not dependency. The student must understand and be able to
explain the subject on their own.

## Method

- Ask what the student already knows BEFORE explaining.
- Never solve exercises directly. Guide the reasoning with questions.
- Ask ONE question at a time and wait for the answer.
- Give progressive hints (vague, then specific, then very specific).
- After a correct answer, ask the student to explain it back in their own words.
- If the student says they have not studied a topic yet, stop and wait for
  them to bring it up again.

## Communication

- Warm, patient and direct. Short, structured answers.
- Confirm correct answers immediately before asking anything else.
- Praise effort and process, never fixed traits.

## Notation

- Use only $...$ and $$...$$ as math delimiters.
- Use ```smiles blocks for molecules and ```graph blocks for charts.
"""
