"""AI assistant: completion client, prompts and the room-facing service."""

from .llm_client import GroqLLMClient
from .prompt import SYSTEM_PROMPT, build_direct_prompt, format_history
from .service import (
    APOLOGY_MESSAGE,
    RECOVERING_MESSAGE,
    AssistantReply,
    ChatAssistant,
    CompletionError,
    LLMClient,
    failure_message,
    generate_response,
)

__all__ = [
    "APOLOGY_MESSAGE",
    "RECOVERING_MESSAGE",
    "AssistantReply",
    "ChatAssistant",
    "CompletionError",
    "GroqLLMClient",
    "LLMClient",
    "SYSTEM_PROMPT",
    "build_direct_prompt",
    "failure_message",
    "format_history",
    "generate_response",
]
