"""AI assistant that answers questions in the chat room."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol

from ..chat import Identity
from ..config import AssistantConfig
from ..logging import JSONLLogger, get_logger
from ..whereabouts import AI_ASSISTANT_ID, AI_QUERY_ID
from .prompt import (
    SYSTEM_PROMPT,
    build_analysis_prompt,
    build_direct_prompt,
    build_short_analysis_prompt,
    format_history,
)

if TYPE_CHECKING:
    from ..chat import MessageChannel

logger = logging.getLogger(__name__)

QUERY_DISPLAY_NAME = "You (to AI)"

FAILURE_MESSAGES = (
    "Failed to get a response from the AI. Please try again with a different question.",
    "Still having trouble with the AI. Try a shorter, simpler question.",
    "The AI service is currently experiencing issues. Please try again later.",
)

# Posted into the room from the second consecutive failure on
APOLOGY_MESSAGE = (
    "I'm sorry, I'm having trouble connecting to the AI service right now. "
    "Please try again later."
)
APOLOGY_AFTER_FAILURES = 2

# Shown next to the AI prompt while model_ready is False
RECOVERING_MESSAGE = "The AI is recovering from an error, answers may fail for a moment."

ANALYSIS_ERROR_MESSAGE = (
    "Sorry, I encountered an error while analyzing the chat. "
    "Please try again with a different question."
)


class CompletionError(Exception):
    """Raised when the completion service gives no usable answer."""


class LLMClient(Protocol):
    """What the assistant needs from a completion service."""

    async def complete(
        self,
        prompt: str,
        history: list[dict[str, Any]] | None = None,
        system: str | None = None,
    ) -> str: ...


@dataclass
class AssistantReply:
    """Outcome of asking the assistant.

    Attributes:
        text: The answer posted to the room, None on failure.
        error: Message to show the asker, None on success.
        failures: Consecutive failures so far.
    """

    text: str | None = None
    error: str | None = None
    failures: int = 0

    @property
    def success(self) -> bool:
        return self.text is not None


def failure_message(failures: int) -> str:
    """Error shown to the asker after `failures` consecutive failures."""
    index = min(max(failures, 1), len(FAILURE_MESSAGES)) - 1
    return FAILURE_MESSAGES[index]


async def generate_response(
    llm: LLMClient,
    prompt: str,
    history: list[dict[str, Any]] | None = None,
) -> str:
    """Generate an answer, falling back to a single flat prompt.

    Args:
        llm: The completion client.
        prompt: The question.
        history: Earlier turns as `{"role", "content"}` dicts.

    Returns:
        The model's answer.

    Raises:
        CompletionError: If both the chat and the fallback call fail.
    """
    history = history or []
    try:
        return await llm.complete(prompt, history=history, system=SYSTEM_PROMPT)
    except Exception as chat_error:
        logger.warning(f"Chat completion failed, trying direct generation: {chat_error}")

    try:
        return await llm.complete(build_direct_prompt(prompt, history))
    except Exception as e:
        raise CompletionError("Failed to generate content even with fallback method") from e


class ChatAssistant:
    """Answers questions from the room and posts the answers back.

    Tracks consecutive failures so the error shown to the user escalates,
    and posts an apology into the room once failures repeat.
    """

    def __init__(
        self,
        channel: MessageChannel,
        llm: LLMClient,
        config: AssistantConfig | None = None,
        clock: Callable[[], float] = time.time,
        json_logger: JSONLLogger | None = None,
    ) -> None:
        self.channel = channel
        self.llm = llm
        self.config = config or AssistantConfig()
        self.clock = clock
        self.json_logger = json_logger or get_logger()
        self.identity = Identity(user_id=AI_ASSISTANT_ID, user_name=self.config.display_name)
        self.failures = 0
        self._last_failure_at: float | None = None

    @property
    def model_ready(self) -> bool:
        """False for a short while after a failed request."""
        if self._last_failure_at is None:
            return True
        return self.clock() - self._last_failure_at >= self.config.ready_cooldown

    def _post(self, text: str, identity: Identity) -> None:
        try:
            self.channel.append(text, identity)
        except Exception as e:
            logger.warning(f"Error posting assistant message: {e}")

    async def ask(self, query: str, identity: Identity | None = None) -> AssistantReply | None:
        """Ask the assistant a question on behalf of a user.

        The question is posted to the room, the recent conversation is sent
        as history and the answer is posted back as the assistant.

        Args:
            query: The question.
            identity: Who is asking, used for logging.

        Returns:
            The reply, or None for a blank query.
        """
        if not query.strip():
            return None

        user_id = identity.user_id if identity else None
        try:
            recent = self.channel.list_messages(limit=self.config.history_limit)
        except Exception as e:
            logger.warning(f"Could not load chat history: {e}")
            recent = []
        history = format_history(recent)
        self._post(query, Identity(user_id=AI_QUERY_ID, user_name=QUERY_DISPLAY_NAME))

        try:
            response = await generate_response(self.llm, query, history)
            if not isinstance(response, str) or not response.strip():
                raise CompletionError("Empty or invalid response received")
        except Exception as e:
            return self._on_failure(e, user_id)

        self.failures = 0
        self._post(response, self.identity)
        return AssistantReply(text=response)

    def _on_failure(self, error: Exception, user_id: str | None) -> AssistantReply:
        logger.warning(f"Error with assistant: {error}")
        self.failures += 1
        self._last_failure_at = self.clock()
        self.json_logger.log_assistant_error(str(error), failures=self.failures, user_id=user_id)

        if self.failures >= APOLOGY_AFTER_FAILURES:
            self._post(APOLOGY_MESSAGE, self.identity)

        return AssistantReply(error=failure_message(self.failures), failures=self.failures)

    async def analyze_chat(self, question: str) -> str:
        """Answer a question about the recent conversation.

        Falls back to a shorter context if the first request fails.

        Args:
            question: What to ask about the chat.

        Returns:
            The model's answer, or an apology if both attempts fail.
        """
        try:
            messages = self.channel.list_messages(limit=self.config.analysis_limit)
            try:
                return await self.llm.complete(build_analysis_prompt(question, messages))
            except Exception as content_error:
                logger.warning(
                    f"Content generation failed, trying with shorter context: {content_error}"
                )
                shorter = messages[-(self.config.analysis_limit // 2):]
                return await self.llm.complete(build_short_analysis_prompt(question, shorter))
        except Exception as e:
            logger.warning(f"Error analyzing chat: {e}")
            self.json_logger.log("analysis_error", error=str(e))
            return ANALYSIS_ERROR_MESSAGE
