"""The chat room: wires the message channel, whereabouts and the assistant.

Services are built once at startup (`build_room`), started with
`ChatRoom.start()` and disposed with `ChatRoom.close()`.
"""

from __future__ import annotations

import logging
import os

from groq import AsyncGroq

from .assistant import AssistantReply, ChatAssistant, GroqLLMClient
from .chat import ChatMessage, Identity, MessageChannel, MessageSubscription
from .config import RoomConfig
from .logging import JSONLLogger, get_logger
from .whereabouts import (
    DelayedResponder,
    FactStore,
    TrackingResult,
    WhereaboutFact,
    WhereaboutsTracker,
)

logger = logging.getLogger(__name__)


class SendError(Exception):
    """Raised when a message could not be posted to the room."""


class ChatRoom:
    """A single shared chat room."""

    def __init__(
        self,
        channel: MessageChannel,
        facts: FactStore,
        assistant: ChatAssistant,
        config: RoomConfig | None = None,
        json_logger: JSONLLogger | None = None,
    ) -> None:
        self.config = config or RoomConfig()
        self.channel = channel
        self.facts = facts
        self.assistant = assistant
        self.json_logger = json_logger or get_logger()

        whereabouts = self.config.whereabouts
        self.responder = DelayedResponder(
            channel,
            delay=whereabouts.delay_seconds,
            tick_interval=whereabouts.tick_interval,
            process_all_due=whereabouts.process_all_due,
            assistant_name=whereabouts.assistant_name,
            clock=channel.clock,
            json_logger=self.json_logger,
        )
        self.tracker = WhereaboutsTracker(facts, self.responder, json_logger=self.json_logger)
        self.last_tracking: TrackingResult | None = None

    def send_message(self, text: str, identity: Identity | None = None) -> ChatMessage | None:
        """Post a message and run it through whereabouts tracking.

        Args:
            text: The message body.
            identity: The sender, anonymous if None.

        Returns:
            The stored message, or None for blank text.

        Raises:
            SendError: If the message could not be stored.
        """
        if not text.strip():
            return None

        identity = identity or Identity.anonymous()
        try:
            message = self.channel.append(text, identity)
        except Exception as e:
            logger.exception("Error sending message")
            self.json_logger.log("send_error", user_id=identity.user_id, error=str(e))
            raise SendError("Failed to send message. Please try again.") from e

        logger.debug(f"Sent message as: {identity.user_name}")
        self.last_tracking = self.tracker.process_message(message)
        return message

    async def ask_assistant(self, query: str, identity: Identity | None = None) -> AssistantReply | None:
        """Ask the AI assistant a question in the room."""
        return await self.assistant.ask(query, identity or Identity.anonymous())

    async def analyze(self, question: str) -> str:
        """Ask the AI assistant about the conversation so far."""
        return await self.assistant.analyze_chat(question)

    def where_is(self, name: str) -> WhereaboutFact | None:
        """Look up someone's last known whereabout right away."""
        try:
            return self.facts.find_by_name(name)
        except Exception as e:
            logger.warning(f"Error getting user whereabout: {e}")
            return None

    def subscribe(self, poll_interval: float = 0.5) -> MessageSubscription:
        """Open a live stream of room snapshots."""
        return self.channel.subscribe(poll_interval=poll_interval)

    def start(self) -> None:
        """Start delivering delayed answers."""
        self.responder.start()

    def close(self) -> None:
        """Stop background work and release the databases."""
        self.responder.stop()
        self.channel.close()
        self.facts.close()


def build_room(config: RoomConfig, groq_client: AsyncGroq | None = None) -> ChatRoom:
    """Construct a room and its services from configuration.

    Args:
        config: Room configuration.
        groq_client: Client for completions, created from GROQ_API_KEY if None.

    Returns:
        A room ready to `start()`.
    """
    channel = MessageChannel(config.db_path)
    channel.init_db()

    facts = FactStore(config.db_path, lookup_window=config.whereabouts.lookup_window)
    facts.init_db()

    client = groq_client or AsyncGroq(api_key=os.getenv("GROQ_API_KEY"))
    llm = GroqLLMClient(
        client,
        model=config.assistant.model,
        temperature=config.assistant.temperature,
        top_p=config.assistant.top_p,
        max_tokens=config.assistant.max_tokens,
    )
    assistant = ChatAssistant(channel, llm, config=config.assistant)

    return ChatRoom(channel, facts, assistant, config=config)
