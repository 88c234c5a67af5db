"""Telegram bot front end for the chat room."""

import asyncio
import logging
import os
from typing import Any

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..assistant import APOLOGY_MESSAGE, RECOVERING_MESSAGE
from ..chat import ChatMessage, Identity
from ..config import RoomConfig, config_from_env
from ..logging import get_logger
from ..room import ChatRoom, SendError, build_room
from ..whereabouts import AI_ASSISTANT_ID, WHEREABOUTS_ASSISTANT_ID

logger = logging.getLogger(__name__)


WELCOME_MESSAGE = """
📍 *wheredunno*

Saya ingat ke mana semua orang pergi.

*Commands:*
/start - Show this message
/ai <question> - Ask the AI assistant
/analyze <question> - Ask the AI about this chat
/where <name> - Last known whereabout of someone

Tell the group where you're going ("I'm going to the library", "aku nak pergi pasar").
Ask "where is Ali?" and if nobody answers, I will.
"""

MAX_MESSAGE_LENGTH = 4096


def truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to fit Telegram limits."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 20] + "\n... [truncated]"


def identity_from_update(update: Update) -> Identity:
    """Build the sender identity for a Telegram update."""
    user = update.effective_user
    if user is None:
        return Identity.anonymous()
    return Identity.from_profile(
        f"tg-{user.id}",
        display_name=user.first_name or user.username,
    )


def command_argument(context: Any) -> str:
    """Join the words after a command."""
    return " ".join(context.args or []).strip()


def should_relay(message: ChatMessage) -> bool:
    """Delayed whereabouts answers and the assistant's outage apology."""
    if message.user_id == WHEREABOUTS_ASSISTANT_ID:
        return True
    return message.user_id == AI_ASSISTANT_ID and message.text == APOLOGY_MESSAGE


class TelegramBot:
    """Telegram bot that maps a group chat onto the room."""

    def __init__(
        self,
        token: str | None = None,
        config: RoomConfig | None = None,
        room: ChatRoom | None = None,
    ) -> None:
        self.token = token or os.getenv("TELEGRAM_TOKEN")
        if not self.token:
            raise ValueError("TELEGRAM_TOKEN not set")

        self.room = room or build_room(config or config_from_env())
        self.json_logger = get_logger()
        self._app: Application | None = None
        self._relay_task: asyncio.Task | None = None
        self._chat_id: int | None = None

    def _remember_chat(self, update: Update) -> None:
        """Delayed answers go to the last chat that spoke."""
        if update.effective_chat is not None:
            self._chat_id = update.effective_chat.id

    async def _handle_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /start command."""
        assert update.message is not None
        self._remember_chat(update)
        self.json_logger.log("telegram_start", user_id=identity_from_update(update).user_id)

        await update.message.reply_text(
            WELCOME_MESSAGE,
            parse_mode=ParseMode.MARKDOWN,
        )

    async def _handle_ai(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /ai command."""
        assert update.message is not None
        self._remember_chat(update)
        query = command_argument(context)
        if not query:
            await update.message.reply_text("Usage: /ai <question>")
            return

        if not self.room.assistant.model_ready:
            await update.message.reply_text(f"⚠️ {RECOVERING_MESSAGE}")

        await update.message.chat.send_action("typing")
        reply = await self.room.ask_assistant(query, identity_from_update(update))
        if reply is None:
            return
        if reply.text is not None:
            await update.message.reply_text(truncate_message(reply.text))
        else:
            await update.message.reply_text(f"❌ {reply.error}")

    async def _handle_analyze(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /analyze command."""
        assert update.message is not None
        self._remember_chat(update)
        question = command_argument(context)
        if not question:
            await update.message.reply_text("Usage: /analyze <question>")
            return

        await update.message.chat.send_action("typing")
        answer = await self.room.analyze(question)
        await update.message.reply_text(truncate_message(answer))

    async def _handle_where(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /where command."""
        assert update.message is not None
        name = command_argument(context)
        fact = self.room.where_is(name) if name else None
        if fact is None:
            await update.message.reply_text(f"Tiada maklumat terkini tentang '{name}'.")
        else:
            await update.message.reply_text(f"{fact.user_name}: {fact.whereabout}")

    async def _handle_message(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle incoming group messages."""
        assert update.message is not None
        assert update.message.text is not None
        self._remember_chat(update)

        try:
            self.room.send_message(update.message.text, identity_from_update(update))
        except SendError as e:
            self.json_logger.log("telegram_error", error=str(e))
            await update.message.reply_text(f"❌ {e}")

    async def _relay(self, message: ChatMessage) -> None:
        """Send a delayed whereabouts answer to the chat."""
        if self._app is None or self._chat_id is None:
            return
        try:
            await self._app.bot.send_message(self._chat_id, truncate_message(message.text))
        except Exception:
            logger.exception("Error relaying whereabouts answer")

    async def _relay_loop(self) -> None:
        """Forward whereabouts answers appended to the room."""
        subscription = self.room.subscribe()
        last_id: int | None = None
        try:
            async for snapshot in subscription:
                if last_id is not None:
                    for message in snapshot:
                        if (message.id or 0) > last_id and should_relay(message):
                            await self._relay(message)
                last_id = (snapshot[-1].id or 0) if snapshot else 0
        finally:
            subscription.close()

    async def _post_init(self, application: Application) -> None:
        """Called after Application.initialize()."""
        self.room.start()
        self._relay_task = asyncio.create_task(self._relay_loop())

    async def _post_shutdown(self, application: Application) -> None:
        """Called after Application.shutdown()."""
        if self._relay_task and not self._relay_task.done():
            self._relay_task.cancel()
        self.room.close()

    def build_app(self) -> Application:
        """Build the Telegram application."""
        self._app = (
            Application.builder()
            .token(self.token)
            .post_init(self._post_init)
            .post_shutdown(self._post_shutdown)
            .build()
        )

        self._app.add_handler(CommandHandler("start", self._handle_start))
        self._app.add_handler(CommandHandler("ai", self._handle_ai))
        self._app.add_handler(CommandHandler("analyze", self._handle_analyze))
        self._app.add_handler(CommandHandler("where", self._handle_where))
        self._app.add_handler(
            MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message)
        )

        return self._app

    def run(self) -> None:
        """Run the bot (blocking)."""
        app = self.build_app()

        logger.info("Starting Telegram bot...")
        app.run_polling()
