"""Terminal chat client for wheredunno."""

import asyncio
import os

from .assistant import RECOVERING_MESSAGE
from .chat import ChatMessage, Identity
from .config import config_from_env
from .logging import configure_logger, get_logger
from .room import ChatRoom, SendError, build_room

BANNER = """
╔══════════════════════════════════════════╗
║            📍 wheredunno v0.1.0          ║
║      Group chat that knows where you are ║
╚══════════════════════════════════════════╝

Commands:
  /ai <question>       - Ask the AI assistant
  /analyze <question>  - Ask the AI about the conversation
  /where <name>        - Last known whereabout of someone
  /who                 - Recently tracked whereabouts
  /exit, /quit         - Leave the room
  /help                - Show this help

Type your message and press Enter.
"""

HISTORY_ON_JOIN = 10


def format_message(message: ChatMessage) -> str:
    """Format a room message for the terminal."""
    return f"[{message.time}] {message.user_name}: {message.text}"


class CLI:
    """Interactive terminal client for one user in the room."""

    def __init__(self, room: ChatRoom, identity: Identity) -> None:
        self.room = room
        self.identity = identity
        self.logger = get_logger()
        self._printer_task: asyncio.Task | None = None
        self._last_printed_id = 0
        self._joined = False

    def _print_new(self, snapshot: list[ChatMessage]) -> None:
        """Print messages from a snapshot that were not printed yet."""
        if not self._joined:
            fresh = snapshot[-HISTORY_ON_JOIN:]
            self._joined = True
        else:
            fresh = [
                m
                for m in snapshot
                if (m.id or 0) > self._last_printed_id and m.user_id != self.identity.user_id
            ]

        for message in fresh:
            print(format_message(message))

        if snapshot:
            self._last_printed_id = max(self._last_printed_id, snapshot[-1].id or 0)

    async def _print_loop(self) -> None:
        """Print room messages as they arrive."""
        subscription = self.room.subscribe()
        try:
            async for snapshot in subscription:
                self._print_new(snapshot)
        finally:
            subscription.close()

    async def _handle_command(self, command: str) -> bool:
        """Handle a special command. Returns True if should continue, False to exit."""
        name, _, arg = command.partition(" ")
        name = name.lower()
        arg = arg.strip()

        if name in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            self.logger.log("session_end", user_id=self.identity.user_id)
            return False

        if name == "/ai":
            if not arg:
                print("Usage: /ai <question>")
                return True
            if not self.room.assistant.model_ready:
                print(f"\n⚠️  {RECOVERING_MESSAGE}")
            reply = await self.room.ask_assistant(arg, self.identity)
            if reply is not None and reply.error:
                print(f"\n❌ {reply.error}")
            return True

        if name == "/analyze":
            if not arg:
                print("Usage: /analyze <question>")
                return True
            print("\n" + await self.room.analyze(arg))
            return True

        if name == "/where":
            fact = self.room.where_is(arg) if arg else None
            if fact is None:
                print(f"No recent whereabouts for '{arg}'")
            else:
                print(f"{fact.user_name}: {fact.whereabout}")
            return True

        if name == "/who":
            for fact in self.room.facts.recent():
                print(f"- {fact.user_name}: {fact.whereabout}")
            return True

        if name == "/help":
            print(BANNER)
            return True

        return True  # Unknown command, continue

    async def _process_message(self, text: str) -> None:
        """Post a message to the room."""
        try:
            self.room.send_message(text, self.identity)
        except SendError as e:
            print(f"\n❌ {e}")

    async def run(self) -> None:
        """Run the interactive client."""
        print(BANNER)
        print(f"Chatting as: {self.identity.user_name}\n")

        self.room.start()
        self._printer_task = asyncio.create_task(self._print_loop())
        self.logger.log("session_start", user_id=self.identity.user_id)

        try:
            while True:
                try:
                    user_input = (await asyncio.to_thread(input, "")).strip()

                    if not user_input:
                        continue

                    if user_input.startswith("/") or user_input.lower() in ("exit", "quit"):
                        if not await self._handle_command(user_input):
                            break
                        continue

                    await self._process_message(user_input)

                except (KeyboardInterrupt, EOFError):
                    print("\n👋 Goodbye!")
                    break
        finally:
            if self._printer_task and not self._printer_task.done():
                self._printer_task.cancel()
            self.room.close()


async def run_cli(name: str | None = None) -> None:
    """Run the terminal client with configuration from the environment."""
    configure_logger()

    if not os.getenv("GROQ_API_KEY"):
        print("❌ Error: GROQ_API_KEY environment variable not set")
        print("Please set it in your .env file or environment")
        return

    identity = Identity.from_profile(f"cli-{name.lower()}" if name else None, display_name=name)
    room = build_room(config_from_env())
    cli = CLI(room, identity)
    await cli.run()
