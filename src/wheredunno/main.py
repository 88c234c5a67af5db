"""wheredunno entry point."""

import argparse
import asyncio
import os

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(prog="wheredunno")
    subparsers = parser.add_subparsers(dest="command")

    chat = subparsers.add_parser("chat", help="Chat in the room from the terminal")
    chat.add_argument("--name", help="Display name to chat as")

    subparsers.add_parser("bot", help="Run the Telegram bot")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    args = build_parser().parse_args(argv)

    if args.command == "bot":
        from .logging import configure_logger
        from .telegram import TelegramBot

        configure_logger()

        if not os.getenv("GROQ_API_KEY"):
            print("❌ Error: GROQ_API_KEY environment variable not set")
            print("Please set it in your .env file or environment")
            return

        bot = TelegramBot()
        bot.run()
        return

    asyncio.run(run_cli(getattr(args, "name", None)))


if __name__ == "__main__":
    main()
