"""
Interactive console for the intent bot.

Reads one message per line and prints the bot's reply. ``exit`` or
``quit`` ends the session; empty lines are ignored. With ``--tags`` the
token breakdown of each message is printed before the reply.
"""

from typing import List, Optional
import argparse
import asyncio

from intentbot.dependencies import build_session
from intentbot.domain.models.tagging import TaggingResult
from intentbot.domain.services.conversation_service import ConversationSession
from intentbot.utils.logger import configure_logging
from intentbot.utils.exceptions import AppException

EXIT_COMMANDS = {"exit", "quit"}


def format_tags(result: TaggingResult) -> str:
    lines = []
    for token, scores in zip(result.tokens, result.token_scores):
        best = max(range(len(scores)), key=scores.__getitem__) if scores else None
        label = result.labels[best] if best is not None and best < len(result.labels) else "-"
        lines.append(f"  {token:<20} {label}")
    return "\n".join(lines)


async def chat(session: ConversationSession, show_tags: bool = False) -> None:
    results = await session.warm_up()
    missing = [name for name, result in results.items() if not result.is_available]
    if missing:
        print(f"Unavailable models: {', '.join(missing)}")
    print("Intent bot ready. Type 'exit' to quit.")

    while True:
        try:
            text = await asyncio.to_thread(input, "> ")
        except (EOFError, KeyboardInterrupt):
            break
        if text.strip().lower() in EXIT_COMMANDS:
            break

        try:
            if show_tags:
                tags = await session.tag_for_display(text)
                if tags is not None:
                    print(format_tags(tags))
            response = await session.handle_turn(text)
        except AppException as e:
            print(f"[error] {e.message}")
            continue
        if response is not None:
            print(response)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Chat with the intent bot")
    parser.add_argument("--tags", action="store_true", help="print the token breakdown of each message")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    asyncio.run(chat(build_session(), show_tags=args.tags))


if __name__ == "__main__":
    main()
