from __future__ import annotations

import argparse
import sys
from typing import Optional

from loguru import logger

from replica_chat.config import get_settings
from replica_chat.manager import ChatSessionManager


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    p = argparse.ArgumentParser(description="Chat with the Sensay sample replica from the terminal")
    p.add_argument("--api-key", type=str, default=settings.api_key, help="Organization secret (default: SENSAY_API_KEY_SECRET)")
    p.add_argument("--message", "-m", type=str, help="Send one message, print the reply and exit")
    p.add_argument("--log-level", type=str, default=settings.log_level, help="Loguru level for stderr output")
    return p.parse_args(argv)


def _exchange(chat: ChatSessionManager, text: str) -> bool:
    reply = chat.send(text)
    if reply is None:
        if chat.error:
            print(f"Error: {chat.error}", file=sys.stderr)
        return False
    print(f"Sensay AI: {reply}")
    return True


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper(), colorize=True, format="{time:HH:mm:ss} | {level} | {message}")

    chat = ChatSessionManager(credential=args.api_key)
    if not chat.credential:
        print("Error: no API key; pass --api-key or set SENSAY_API_KEY_SECRET", file=sys.stderr)
        return 2

    if args.message is not None:
        return 0 if _exchange(chat, args.message) else 1

    print("Type a message (exit/quit or Ctrl-D to leave).")
    while True:
        try:
            line = input("You: ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if line.strip().lower() in {"exit", "quit"}:
            break
        if not line.strip():
            continue
        _exchange(chat, line)
    logger.info(f"cli_chat_end | messages={len(chat.messages)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
