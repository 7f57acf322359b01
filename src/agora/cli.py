"""
CLI entry point for Agora.

Provides a simple moderation console for trying the content filter.
"""

from __future__ import annotations

import sys

from agora.config import get_settings
from agora.errors import moderation_message
from agora.logging import get_logger
from agora.safety.base import ModerationMatch
from agora.safety.filter import get_content_filter

logger = get_logger(__name__)


def format_report(result: ModerationMatch, label: str = "content") -> str:
    """Render one filter verdict for the console."""
    if not result.blocked:
        return "✅ allowed"
    return f"⛔ {moderation_message(label)} (matches: {', '.join(result.sorted_matches())})"


def check_line(text: str, label: str = "content") -> str:
    """Return the console report for one line of text."""
    return format_report(get_content_filter().detect(text), label)


def interactive_session() -> None:
    """Read lines from stdin and report the filter verdict for each."""
    settings = get_settings()

    print("\n" + "=" * 60)
    print("Agora moderation console")
    print("=" * 60)

    if not settings.moderation_enabled:
        print("\n⚠️  Note: MODERATION_ENABLED is off; write paths will not enforce verdicts\n")

    print("Type text to check. 'quit' or 'exit' ends the session.")
    print("-" * 60 + "\n")

    while True:
        try:
            user_input = input("> ").strip()

            if not user_input:
                continue

            if user_input.lower() in ["quit", "exit"]:
                print()
                break

            print(check_line(user_input) + "\n")

        except (KeyboardInterrupt, EOFError):
            print()
            break


def main() -> None:
    """Main entry point. Checks arguments if given, otherwise runs the console."""
    args = sys.argv[1:]
    if not args:
        interactive_session()
        return

    content_filter = get_content_filter()
    blocked = False
    for text in args:
        result = content_filter.detect(text)
        blocked = blocked or result.blocked
        print(f"{text!r}: {format_report(result)}")
    logger.debug("cli_check_done", count=len(args), blocked=blocked)
    sys.exit(1 if blocked else 0)


if __name__ == "__main__":
    main()
