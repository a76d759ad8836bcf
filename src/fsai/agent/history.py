"""Conversation history truncation."""

from collections.abc import Sequence
from typing import TypeVar

from fsai.agent.models import ChatMessage

M = TypeVar("M", bound=ChatMessage)


def truncate_history(messages: Sequence[M], max_chars: int) -> list[M]:
    """
    Keep the most recent messages whose combined content fits a budget.

    Walks from newest to oldest and stops before the first message that
    would push the total over ``max_chars``. The newest message is always
    kept, even when it alone exceeds the budget. Chronological order is
    preserved.

    Args:
        messages: Messages in chronological order.
        max_chars: Character budget for the combined content.

    Returns:
        A chronological suffix of ``messages``.
    """
    kept: list[M] = []
    total = 0

    for message in reversed(messages):
        length = len(message.content)
        if kept and total + length > max_chars:
            break
        kept.append(message)
        total += length

    kept.reverse()
    return kept
