"""Conversation state shared across turns."""

import logging
from pathlib import Path

from fsai.agent.models import ChatMessage, ChatRole, FileSnippet

logger = logging.getLogger(__name__)


class Conversation:
    """
    Append-only chat log plus the files read and the directory in view.

    The message log is never truncated in place; truncation only happens
    when a context snapshot is built.
    """

    def __init__(self, current_path: str | Path) -> None:
        self.current_path = str(current_path)
        self._messages: list[ChatMessage] = []
        self._file_snippets: list[FileSnippet] = []

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def file_snippets(self) -> tuple[FileSnippet, ...]:
        return tuple(self._file_snippets)

    def add_message(self, role: ChatRole, content: str) -> ChatMessage:
        """Append a message to the log."""
        message = ChatMessage(role=role, content=content)
        self._messages.append(message)
        return message

    def add_file_snippet(self, path: str, content: str) -> FileSnippet:
        """Remember a read file; a re-read replaces the older copy."""
        self._file_snippets = [s for s in self._file_snippets if s.path != path]
        snippet = FileSnippet(path=path, content=content)
        self._file_snippets.append(snippet)
        return snippet

    def navigate(self, path: str | Path) -> None:
        """Change the directory in view."""
        logger.debug(f"Current path: {self.current_path} -> {path}")
        self.current_path = str(path)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"<Conversation path={self.current_path} messages={len(self._messages)}>"
