"""Context construction for model calls."""

import logging
from collections.abc import Callable
from pathlib import Path

from fsai.agent.conversation import Conversation
from fsai.agent.history import truncate_history
from fsai.agent.models import (
    AIContext,
    ChatRole,
    ContextHistory,
    ContextSettings,
    FileSnippet,
)
from fsai.config.schema import AgentConfig, Settings
from fsai.tools.builtin.file import list_directory
from fsai.tools.models import FileEntry

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "...(truncated)"

Listing = Callable[[str | Path], list[FileEntry]]


def preview(content: str, limit: int, marker: str = TRUNCATION_MARKER) -> str:
    """Cut ``content`` to ``limit`` characters, appending a marker when cut."""
    if len(content) <= limit:
        return content
    return content[:limit] + marker


class ContextBuilder:
    """
    Builds the bounded AIContext snapshot sent with every model call.

    Follow-up calls use tighter budgets than the initial call of a turn.
    Building never mutates the conversation.
    """

    def __init__(self, config: AgentConfig, listing: Listing = list_directory) -> None:
        """
        Args:
            config: Agent configuration with history and preview budgets.
            listing: Directory listing collaborator.
        """
        self.config = config
        self.listing = listing

    def build(
        self,
        conversation: Conversation,
        settings: Settings,
        followup: bool = False,
    ) -> AIContext:
        """Build a context snapshot for the conversation's current directory."""
        folders, files = self._list(conversation.current_path)

        budget = (
            self.config.followup_history_char_budget
            if followup
            else self.config.history_char_budget
        )
        recent = [m for m in conversation.messages if m.role != ChatRole.SYSTEM]
        recent = recent[-self.config.history_message_limit :]

        preview_chars = (
            self.config.followup_file_preview_chars
            if followup
            else self.config.file_preview_chars
        )
        limit = self.config.file_snippet_limit
        snippets = list(conversation.file_snippets)[-limit:] if limit else []

        return AIContext(
            current_path=conversation.current_path,
            folders=folders,
            files=files,
            history=ContextHistory(
                messages=truncate_history(recent, budget),
                file_contents=[
                    FileSnippet(
                        path=s.path,
                        content=preview(s.content, preview_chars),
                        timestamp=s.timestamp,
                    )
                    for s in snippets
                ],
            ),
            settings=ContextSettings(allow_root_access=settings.allow_root_access),
        )

    def _list(self, path: str) -> tuple[list[str], list[str]]:
        try:
            entries = self.listing(path)
        except OSError as e:
            logger.warning(f"Cannot list current directory {path}: {e}")
            return [], []

        folders = [e.name for e in entries if e.is_directory]
        files = [e.name for e in entries if e.is_file]
        return folders, files
