"""
Provider data models for FSai.

Defines the request and response types exchanged with the model.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from fsai.tools.models import ToolCall


class MessageRole(str, Enum):
    """Valid message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """Request message.

    ``content`` is plain text or a list of content parts (text plus inline
    media attachments).
    """

    role: str  # "system" | "user" | "assistant"
    content: str | list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to LiteLLM-compatible dict."""
        return {"role": self.role, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role=MessageRole.SYSTEM.value, content=content)

    @classmethod
    def user(cls, content: str, attachments: list[str] | None = None) -> "Message":
        """Create a user message, with optional data-URL attachments."""
        if not attachments:
            return cls(role=MessageRole.USER.value, content=content)

        parts: list[dict[str, Any]] = [{"type": "text", "text": content}]
        parts.extend({"type": "image_url", "image_url": {"url": url}} for url in attachments)
        return cls(role=MessageRole.USER.value, content=parts)


@dataclass
class TokenUsage:
    """Token usage statistics."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self) -> None:
        if self.total_tokens == 0:
            self.total_tokens = self.input_tokens + self.output_tokens


@dataclass
class CompletionResponse:
    """Normalized completion response.

    ``content`` holds Anthropic-style content blocks: ``text`` blocks and
    ``tool_use`` blocks with ``name`` and ``input``.
    """

    content: list[dict[str, Any]]
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    finish_reason: str = "unknown"
    created_at: datetime = field(default_factory=datetime.now)

    def model_dump(self) -> dict[str, Any]:
        """Convert to dict format (for the tool call parser)."""
        return {
            "content": self.content,
            "model": self.model,
            "finish_reason": self.finish_reason,
        }


@dataclass
class Proposal:
    """What the model answered: text and zero or more proposed tool calls."""

    text: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    not_configured: bool = False
    usage: TokenUsage = field(default_factory=TokenUsage)
