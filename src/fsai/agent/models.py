"""Data models for agent turns."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from fsai.tools.models import ToolCall, ToolResult


class ChatRole(str, Enum):
    """Author of a conversation message."""

    USER = "user"
    AI = "ai"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """One entry of the append-only conversation log."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    role: ChatRole
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class FileSnippet(BaseModel):
    """A previously read file kept for context."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ContextHistory(BaseModel):
    """History section of the model context, already truncated."""

    model_config = ConfigDict(frozen=True)

    messages: list[ChatMessage] = Field(default_factory=list)
    file_contents: list[FileSnippet] = Field(default_factory=list)


class ContextSettings(BaseModel):
    """Settings carried with a context snapshot."""

    model_config = ConfigDict(frozen=True)

    allow_root_access: bool = False


class AIContext(BaseModel):
    """Snapshot of everything the model sees about the user's situation.

    Rebuilt before every model call.
    """

    model_config = ConfigDict(frozen=True)

    current_path: str
    folders: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    history: ContextHistory = Field(default_factory=ContextHistory)
    settings: ContextSettings = Field(default_factory=ContextSettings)

    @property
    def allow_root_access(self) -> bool:
        return self.settings.allow_root_access


class TurnState(str, Enum):
    """States of the turn state machine."""

    IDLE = "idle"
    AWAITING_PROPOSAL = "awaiting_proposal"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    EXECUTING = "executing"
    AWAITING_FOLLOWUP = "awaiting_followup"


class DecisionType(str, Enum):
    """User decision on a pending tool call."""

    ACCEPT = "accept"
    DENY = "deny"


class Decision(BaseModel):
    """A confirmation decision, delivered to the turn controller as a message."""

    model_config = ConfigDict(frozen=True)

    tool_call_id: str
    decision: DecisionType

    @classmethod
    def accept(cls, tool_call_id: str) -> "Decision":
        return cls(tool_call_id=tool_call_id, decision=DecisionType.ACCEPT)

    @classmethod
    def deny(cls, tool_call_id: str) -> "Decision":
        return cls(tool_call_id=tool_call_id, decision=DecisionType.DENY)


class TurnUpdate(BaseModel):
    """What the UI needs after each step of a turn."""

    state: TurnState
    text: Optional[str] = Field(
        default=None,
        description="Model text for this step (final answer once the turn is idle)",
    )
    pending: list[ToolCall] = Field(
        default_factory=list,
        description="Tool calls awaiting a decision",
    )
    results: list[ToolResult] = Field(
        default_factory=list,
        description="Results recorded so far in the current round",
    )
    iteration: int = Field(default=0, description="Follow-up rounds completed")
    failed: bool = False
    error: Optional[str] = None

    @property
    def is_final(self) -> bool:
        """Whether the turn has ended."""
        return self.state == TurnState.IDLE


class EventType(str, Enum):
    """Turn events, for streaming progress to a UI."""

    TURN_START = "turn_start"
    AI_RESPONSE = "ai_response"
    TOOL_APPROVAL_NEEDED = "tool_approval_needed"
    TOOL_APPROVED = "tool_approved"
    TOOL_DENIED = "tool_denied"
    TOOL_START = "tool_start"
    TOOL_COMPLETE = "tool_complete"
    TOOL_ERROR = "tool_error"
    FOLLOWUP_START = "followup_start"
    NAVIGATED = "navigated"
    TURN_COMPLETE = "turn_complete"
    TURN_ERROR = "turn_error"


class AgentEvent(BaseModel):
    """Event emitted during a turn."""

    model_config = ConfigDict(use_enum_values=True)

    event_type: EventType = Field(description="Type of event")

    iteration: int = Field(description="Follow-up rounds completed so far")

    tool_name: Optional[str] = Field(
        default=None,
        description="Tool name (for tool events)",
    )

    tool_call_id: Optional[str] = Field(
        default=None,
        description="Tool call ID (for tool events)",
    )

    message: Optional[str] = Field(
        default=None,
        description="Human-readable message describing the event",
    )

    data: Optional[dict[str, Any]] = Field(
        default=None,
        description="Additional event data",
    )

    timestamp: Optional[str] = Field(
        default=None,
        description="ISO format timestamp",
    )
