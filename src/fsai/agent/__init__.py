"""Agent turn orchestration.

This module provides the human-in-the-loop turn machinery:
- Build a bounded context for each model call
- Parse proposed tool calls and classify their risk
- Hold proposals until the user accepts or denies them
- Feed the results back to the model until it gives a final answer

The ``FileSystemAgent`` facade lives in ``fsai.agent.session``.
"""

from fsai.agent.context import ContextBuilder
from fsai.agent.conversation import Conversation
from fsai.agent.gate import ConfirmationGate, UnknownToolCallError
from fsai.agent.history import truncate_history
from fsai.agent.loop import TurnController, TurnStateError
from fsai.agent.models import (
    AgentEvent,
    AIContext,
    ChatMessage,
    ChatRole,
    Decision,
    DecisionType,
    EventType,
    FileSnippet,
    TurnState,
    TurnUpdate,
)
from fsai.agent.parser import ToolCallParser

__all__ = [
    "AIContext",
    "AgentEvent",
    "ChatMessage",
    "ChatRole",
    "ConfirmationGate",
    "ContextBuilder",
    "Conversation",
    "Decision",
    "DecisionType",
    "EventType",
    "FileSnippet",
    "ToolCallParser",
    "TurnController",
    "TurnState",
    "TurnStateError",
    "TurnUpdate",
    "UnknownToolCallError",
    "truncate_history",
]
