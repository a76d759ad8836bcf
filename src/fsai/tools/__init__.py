"""Tool system for FSai file operations.

This module provides the foundation for tool use, enabling the model to:
- Read files and explore directories
- Create, write, rename, copy, move and delete items
- Load media for inspection
- Navigate the user's view

Every path a tool touches passes the access guard first.
"""

from fsai.tools.base import (
    AccessDeniedError,
    Tool,
    ToolContext,
    ToolExecutionError,
    ToolValidationError,
)
from fsai.tools.executor import ToolExecutor
from fsai.tools.models import (
    RiskLevel,
    ToolCall,
    ToolKind,
    ToolParameter,
    ToolResult,
    ToolStatus,
)
from fsai.tools.registry import ToolRegistry, get_tool_registry, reset_tool_registry
from fsai.tools.risk import classify

__all__ = [
    "AccessDeniedError",
    "RiskLevel",
    "Tool",
    "ToolCall",
    "ToolContext",
    "ToolExecutionError",
    "ToolExecutor",
    "ToolKind",
    "ToolParameter",
    "ToolRegistry",
    "ToolResult",
    "ToolStatus",
    "ToolValidationError",
    "classify",
    "get_tool_registry",
    "reset_tool_registry",
]
