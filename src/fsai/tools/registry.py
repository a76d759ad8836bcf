"""Tool registry for managing available tools."""

import logging
from typing import Optional

from fsai.tools.base import Tool
from fsai.tools.models import ToolKind

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for managing available tools.

    The registry maps each tool kind to the tool that handles it and
    produces the tool definitions offered to the model.
    """

    def __init__(self):
        """Initialize the tool registry."""
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register

        Raises:
            ValueError: If tool name already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> bool:
        """Unregister a tool.

        Returns:
            True if tool was unregistered, False if not found
        """
        if name in self._tools:
            del self._tools[name]
            logger.debug(f"Unregistered tool: {name}")
            return True
        return False

    def get(self, name: str | ToolKind) -> Optional[Tool]:
        """Get a tool by name or kind.

        Returns:
            Tool instance or None if not found
        """
        key = name.value if isinstance(name, ToolKind) else name
        return self._tools.get(key)

    def list_tools(self, multimedia_support: bool = True) -> list[Tool]:
        """Get registered tools in registration order.

        Args:
            multimedia_support: Include tools that need multimedia support

        Returns:
            List of tools
        """
        return [
            tool
            for tool in self._tools.values()
            if multimedia_support or not tool.requires_multimedia
        ]

    def list_tool_names(self) -> list[str]:
        """Get list of all registered tool names."""
        return list(self._tools.keys())

    def get_tool_definitions(self, multimedia_support: bool = False) -> list[dict]:
        """Get tool definitions for the model.

        Args:
            multimedia_support: Offer the media-loading tool

        Returns:
            List of tool definitions in OpenAI function-calling format
        """
        return [tool.get_tool_definition() for tool in self.list_tools(multimedia_support)]

    def get_safe_tools(self) -> list[Tool]:
        """Get list of low-risk tools."""
        return [tool for tool in self._tools.values() if not tool.is_dangerous]

    def get_dangerous_tools(self) -> list[Tool]:
        """Get list of high-risk tools."""
        return [tool for tool in self._tools.values() if tool.is_dangerous]

    def clear(self) -> None:
        """Clear all registered tools."""
        self._tools.clear()
        logger.debug("Cleared all tools from registry")

    def __len__(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        """Check if tool is registered."""
        return name in self._tools

    def __str__(self) -> str:
        """String representation."""
        return f"ToolRegistry({len(self._tools)} tools)"

    def __repr__(self) -> str:
        """Representation."""
        tools = ", ".join(self._tools.keys())
        return f"<ToolRegistry tools=[{tools}]>"


# Global registry instance
_tool_registry: Optional[ToolRegistry] = None


def get_tool_registry() -> ToolRegistry:
    """Get the global tool registry, with the built-in tools registered.

    Returns:
        ToolRegistry singleton
    """
    global _tool_registry
    if _tool_registry is None:
        from fsai.tools.builtin import register_builtin_tools

        _tool_registry = ToolRegistry()
        register_builtin_tools(_tool_registry)
    return _tool_registry


def reset_tool_registry() -> None:
    """Reset the global tool registry instance.

    Useful for testing.
    """
    global _tool_registry
    _tool_registry = None
