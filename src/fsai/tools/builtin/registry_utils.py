"""Utility functions for tool registry setup."""

import logging

from fsai.tools.builtin.file import (
    CopyFileTool,
    CreateDirectoryTool,
    DeleteItemTool,
    GetTreeTool,
    MoveItemTool,
    ReadDirectoryTool,
    ReadFileTool,
    RenameFileTool,
    WriteFileTool,
)
from fsai.tools.builtin.media import ProcessFileTool
from fsai.tools.builtin.navigation import NavigateTool
from fsai.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def register_builtin_tools(registry: ToolRegistry) -> None:
    """Register all built-in tools.

    Registration order is the order tools are offered to the model.

    Args:
        registry: ToolRegistry to register tools in
    """
    # Read-only
    registry.register(ReadFileTool())
    registry.register(ReadDirectoryTool())
    registry.register(GetTreeTool())

    # Mutations
    registry.register(MoveItemTool())
    registry.register(CreateDirectoryTool())
    registry.register(WriteFileTool())

    registry.register(NavigateTool())

    registry.register(RenameFileTool())
    registry.register(DeleteItemTool())
    registry.register(CopyFileTool())

    # Offered only with multimedia support
    registry.register(ProcessFileTool())

    logger.info(f"Registered {len(registry)} built-in tools")
