"""Built-in tools for the FSai agent.

This module provides the tools that let the model:
- Read files and list or render directories
- Write, create, rename, copy, move and delete items
- Load images, PDFs and videos (multimedia support)
- Navigate the user to another directory
"""

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
    generate_tree,
    list_directory,
)
from fsai.tools.builtin.media import ProcessFileTool
from fsai.tools.builtin.navigation import NavigateTool
from fsai.tools.builtin.registry_utils import register_builtin_tools

__all__ = [
    "CopyFileTool",
    "CreateDirectoryTool",
    "DeleteItemTool",
    "GetTreeTool",
    "MoveItemTool",
    "NavigateTool",
    "ProcessFileTool",
    "ReadDirectoryTool",
    "ReadFileTool",
    "RenameFileTool",
    "WriteFileTool",
    "generate_tree",
    "list_directory",
    "register_builtin_tools",
]
