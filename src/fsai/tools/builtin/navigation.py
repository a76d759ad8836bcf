"""Navigation tool: moves the user's view to another directory."""

import logging

from fsai.tools.base import ToolContext, ToolExecutionError
from fsai.tools.builtin.file import FileSystemTool
from fsai.tools.models import NavigateParams, NavigationPayload, ToolKind, ToolParameter

logger = logging.getLogger(__name__)


class NavigateTool(FileSystemTool):
    """Validate a directory the user should be taken to.

    The tool itself changes nothing on disk; the turn controller applies the
    new current path to the conversation.
    """

    @property
    def kind(self) -> ToolKind:
        return ToolKind.NAVIGATE

    @property
    def description(self) -> str:
        return (
            "Navigates the user to a specified path on their file explorer. "
            "Use this if the user asks to navigate to a specific path, asks to "
            "find something, or asks to see a directory."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The path to navigate to.",
            ),
        ]

    def run(self, params: NavigateParams, context: ToolContext) -> NavigationPayload:
        target = context.resolve(params.path)

        if not target.exists():
            raise ToolExecutionError(f"Path does not exist: {target}", path=str(target))
        if not target.is_dir():
            raise ToolExecutionError(f"Path is not a directory: {target}", path=str(target))

        logger.info(f"Navigation validated: {target}")
        return NavigationPayload(path=str(target))
