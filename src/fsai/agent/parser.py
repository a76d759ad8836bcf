"""Parser for extracting tool calls from model responses."""

import json
import logging
import random
import string
from typing import Any

from fsai.tools.models import ToolCall
from fsai.tools.risk import classify

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 9

# Per-kind description templates, filled with the call's arguments
_DESCRIPTIONS = {
    "read_file": "Read file: {path}",
    "process_file": "Process file: {path}",
    "write_file": "Write to file: {path}",
    "read_directory": "List contents of: {path}",
    "get_tree": "Get tree for: {path}",
    "move_item": "Move item from {sourcePath} to {destinationPath}",
    "create_directory": "Create directory '{name}' in '{path}'",
    "navigate_user": "Navigate to: {path}",
    "rename_file": "Rename file: {path} to {newName}",
    "delete_item": "Delete item: {path}",
    "copy_file": "Copy file: {path} to {destinationPath}",
}

_MISSING = {
    "path": "unknown path",
    "name": "unknown name",
    "newName": "unknown name",
    "sourcePath": "unknown path",
    "destinationPath": "unknown destination path",
}

# Parameter models also accept the snake_case field names
_SNAKE_CASE = {
    "newName": "new_name",
    "sourcePath": "source_path",
    "destinationPath": "destination_path",
}


def generate_tool_call_id() -> str:
    """Generate a tool call id of the form ``tc_`` + 9 base36 characters."""
    return "tc_" + "".join(random.choices(_ID_ALPHABET, k=_ID_LENGTH))


def describe_tool_call(name: str, arguments: dict[str, Any]) -> str:
    """Human-readable description of a proposed call, shown when confirming."""
    template = _DESCRIPTIONS.get(name)
    if template is None:
        return f"Execute {name}"

    values = {
        key: (arguments.get(key) or arguments.get(_SNAKE_CASE.get(key, key)) or missing)
        for key, missing in _MISSING.items()
    }
    return template.format(**values)


class ToolCallParser:
    """Parses tool calls from model responses.

    Accepts content blocks in Anthropic's tool use format; the gateway
    converts OpenAI-style ``tool_calls`` into these blocks.
    """

    @staticmethod
    def parse_response(
        response: dict[str, Any], taken_ids: set[str] | None = None
    ) -> list[ToolCall]:
        """Parse tool calls from a model response.

        Each call gets a fresh id (unique against ``taken_ids``, which is
        updated in place), a description and a risk tier. Provider ids are
        not reused.

        Args:
            response: Response dict with a ``content`` list of blocks
            taken_ids: Ids already issued in the current turn

        Returns:
            List of ToolCall objects

        The block format:
        {
            "content": [
                {"type": "text", "text": "I'll rename it..."},
                {
                    "type": "tool_use",
                    "id": "call_123",
                    "name": "rename_file",
                    "input": {"path": "a.txt", "newName": "b.txt"}
                }
            ]
        }
        """
        taken = taken_ids if taken_ids is not None else set()
        tool_calls = []

        content = response.get("content")
        if not content or isinstance(content, str):
            return tool_calls

        if not isinstance(content, list):
            logger.warning(f"Unexpected content type: {type(content)}")
            return tool_calls

        for block in content:
            if not isinstance(block, dict) or block.get("type") != "tool_use":
                continue

            tool_name = block.get("name")
            if not tool_name:
                logger.warning(f"Invalid tool use block: {block}")
                continue

            tool_input = block.get("input") or {}

            # Some providers send the arguments as a JSON string
            if isinstance(tool_input, str):
                try:
                    tool_input = json.loads(tool_input) if tool_input.strip() else {}
                except json.JSONDecodeError:
                    logger.warning(f"Failed to parse tool input as JSON: {tool_input}")
                    tool_input = {}

            if not isinstance(tool_input, dict):
                logger.warning(f"Ignoring non-object tool input for {tool_name}: {tool_input}")
                tool_input = {}

            tool_id = generate_tool_call_id()
            while tool_id in taken:
                tool_id = generate_tool_call_id()
            taken.add(tool_id)

            tool_calls.append(
                ToolCall(
                    id=tool_id,
                    name=tool_name,
                    arguments=tool_input,
                    description=describe_tool_call(tool_name, tool_input),
                    risk=classify(tool_name),
                )
            )

        return tool_calls

    @staticmethod
    def extract_text_content(response: dict[str, Any]) -> str:
        """Extract text content from a model response.

        Returns:
            Concatenated text content (empty string if none)
        """
        content = response.get("content")
        if not content:
            return ""

        if isinstance(content, str):
            return content

        if not isinstance(content, list):
            return ""

        text_parts = []
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text", "")
                if text:
                    text_parts.append(text)

        return "\n".join(text_parts)

