"""Prompt text for initial and follow-up model calls."""

from collections.abc import Sequence

from fsai.agent.models import AIContext
from fsai.tools.models import (
    DirectoryListingPayload,
    DirectoryTreePayload,
    FileContentPayload,
    MediaPayload,
    MessagePayload,
    NavigationPayload,
    ToolResult,
    ToolStatus,
)

CONTENT_TRUNCATION_MARKER = "...(content truncated)"

SYSTEM_PROMPT = """You are a helpful file system assistant. Be concise and direct in your responses unless the user specifically asks for detailed explanations.

You can help with file, directory, and navigation operations. When appropriate, use the available tools to complete the user's request.
Use the get_tree tool when you are unsure what the user is referring to, and scope it to the most specific directory you can.
Every tool call is shown to the user for confirmation before it runs; the user may deny any of them.
Keep responses brief and focused unless detailed explanation is requested."""

FOLLOWUP_INSTRUCTIONS = (
    "Now, analyze the results. If the original request is fully addressed, "
    "provide a final, concise response. If more steps are needed, you can use "
    "tools again. For example, after reading a file, you might need to move it. "
    "Also, inform the user about any actions they denied."
)


def render_context(context: AIContext, navigated: bool = False) -> str:
    """Render the directory context and history block."""
    path_line = f"- Current path: {context.current_path}"
    if navigated:
        path_line += " (just navigated here from previous location)"

    lines = [
        "Current directory context:",
        path_line,
        f"- Folders: {', '.join(context.folders) or 'None'}",
        f"- Files: {', '.join(context.files) or 'None'}",
    ]

    if context.history.messages:
        lines.append("")
        lines.append("Recent conversation history:")
        lines.extend(
            f"{m.role.value.upper()}: {m.content}" for m in context.history.messages
        )

    if context.history.file_contents:
        lines.append("")
        lines.append("Previously read files:")
        lines.append(
            "\n\n".join(
                f"File: {s.path}\nContent: {s.content}"
                for s in context.history.file_contents
            )
        )

    return "\n".join(lines)


def build_request_prompt(context: AIContext, prompt: str) -> str:
    """Prompt for the first model call of a turn."""
    return f"{render_context(context)}\n\nUser request: {prompt}"


def format_result(result: ToolResult, read_preview_chars: int = 2000) -> str:
    """Summarize one tool result for the model."""
    if result.status == ToolStatus.DENIED:
        return f"Tool call for '{result.tool_call_id}' was denied by the user."

    if result.status == ToolStatus.ERROR or result.payload is None:
        return f"Tool execution for '{result.tool_call_id}' failed: {result.error}"

    payload = result.payload

    if isinstance(payload, FileContentPayload):
        if len(payload.content) > read_preview_chars:
            return (
                f"Content of {payload.path} (first {read_preview_chars} characters):\n"
                f"{payload.content[:read_preview_chars]}\n{CONTENT_TRUNCATION_MARKER}"
            )
        return f"Content of {payload.path}:\n{payload.content}"

    if isinstance(payload, DirectoryListingPayload):
        listing = "\n".join(
            f"{'📁' if e.is_directory else '📄'} {e.name}" for e in payload.entries
        )
        return f"Directory listing for {payload.path}:\n{listing or '(empty)'}"

    if isinstance(payload, DirectoryTreePayload):
        return f"Directory tree for {payload.path}:\n{payload.tree.rstrip() or '(empty)'}"

    if isinstance(payload, NavigationPayload):
        return f"Successfully navigated the user to: {payload.path}"

    if isinstance(payload, MediaPayload):
        return (
            f"The file {payload.path} has been processed and is included in the "
            "context for analysis."
        )

    if isinstance(payload, MessagePayload):
        return f"Tool call for '{result.tool_call_id}' completed successfully: {payload.message}"

    raise TypeError(f"Unhandled result payload: {type(payload).__name__}")


def format_results(results: Sequence[ToolResult], read_preview_chars: int = 2000) -> str:
    """Summarize all results of a round, in order."""
    header = (
        "I have executed multiple tool calls and retrieved the following information:"
        if len(results) > 1
        else "I have executed a tool call and retrieved the following information:"
    )
    body = "\n\n".join(format_result(r, read_preview_chars) for r in results)
    return f"{header}\n{body}"


def build_followup_prompt(
    context: AIContext,
    original_prompt: str,
    results: Sequence[ToolResult],
    navigated: bool = False,
    read_preview_chars: int = 2000,
) -> str:
    """Prompt re-invoking the model with the results of a round."""
    return (
        f"{render_context(context, navigated)}\n\n"
        f"Original user request: {original_prompt}\n\n"
        f"{format_results(results, read_preview_chars)}\n\n"
        f"{FOLLOWUP_INSTRUCTIONS}"
    )
