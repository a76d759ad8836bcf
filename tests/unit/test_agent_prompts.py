"""Tests for prompt construction."""

from fsai.agent.models import AIContext, ChatMessage, ChatRole, ContextHistory, FileSnippet
from fsai.agent.prompts import (
    CONTENT_TRUNCATION_MARKER,
    FOLLOWUP_INSTRUCTIONS,
    build_followup_prompt,
    build_request_prompt,
    format_result,
    format_results,
    render_context,
)
from fsai.tools.models import (
    DirectoryListingPayload,
    DirectoryTreePayload,
    FileContentPayload,
    FileEntry,
    MediaPayload,
    MessagePayload,
    NavigationPayload,
    ToolResult,
)


def context(**kwargs):
    defaults = {"current_path": "/home/user", "folders": ["docs"], "files": ["notes.txt"]}
    return AIContext(**{**defaults, **kwargs})


class TestRenderContext:
    def test_listing(self):
        text = render_context(context())
        assert "- Current path: /home/user" in text
        assert "- Folders: docs" in text
        assert "- Files: notes.txt" in text

    def test_empty_listing(self):
        text = render_context(context(folders=[], files=[]))
        assert "- Folders: None" in text
        assert "- Files: None" in text

    def test_navigated_note(self):
        text = render_context(context(), navigated=True)
        assert "(just navigated here from previous location)" in text

    def test_history_and_snippets(self):
        history = ContextHistory(
            messages=[ChatMessage(role=ChatRole.USER, content="rename it")],
            file_contents=[FileSnippet(path="/home/user/notes.txt", content="buy milk")],
        )
        text = render_context(context(history=history))
        assert "USER: rename it" in text
        assert "File: /home/user/notes.txt\nContent: buy milk" in text

    def test_request_prompt(self):
        text = build_request_prompt(context(), "List my files")
        assert text.endswith("User request: List my files")


class TestFormatResult:
    def test_denied(self):
        assert format_result(ToolResult.denied("tc_1")) == (
            "Tool call for 'tc_1' was denied by the user."
        )

    def test_error(self):
        assert format_result(ToolResult.failure("tc_1", "boom")) == (
            "Tool execution for 'tc_1' failed: boom"
        )

    def test_file_content(self):
        result = ToolResult.success("tc_1", FileContentPayload(path="/a.txt", content="hi"))
        assert format_result(result) == "Content of /a.txt:\nhi"

    def test_file_content_truncated(self):
        result = ToolResult.success("tc_1", FileContentPayload(path="/a.txt", content="x" * 50))
        text = format_result(result, read_preview_chars=10)
        assert "x" * 10 + "\n" + CONTENT_TRUNCATION_MARKER in text
        assert "x" * 11 not in text

    def test_listing(self):
        payload = DirectoryListingPayload(
            path="/w",
            entries=[
                FileEntry(name="docs", path="/w/docs", is_directory=True, is_file=False),
                FileEntry(name="a.txt", path="/w/a.txt", is_directory=False, is_file=True),
            ],
        )
        text = format_result(ToolResult.success("tc_1", payload))
        assert text == "Directory listing for /w:\n📁 docs\n📄 a.txt"

    def test_tree(self):
        payload = DirectoryTreePayload(path="/w", tree="└── a.txt\n")
        text = format_result(ToolResult.success("tc_1", payload))
        assert text == "Directory tree for /w:\n└── a.txt"

    def test_navigation(self):
        text = format_result(ToolResult.success("tc_1", NavigationPayload(path="/w/docs")))
        assert text == "Successfully navigated the user to: /w/docs"

    def test_media(self):
        payload = MediaPayload.from_bytes("/w/cat.png", "image/png", b"123")
        assert "has been processed" in format_result(ToolResult.success("tc_1", payload))

    def test_message(self):
        payload = MessagePayload(message="Renamed 'a' to 'b'")
        assert format_result(ToolResult.success("tc_1", payload)) == (
            "Tool call for 'tc_1' completed successfully: Renamed 'a' to 'b'"
        )


class TestFollowupPrompt:
    def test_single_header(self):
        text = format_results([ToolResult.denied("tc_1")])
        assert text.startswith("I have executed a tool call")

    def test_multiple_header(self):
        text = format_results([ToolResult.denied("tc_1"), ToolResult.denied("tc_2")])
        assert text.startswith("I have executed multiple tool calls")

    def test_followup_prompt(self):
        text = build_followup_prompt(
            context(),
            "Tidy up",
            [ToolResult.denied("tc_1")],
            navigated=True,
        )
        assert "Original user request: Tidy up" in text
        assert "was denied by the user" in text
        assert "(just navigated here" in text
        assert text.endswith(FOLLOWUP_INSTRUCTIONS)
