"""Tests for tool call parsing."""

import re

from fsai.agent.parser import ToolCallParser, describe_tool_call, generate_tool_call_id
from fsai.tools.models import RiskLevel

ID_PATTERN = re.compile(r"^tc_[0-9a-z]{9}$")


def tool_use(name, arguments, block_id="call_1"):
    return {"type": "tool_use", "id": block_id, "name": name, "input": arguments}


class TestToolCallIds:
    def test_format(self):
        for _ in range(50):
            assert ID_PATTERN.match(generate_tool_call_id())

    def test_provider_ids_not_reused(self):
        response = {"content": [tool_use("read_file", {"path": "a"}, "call_abc")]}
        calls = ToolCallParser.parse_response(response)
        assert calls[0].id != "call_abc"
        assert ID_PATTERN.match(calls[0].id)

    def test_unique_against_taken(self, monkeypatch):
        ids = iter(["tc_aaaaaaaaa", "tc_aaaaaaaaa", "tc_bbbbbbbbb"])
        monkeypatch.setattr("fsai.agent.parser.generate_tool_call_id", lambda: next(ids))

        taken = {"tc_aaaaaaaaa"}
        calls = ToolCallParser.parse_response(
            {"content": [tool_use("read_file", {"path": "a"})]}, taken
        )

        assert calls[0].id == "tc_bbbbbbbbb"
        assert taken == {"tc_aaaaaaaaa", "tc_bbbbbbbbb"}

    def test_ids_distinct_within_response(self):
        response = {
            "content": [tool_use("read_file", {"path": str(i)}, "same") for i in range(10)]
        }
        calls = ToolCallParser.parse_response(response)
        assert len({c.id for c in calls}) == 10


class TestParseResponse:
    def test_text_and_calls(self):
        response = {
            "content": [
                {"type": "text", "text": "I'll rename it."},
                tool_use("rename_file", {"path": "notes.txt", "newName": "todo.txt"}),
            ]
        }
        calls = ToolCallParser.parse_response(response)

        assert len(calls) == 1
        call = calls[0]
        assert call.name == "rename_file"
        assert call.arguments == {"path": "notes.txt", "newName": "todo.txt"}
        assert call.description == "Rename file: notes.txt to todo.txt"
        assert call.risk == RiskLevel.HIGH
        assert ToolCallParser.extract_text_content(response) == "I'll rename it."

    def test_json_string_arguments(self):
        response = {"content": [tool_use("read_file", '{"path": "/tmp/a.txt"}')]}
        calls = ToolCallParser.parse_response(response)
        assert calls[0].arguments == {"path": "/tmp/a.txt"}
        assert calls[0].risk == RiskLevel.LOW

    def test_invalid_json_arguments(self):
        response = {"content": [tool_use("delete_item", "{not json")]}
        calls = ToolCallParser.parse_response(response)
        assert calls[0].arguments == {}
        assert calls[0].description == "Delete item: unknown path"

    def test_non_object_arguments(self):
        calls = ToolCallParser.parse_response({"content": [tool_use("read_file", [1, 2])]})
        assert calls[0].arguments == {}

    def test_unknown_tool_is_high_risk(self):
        calls = ToolCallParser.parse_response({"content": [tool_use("format_disk", {})]})
        assert calls[0].risk == RiskLevel.HIGH
        assert calls[0].description == "Execute format_disk"

    def test_blocks_without_name_skipped(self):
        response = {"content": [{"type": "tool_use", "input": {}}, "junk"]}
        assert ToolCallParser.parse_response(response) == []

    def test_plain_text_content(self):
        response = {"content": "Just text"}
        assert ToolCallParser.parse_response(response) == []
        assert ToolCallParser.extract_text_content(response) == "Just text"


class TestDescriptions:
    def test_templates(self):
        assert describe_tool_call("read_file", {"path": "a.txt"}) == "Read file: a.txt"
        assert (
            describe_tool_call("move_item", {"sourcePath": "a", "destinationPath": "b"})
            == "Move item from a to b"
        )
        assert (
            describe_tool_call("create_directory", {"path": "/x", "name": "new"})
            == "Create directory 'new' in '/x'"
        )
        assert describe_tool_call("navigate_user", {"path": "/x"}) == "Navigate to: /x"

    def test_missing_values(self):
        assert describe_tool_call("copy_file", {}) == (
            "Copy file: unknown path to unknown destination path"
        )
        assert describe_tool_call("rename_file", {"path": "a"}) == "Rename file: a to unknown name"

    def test_snake_case_arguments(self):
        assert (
            describe_tool_call("move_item", {"source_path": "a", "destination_path": "b"})
            == "Move item from a to b"
        )
        assert (
            describe_tool_call("rename_file", {"path": "a", "new_name": "b"})
            == "Rename file: a to b"
        )
