"""Tests for the tool-call system prompt builder."""

from model_switch.schema import ToolDefinition
from model_switch.tool_prompt import build_tool_prompt, format_parameters
from tests.conftest import SEARCH_TOOL


def _line_for(prompt: str, param: str) -> str:
    """Return the parameter line plus its continuation lines."""
    lines = prompt.split("\n")
    for i, line in enumerate(lines):
        if line.strip().startswith(f"- {param} ("):
            block = [line]
            for follow in lines[i + 1:]:
                if follow.startswith("      "):
                    block.append(follow)
                else:
                    break
            return "\n".join(block)
    raise AssertionError(f"parameter {param} not found in prompt")


class TestNoTools:
    def test_plain_instruction(self):
        prompt = build_tool_prompt([])
        assert prompt == "You are a helpful AI assistant."
        assert "TOOL_CALL" not in prompt


class TestFormat:
    def test_describes_exact_response_format(self):
        prompt = build_tool_prompt([SEARCH_TOOL])
        assert "TOOL_CALL: tool_name" in prompt
        assert "ARGUMENTS: {" in prompt
        assert "You MUST include ALL required parameters" in prompt

    def test_tool_name_and_description(self):
        prompt = build_tool_prompt([SEARCH_TOOL])
        assert "- **search**: Search stored memories" in prompt

    def test_required_vs_optional_with_default(self):
        prompt = build_tool_prompt([SEARCH_TOOL])

        query = _line_for(prompt, "query")
        assert "query (required)" in query
        assert "type: string" in query
        assert "Search query" in query

        limit = _line_for(prompt, "limit")
        assert "limit (optional)" in limit
        assert "Default: 10" in limit

    def test_enum_values_in_schema_order(self):
        prompt = build_tool_prompt([SEARCH_TOOL])
        search_type = _line_for(prompt, "search_type")
        assert "Allowed values: semantic, keyword, hybrid" in search_type
        assert "Default: semantic" in search_type

    def test_parameters_listed_in_schema_order(self):
        prompt = build_tool_prompt([SEARCH_TOOL])
        assert prompt.index("- query (") < prompt.index("- search_type (") < prompt.index("- limit (")

    def test_array_item_type(self):
        tool = ToolDefinition(
            name="tag",
            description="Tag a memory",
            parameters={
                "properties": {
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["tags"],
            },
        )
        assert "tags (required), type: array (items are string)" in build_tool_prompt([tool])

    def test_boolean_default_rendered_as_json(self):
        text = format_parameters(
            {"properties": {"recursive": {"type": "boolean", "default": False}}}
        )
        assert "Default: false" in text

    def test_multiple_tools_all_listed(self):
        other = ToolDefinition(name="read_file", description="Read a file")
        prompt = build_tool_prompt([SEARCH_TOOL, other])
        assert "**search**" in prompt
        assert "- **read_file**: Read a file" in prompt

    def test_tool_without_parameters_has_no_parameter_block(self):
        tool = ToolDefinition(name="now", description="Current time")
        prompt = build_tool_prompt([tool])
        assert "Parameters:" not in prompt

    def test_includes_worked_example_and_closing(self):
        prompt = build_tool_prompt([SEARCH_TOOL])
        assert "Example usage:" in prompt
        assert 'TOOL_CALL: search\nARGUMENTS: {"query": "Python tutorials"' in prompt
        assert prompt.endswith("If you don't need a tool, respond normally.")
