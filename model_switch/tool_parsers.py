"""
Tool call parser for the textual TOOL_CALL/ARGUMENTS format.

Models prompted by tool_prompt.build_tool_prompt() reply with blocks like:

    TOOL_CALL: search
    ARGUMENTS: {"query": "python"}

Parsing is best-effort. A block whose ARGUMENTS line is missing or not a
JSON object still yields a ToolCall, with empty arguments; nothing here
raises on malformed model output.
"""

import json
from typing import Optional

from model_switch.schema import ToolCall
from model_switch.tool_prompt import ARGUMENTS_PREFIX, TOOL_CALL_PREFIX


class ToolCallParser:
    """
    Single-pass, line-oriented parser.

    Each line is whitespace-trimmed. TOOL_CALL: opens a record (closing the
    previous one), ARGUMENTS: fills in the open record, anything else is
    ordinary reply text and is skipped. Holds no state between parse() calls.
    """

    def parse(self, response: str) -> list[ToolCall]:
        tool_calls: list[ToolCall] = []
        current: Optional[ToolCall] = None

        for raw_line in response.split("\n"):
            line = raw_line.strip()

            if line.startswith(TOOL_CALL_PREFIX):
                if current is not None:
                    tool_calls.append(current)
                name = line[len(TOOL_CALL_PREFIX):].strip()
                current = ToolCall(name=name, arguments={})

            elif line.startswith(ARGUMENTS_PREFIX) and current is not None:
                arguments = self._parse_arguments(line[len(ARGUMENTS_PREFIX):].strip())
                if arguments is not None:
                    current = ToolCall(name=current.name, arguments=arguments)

        if current is not None:
            tool_calls.append(current)

        return tool_calls

    @staticmethod
    def _parse_arguments(text: str) -> Optional[dict]:
        try:
            data = json.loads(text)
        except (ValueError, RecursionError):
            return None
        return data if isinstance(data, dict) else None


def parse_tool_calls(response: str) -> list[ToolCall]:
    """
    Parse tool calls from a model reply.

    Args:
        response: The model's raw reply text (not modified)

    Returns:
        ToolCall records in the order they appear; empty if none
    """
    return ToolCallParser().parse(response)
