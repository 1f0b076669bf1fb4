"""
System prompt builder for textual tool calling.

Backends without native tool calling are told about tools in plain text and
asked to reply with:

    TOOL_CALL: tool_name
    ARGUMENTS: {"param": "value"}

tool_parsers.py decodes that format back into ToolCall records.
"""

import json
from typing import Any, Sequence

from model_switch.schema import ToolDefinition

TOOL_CALL_PREFIX = "TOOL_CALL:"
ARGUMENTS_PREFIX = "ARGUMENTS:"

PLAIN_ASSISTANT_PROMPT = "You are a helpful AI assistant."

TOOL_PROMPT_HEADER = f"""You are a helpful AI assistant with access to the following tools. You can use these tools to help answer questions.

IMPORTANT: When you need to use a tool, you MUST respond in this EXACT format:
{TOOL_CALL_PREFIX} tool_name
{ARGUMENTS_PREFIX} {{"param1": "value1", "param2": "value2"}}

You MUST include ALL required parameters. Do not make up parameter names - only use the parameters listed below.

Available tools:
"""

TOOL_PROMPT_EXAMPLE = f"""

Example usage:
If user asks: 'Search my memories for Python tutorials'
You should respond:
{TOOL_CALL_PREFIX} search
{ARGUMENTS_PREFIX} {{"query": "Python tutorials", "search_type": "semantic"}}

Remember: Only include parameters that are listed for that specific tool. Include all required parameters."""

TOOL_PROMPT_FOOTER = (
    "\n\nOnly use tools when necessary to answer the user's question. "
    "If you don't need a tool, respond normally."
)


def _format_value(value: Any) -> str:
    """Render a schema value the way it would appear in JSON."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def format_parameters(parameters: dict) -> str:
    """
    Describe a JSON-Schema object's properties, one line per parameter.

    Properties are listed in schema order. Returns an empty string when the
    schema has no usable properties.
    """
    properties = parameters.get("properties")
    if not isinstance(properties, dict) or not properties:
        return ""

    required = parameters.get("required")
    required_names = {r for r in required if isinstance(r, str)} if isinstance(required, list) else set()

    lines = ["\n  Parameters:"]
    for name, info in properties.items():
        if not isinstance(info, dict):
            continue

        marker = "required" if name in required_names else "optional"
        line = f"\n    - {name} ({marker})"

        param_type = info.get("type")
        if isinstance(param_type, str):
            line += f", type: {param_type}"
            if param_type == "array":
                items = info.get("items")
                if isinstance(items, dict) and isinstance(items.get("type"), str):
                    line += f" (items are {items['type']})"

        description = info.get("description")
        if isinstance(description, str):
            line += f" - {description}"

        enum = info.get("enum")
        if isinstance(enum, list) and enum:
            line += "\n      Allowed values: " + ", ".join(_format_value(v) for v in enum)

        if "default" in info:
            line += f"\n      Default: {_format_value(info['default'])}"

        lines.append(line)

    return "".join(lines)


def build_tool_prompt(tools: Sequence[ToolDefinition]) -> str:
    """
    Build the system instruction that describes `tools` to the model.

    With no tools, returns a plain assistant instruction that never
    mentions the tool-call format.
    """
    if not tools:
        return PLAIN_ASSISTANT_PROMPT

    prompt = TOOL_PROMPT_HEADER
    for tool in tools:
        prompt += f"\n- **{tool.name}**: {tool.description}"
        if tool.parameters:
            prompt += format_parameters(tool.parameters)

    prompt += TOOL_PROMPT_EXAMPLE
    prompt += TOOL_PROMPT_FOOTER
    return prompt
