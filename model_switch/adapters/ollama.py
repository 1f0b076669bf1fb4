"""
OllamaAdapter - chat-native local server implementation of ModelBackend.

Ollama has no structured tool-calling on the models we target, so
chat_with_tools() emulates it: tool schemas go into a system prompt
(tool_prompt.py) and calls are parsed back out of the reply text
(tool_parsers.py).
"""

import logging
import time
from typing import Optional, Sequence

from model_switch.adapters.base import HTTPBackend, elapsed_since, sampling_fields
from model_switch.schema import (
    GenerateOptions,
    Message,
    Response,
    ToolDefinition,
    Usage,
)
from model_switch.config import DEFAULT_REQUEST_TIMEOUT_SECONDS
from model_switch.errors import ProtocolError
from model_switch.tool_parsers import parse_tool_calls
from model_switch.tool_prompt import build_tool_prompt

logger = logging.getLogger(__name__)


class OllamaAdapter(HTTPBackend):
    """
    Ollama implementation of ModelBackend and ToolCallingBackend.

    Usage:
        adapter = OllamaAdapter("http://localhost:11434", "qwen2.5:3b")
        response = await adapter.generate("Hello")
    """

    provider = "ollama"

    def __init__(
        self,
        host: str,
        model_name: str,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        super().__init__(host, timeout_seconds=timeout_seconds)
        self._model_name = model_name

    @property
    def model_name(self) -> str:
        return self._model_name

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        start = time.monotonic()

        payload = {
            "model": self._model_name,
            "messages": [m.model_dump() for m in messages],
            "stream": False,
            **sampling_fields(options),
        }

        data = await self._post_json("/api/chat", payload)

        error = data.get("error")
        if error:
            raise ProtocolError(f"ollama error: {error}", status_code=200, body=str(error))

        message = data.get("message") or {}
        content = message.get("content", "") if isinstance(message, dict) else ""

        return Response(
            content=content,
            finish_reason="stop" if data.get("done") else "",
            # Ollama reports no token counts on this endpoint; rough estimate
            usage=Usage(total_tokens=len(content) // 4),
            duration=elapsed_since(start),
        )

    async def chat_with_tools(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition],
        options: Optional[GenerateOptions] = None,
    ) -> Response:
        """
        Chat with tool schemas described in a leading system message.

        The reply content is returned untouched; any TOOL_CALL/ARGUMENTS
        blocks found in it are decoded into Response.tool_calls.
        """
        enhanced = [Message(role="system", content=build_tool_prompt(tools))]
        enhanced.extend(messages)

        response = await self.chat(enhanced, options)

        tool_calls = parse_tool_calls(response.content)
        if tool_calls:
            logger.debug(
                "ollama proposed %d tool call(s): %s",
                len(tool_calls), [tc.name for tc in tool_calls],
            )
        return response.model_copy(update={"tool_calls": tool_calls})

    async def is_available(self) -> bool:
        """True when the server answers /api/tags and lists our model."""
        response = await self._probe("/api/tags")
        if response is None or response.status_code != 200:
            return False

        try:
            data = response.json()
        except ValueError:
            return False

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            return False

        return any(
            isinstance(m, dict) and m.get("name") == self._model_name
            for m in models
        )
