"""
TextGenWebUIAdapter - Text Generation WebUI (Oobabooga) legacy API.

Prompt is flattened like llama.cpp, except system messages are emitted as
bare paragraphs. The API caps output at 200 new tokens unless max_tokens
says otherwise.
"""

import time
from typing import Optional, Sequence

from model_switch.adapters.base import HTTPBackend, elapsed_since, sampling_fields
from model_switch.schema import GenerateOptions, Message, Response
from model_switch.config import DEFAULT_TEXTGEN_MAX_NEW_TOKENS
from model_switch.errors import ProtocolError


def flatten_with_system(messages: Sequence[Message]) -> str:
    parts = []
    for m in messages:
        if m.role == "system":
            parts.append(f"{m.content}\n\n")
        else:
            parts.append(f"{m.role}: {m.content}\n")
    return "".join(parts)


class TextGenWebUIAdapter(HTTPBackend):
    provider = "textgen-webui"

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        start = time.monotonic()

        payload = {
            "prompt": flatten_with_system(messages),
            "max_new_tokens": DEFAULT_TEXTGEN_MAX_NEW_TOKENS,
            **sampling_fields(options, max_tokens_key="max_new_tokens"),
        }

        data = await self._post_json("/api/v1/generate", payload)

        results = data.get("results") or []
        if not results:
            raise ProtocolError(
                f"{self.provider}: no results in response", status_code=200, body=str(data)
            )
        first = results[0] if isinstance(results[0], dict) else {}

        return Response(
            content=first.get("text") or "",
            finish_reason="stop",
            duration=elapsed_since(start),
        )

    async def is_available(self) -> bool:
        response = await self._probe("/api/v1/model")
        return response is not None and response.status_code == 200
