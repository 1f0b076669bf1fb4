"""
LlamaCppAdapter - llama.cpp HTTP server (raw completion endpoint).

The server takes a single prompt string, so messages are flattened to
"role: content" lines. It returns no token usage; Response.usage stays zero.
"""

import time
from typing import Optional, Sequence

from model_switch.adapters.base import HTTPBackend, elapsed_since, sampling_fields
from model_switch.schema import GenerateOptions, Message, Response


def flatten_messages(messages: Sequence[Message]) -> str:
    return "".join(f"{m.role}: {m.content}\n" for m in messages)


class LlamaCppAdapter(HTTPBackend):
    provider = "llama-cpp"

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        start = time.monotonic()

        payload = {
            "prompt": flatten_messages(messages),
            **sampling_fields(options, max_tokens_key="n_predict"),
        }

        data = await self._post_json("/completion", payload)

        return Response(
            content=data.get("content") or "",
            finish_reason="stop",
            duration=elapsed_since(start),
        )

    async def is_available(self) -> bool:
        response = await self._probe("/health")
        return response is not None and response.status_code == 200
