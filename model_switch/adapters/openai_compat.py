"""
OpenAICompatibleAdapter - one adapter for the OpenAI-compatible family.

LM Studio, LocalAI, vLLM and generic OpenAI-compatible endpoints all share
the /chat/completions and /models wire format; the dialect name is kept for
logging and error messages only.
"""

import logging
import time
from typing import Optional, Sequence

from model_switch.adapters.base import HTTPBackend, elapsed_since, sampling_fields
from model_switch.schema import GenerateOptions, Message, Response, Usage
from model_switch.config import DEFAULT_OPENAI_MODEL, DEFAULT_REQUEST_TIMEOUT_SECONDS
from model_switch.errors import ProtocolError

logger = logging.getLogger(__name__)

OPENAI_COMPATIBLE_PROVIDERS = ("lmstudio", "localai", "openai-compat", "vllm")


def _int_field(data: dict, key: str) -> int:
    value = data.get(key, 0)
    return value if isinstance(value, int) else 0


class OpenAICompatibleAdapter(HTTPBackend):
    """
    OpenAI-compatible implementation of ModelBackend.

    base_url is expected to include the API prefix, e.g.
    "http://localhost:1234/v1" for LM Studio.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        provider: str = "openai-compat",
        model: str = DEFAULT_OPENAI_MODEL,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        super().__init__(base_url, api_key=api_key, timeout_seconds=timeout_seconds)
        self.provider = provider
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        start = time.monotonic()

        payload = {
            "model": self._model,
            "messages": [m.model_dump() for m in messages],
            **sampling_fields(options),
        }

        data = await self._post_json(
            "/chat/completions", payload, headers=self._auth_headers()
        )

        error = data.get("error")
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise ProtocolError(
                f"{self.provider} API error: {message}", status_code=200, body=str(error)
            )

        choices = data.get("choices") or []
        if not choices:
            raise ProtocolError(
                f"{self.provider}: no choices in response", status_code=200, body=str(data)
            )

        if not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise ProtocolError(
                f"{self.provider}: malformed choices in response", status_code=200, body=str(data)
            )
        choice = choices[0]
        message = choice.get("message")
        if message is None:
            message = {}
        usage = data.get("usage")
        if usage is None:
            usage = {}
        if (
            not isinstance(message, dict)
            or not isinstance(usage, dict)
            or not isinstance(message.get("content") or "", str)
        ):
            raise ProtocolError(
                f"{self.provider}: malformed message or usage in response",
                status_code=200,
                body=str(data),
            )

        return Response(
            content=message.get("content") or "",
            finish_reason=choice.get("finish_reason") or "",
            usage=Usage(
                prompt_tokens=_int_field(usage, "prompt_tokens"),
                completion_tokens=_int_field(usage, "completion_tokens"),
                total_tokens=_int_field(usage, "total_tokens"),
            ),
            duration=elapsed_since(start),
        )

    async def is_available(self) -> bool:
        response = await self._probe("/models", headers=self._auth_headers())
        return response is not None and response.status_code == 200
