"""
ModelBackend Protocol - defines the contract for LLM inference backends.

This is the WHAT (interface), not the HOW (implementation).
HTTPBackend carries the plumbing shared by every HTTP adapter; see
ollama.py, openai_compat.py, llama_cpp.py and textgen.py for dialects.
"""

import logging
import time
from datetime import timedelta
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

import httpx

from model_switch.schema import (
    GenerateOptions,
    Message,
    Response,
    ToolDefinition,
)
from model_switch.config import DEFAULT_REQUEST_TIMEOUT_SECONDS
from model_switch.errors import ProtocolError

logger = logging.getLogger(__name__)


@runtime_checkable
class ModelBackend(Protocol):
    """
    Contract for LLM inference backends.

    Implemented by every adapter and by BackendManager itself, so a manager
    can be handed to anything that expects a single backend.

    Cancellation and deadlines come from the calling task: wrap a call in
    asyncio.wait_for() or cancel the task and the in-flight request is
    abandoned.
    """

    async def generate(
        self, prompt: str, options: Optional[GenerateOptions] = None
    ) -> Response:
        """Same as chat() with a single user message."""
        ...

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        """
        Run a chat completion.

        Raises:
            ProtocolError: backend answered with an error or unusable body
            httpx.HTTPError: transport failure, surfaced unmodified
        """
        ...

    async def is_available(self) -> bool:
        """Probe the backend over the network. Never raises on failure."""
        ...


@runtime_checkable
class ToolCallingBackend(ModelBackend, Protocol):
    """Backend that can propose tool calls (textually emulated)."""

    async def chat_with_tools(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition],
        options: Optional[GenerateOptions] = None,
    ) -> Response:
        ...


def sampling_fields(
    options: Optional[GenerateOptions], max_tokens_key: str = "max_tokens"
) -> dict[str, Any]:
    """
    Wire fields for the options that are actually set.

    Zero means "backend default", so zero-valued options are omitted rather
    than sent as explicit overrides.
    """
    if options is None:
        return {}
    fields: dict[str, Any] = {}
    if options.temperature > 0:
        fields["temperature"] = options.temperature
    if options.max_tokens > 0:
        fields[max_tokens_key] = options.max_tokens
    if options.top_p > 0:
        fields["top_p"] = options.top_p
    return fields


def elapsed_since(start: float) -> timedelta:
    return timedelta(seconds=time.monotonic() - start)


class HTTPBackend:
    """
    Shared HTTP plumbing for adapters.

    Owns the base URL, optional API key and a lazily created
    httpx.AsyncClient with a fixed request timeout. The client lives until
    aclose() is called; registries that hold the adapter never close it.
    """

    provider: str = "http"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key or None
        self._timeout_seconds = timeout_seconds
        self._client: Optional[httpx.AsyncClient] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider!r}, base_url={self._base_url!r})"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout_seconds)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _auth_headers(self) -> dict[str, str]:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    async def generate(
        self, prompt: str, options: Optional[GenerateOptions] = None
    ) -> Response:
        return await self.chat([Message(role="user", content=prompt)], options)

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        raise NotImplementedError

    async def is_available(self) -> bool:
        raise NotImplementedError

    async def _post_json(
        self, path: str, payload: dict, headers: Optional[dict[str, str]] = None
    ) -> dict:
        """POST a JSON payload and return the decoded JSON object.

        Raises ProtocolError on non-2xx status or a body that is not a JSON
        object. httpx transport errors propagate as-is.
        """
        url = self._url(path)
        logger.debug("%s POST %s", self.provider, url)
        response = await self._get_client().post(
            url,
            json=payload,
            headers={"Content-Type": "application/json", **(headers or {})},
        )
        return self._decode(response)

    def _decode(self, response: httpx.Response) -> dict:
        body = response.text
        if not response.is_success:
            raise ProtocolError(
                f"{self.provider} API error {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"{self.provider}: unmarshal response: {e}",
                status_code=response.status_code,
                body=body,
            ) from e
        if not isinstance(data, dict):
            raise ProtocolError(
                f"{self.provider}: expected a JSON object, got {type(data).__name__}",
                status_code=response.status_code,
                body=body,
            )
        return data

    async def _probe(
        self, path: str, headers: Optional[dict[str, str]] = None
    ) -> Optional[httpx.Response]:
        """GET a health endpoint. Returns None on transport failure or a bad URL."""
        url = self._url(path)
        try:
            return await self._get_client().get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("%s probe %s failed: %s", self.provider, url, e)
            return None
