"""Tests for TextGenWebUIAdapter."""

import json

import httpx
import pytest
import respx

from model_switch.adapters.textgen import TextGenWebUIAdapter, flatten_with_system
from model_switch.errors import ProtocolError
from model_switch.schema import GenerateOptions
from tests.conftest import TEXTGEN_URL

GENERATE_URL = f"{TEXTGEN_URL}/api/v1/generate"


@pytest.fixture
def adapter():
    return TextGenWebUIAdapter(TEXTGEN_URL)


class TestFlattenWithSystem:
    def test_system_lines_become_paragraphs(self, sample_messages):
        assert flatten_with_system(sample_messages) == (
            "You are terse.\n\n"
            "user: What is the capital of France?\n"
            "assistant: Paris.\n"
            "user: And Germany?\n"
        )


class TestChat:
    @pytest.mark.asyncio
    @respx.mock
    async def test_default_max_new_tokens(self, adapter):
        route = respx.post(GENERATE_URL).mock(
            return_value=httpx.Response(200, json={"results": [{"text": "Berlin."}]})
        )

        response = await adapter.generate("Capital of Germany?")

        payload = json.loads(route.calls.last.request.content)
        assert payload == {"prompt": "user: Capital of Germany?\n", "max_new_tokens": 200}
        assert response.content == "Berlin."
        assert response.finish_reason == "stop"
        assert response.usage.total_tokens == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_max_tokens_overrides_default(self, adapter):
        route = respx.post(GENERATE_URL).mock(
            return_value=httpx.Response(200, json={"results": [{"text": "ok"}]})
        )

        await adapter.generate("Hi", GenerateOptions(max_tokens=512, top_p=0.95))

        payload = json.loads(route.calls.last.request.content)
        assert payload["max_new_tokens"] == 512
        assert payload["top_p"] == 0.95
        assert "temperature" not in payload

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_results_raises(self, adapter):
        respx.post(GENERATE_URL).mock(return_value=httpx.Response(200, json={"results": []}))

        with pytest.raises(ProtocolError, match="no results"):
            await adapter.generate("Hi")


class TestIsAvailable:
    @pytest.mark.asyncio
    @respx.mock
    async def test_model_endpoint_ok(self, adapter):
        respx.get(f"{TEXTGEN_URL}/api/v1/model").mock(
            return_value=httpx.Response(200, json={"result": "llama-7b"})
        )
        assert await adapter.is_available() is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreachable(self, adapter):
        respx.get(f"{TEXTGEN_URL}/api/v1/model").mock(
            side_effect=httpx.ConnectError("Connection refused")
        )
        assert await adapter.is_available() is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_unavailable_on_server_error(self, adapter):
        respx.get(f"{TEXTGEN_URL}/api/v1/model").mock(return_value=httpx.Response(500))
        assert await adapter.is_available() is False

    @pytest.mark.asyncio
    async def test_malformed_url_is_unavailable(self):
        adapter = TextGenWebUIAdapter("http://[::1")
        assert await adapter.is_available() is False
