"""Tests for LlamaCppAdapter: prompt flattening and the health probe."""

import json

import httpx
import pytest
import respx

from model_switch.adapters.llama_cpp import LlamaCppAdapter, flatten_messages
from model_switch.errors import ProtocolError
from model_switch.schema import GenerateOptions
from tests.conftest import LLAMA_CPP_URL


@pytest.fixture
def adapter():
    return LlamaCppAdapter(LLAMA_CPP_URL)


class TestFlattenMessages:
    def test_role_prefixed_lines(self, sample_messages):
        assert flatten_messages(sample_messages) == (
            "system: You are terse.\n"
            "user: What is the capital of France?\n"
            "assistant: Paris.\n"
            "user: And Germany?\n"
        )


class TestChat:
    @pytest.mark.asyncio
    @respx.mock
    async def test_payload_maps_max_tokens_to_n_predict(self, adapter):
        route = respx.post(f"{LLAMA_CPP_URL}/completion").mock(
            return_value=httpx.Response(200, json={"content": "Berlin.", "stop": True})
        )

        await adapter.generate("Capital of Germany?", GenerateOptions(max_tokens=64, temperature=0.1))

        payload = json.loads(route.calls.last.request.content)
        assert payload == {
            "prompt": "user: Capital of Germany?\n",
            "n_predict": 64,
            "temperature": 0.1,
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_response_has_stop_and_zero_usage(self, adapter):
        respx.post(f"{LLAMA_CPP_URL}/completion").mock(
            return_value=httpx.Response(200, json={"content": "Berlin.", "stop": True})
        )

        response = await adapter.generate("Capital of Germany?")

        assert response.content == "Berlin."
        assert response.finish_reason == "stop"
        assert response.usage.total_tokens == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_raises(self, adapter):
        respx.post(f"{LLAMA_CPP_URL}/completion").mock(
            return_value=httpx.Response(503, text="Loading model")
        )

        with pytest.raises(ProtocolError) as exc_info:
            await adapter.generate("Hi")

        assert exc_info.value.status_code == 503
        assert exc_info.value.body == "Loading model"


class TestIsAvailable:
    @pytest.mark.asyncio
    @respx.mock
    async def test_health_ok(self, adapter):
        respx.get(f"{LLAMA_CPP_URL}/health").mock(
            return_value=httpx.Response(200, json={"status": "ok"})
        )
        assert await adapter.is_available() is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_health_loading(self, adapter):
        respx.get(f"{LLAMA_CPP_URL}/health").mock(return_value=httpx.Response(503))
        assert await adapter.is_available() is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_unavailable_on_server_error(self, adapter):
        respx.get(f"{LLAMA_CPP_URL}/health").mock(return_value=httpx.Response(500))
        assert await adapter.is_available() is False

    @pytest.mark.asyncio
    async def test_malformed_url_is_unavailable(self):
        adapter = LlamaCppAdapter("http://[::1")
        assert await adapter.is_available() is False
