"""Shared test fixtures for model-switch tests."""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock

from model_switch.adapters.base import ModelBackend, ToolCallingBackend
from model_switch.schema import Message, Response, ToolDefinition, Usage


# ─────────────────────────────────────────────────────────────────────
# MOCK DATA
# ─────────────────────────────────────────────────────────────────────

OLLAMA_HOST = "http://ollama.test:11434"
OLLAMA_MODEL = "qwen2.5:3b"

LMSTUDIO_URL = "http://lmstudio.test:1234/v1"
LLAMA_CPP_URL = "http://llamacpp.test:8080"
TEXTGEN_URL = "http://textgen.test:5000"

MOCK_TAGS_RESPONSE = {
    "models": [
        {"name": OLLAMA_MODEL, "size": 1929912432},
        {"name": "llama3.2:1b", "size": 1321098329},
    ]
}

MOCK_OLLAMA_CHAT_RESPONSE = {
    "model": OLLAMA_MODEL,
    "created_at": "2024-11-05T10:00:00Z",
    "message": {"role": "assistant", "content": "The capital of France is Paris."},
    "done": True,
}

MOCK_COMPLETION_RESPONSE = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1699000000,
    "model": "local-model",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "The capital of France is Paris."
            },
            "finish_reason": "stop"
        }
    ],
    "usage": {
        "prompt_tokens": 10,
        "completion_tokens": 8,
        "total_tokens": 18
    }
}

SEARCH_TOOL = ToolDefinition(
    name="search",
    description="Search stored memories",
    parameters={
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query"},
            "search_type": {
                "type": "string",
                "description": "Search strategy",
                "enum": ["semantic", "keyword", "hybrid"],
                "default": "semantic",
            },
            "limit": {"type": "integer", "default": 10},
        },
        "required": ["query"],
    },
)


# ─────────────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────────────

def make_response(content: str = "ok", **kwargs) -> Response:
    return Response(
        content=content,
        finish_reason=kwargs.pop("finish_reason", "stop"),
        usage=kwargs.pop("usage", Usage()),
        duration=kwargs.pop("duration", timedelta(milliseconds=5)),
        **kwargs,
    )


def make_mock_backend(
    available: bool = True,
    content: str = "ok",
    error: Exception | None = None,
    tools: bool = False,
) -> AsyncMock:
    """
    Mock backend implementing the ModelBackend protocol.

    With tools=True the mock also exposes chat_with_tools().
    """
    backend = AsyncMock(spec=ToolCallingBackend if tools else ModelBackend)
    backend.is_available.return_value = available

    if error is not None:
        backend.generate.side_effect = error
        backend.chat.side_effect = error
        if tools:
            backend.chat_with_tools.side_effect = error
    else:
        backend.generate.return_value = make_response(content)
        backend.chat.return_value = make_response(content)
        if tools:
            backend.chat_with_tools.return_value = make_response(content)

    return backend


# ─────────────────────────────────────────────────────────────────────
# FIXTURES
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def sample_messages():
    """Return sample conversation messages."""
    return [
        Message(role="system", content="You are terse."),
        Message(role="user", content="What is the capital of France?"),
        Message(role="assistant", content="Paris."),
        Message(role="user", content="And Germany?"),
    ]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every model-switch environment variable for the test."""
    import os
    for key in list(os.environ):
        if key.startswith(("MODEL_BACKEND_", "OLLAMA_")) or key in (
            "MODEL_DEFAULT_BACKEND", "MODEL_FALLBACK_BACKEND",
        ):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
