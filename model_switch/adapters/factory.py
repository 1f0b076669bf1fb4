"""
Validating constructors for adapters.

Dialect is chosen once, here, by provider name; everything downstream
talks to the ModelBackend protocol. Validation happens before any network
activity.
"""

from typing import Optional

from model_switch.adapters.base import HTTPBackend
from model_switch.adapters.llama_cpp import LlamaCppAdapter
from model_switch.adapters.ollama import OllamaAdapter
from model_switch.adapters.openai_compat import (
    OPENAI_COMPATIBLE_PROVIDERS,
    OpenAICompatibleAdapter,
)
from model_switch.adapters.textgen import TextGenWebUIAdapter
from model_switch.config import DEFAULT_OPENAI_MODEL
from model_switch.errors import ConfigurationError

SUPPORTED_PROVIDERS: tuple[str, ...] = (
    "lmstudio",       # LM Studio local server
    "localai",        # LocalAI
    "llama-cpp",      # llama.cpp HTTP server
    "vllm",           # vLLM inference server
    "textgen-webui",  # Text Generation WebUI (Oobabooga)
    "openai-compat",  # Generic OpenAI-compatible endpoint
)


def create_http_adapter(
    base_url: str,
    api_key: Optional[str] = None,
    provider: str = "openai-compat",
    model: Optional[str] = None,
) -> HTTPBackend:
    """
    Build the adapter for an HTTP provider.

    Args:
        base_url: Server root, including any API prefix (e.g. ".../v1")
        api_key: Optional bearer token; local servers usually need none
        provider: One of SUPPORTED_PROVIDERS
        model: Model name sent by OpenAI-compatible providers

    Raises:
        ConfigurationError: empty base_url or unsupported provider
    """
    if not base_url:
        raise ConfigurationError("base_url cannot be empty")

    if provider in OPENAI_COMPATIBLE_PROVIDERS:
        return OpenAICompatibleAdapter(
            base_url,
            api_key=api_key,
            provider=provider,
            model=model or DEFAULT_OPENAI_MODEL,
        )
    if provider == "llama-cpp":
        return LlamaCppAdapter(base_url, api_key=api_key)
    if provider == "textgen-webui":
        return TextGenWebUIAdapter(base_url, api_key=api_key)

    raise ConfigurationError(
        f"unsupported provider: {provider} "
        f"(supported: {', '.join(SUPPORTED_PROVIDERS)})"
    )


def create_ollama_adapter(host: str, model_name: str) -> OllamaAdapter:
    """Build an Ollama adapter. Raises ConfigurationError on empty host or model."""
    if not host:
        raise ConfigurationError("ollama host cannot be empty")
    if not model_name:
        raise ConfigurationError("ollama model name cannot be empty")
    return OllamaAdapter(host, model_name)
