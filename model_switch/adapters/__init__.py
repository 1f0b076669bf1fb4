"""
Adapters for LLM inference backends.

Provider-agnostic architecture: Protocol defines WHAT, implementations define HOW.
"""

from .base import HTTPBackend, ModelBackend, ToolCallingBackend
from .factory import SUPPORTED_PROVIDERS, create_http_adapter, create_ollama_adapter
from .llama_cpp import LlamaCppAdapter
from .ollama import OllamaAdapter
from .openai_compat import OpenAICompatibleAdapter
from .textgen import TextGenWebUIAdapter

__all__ = [
    "HTTPBackend",
    "ModelBackend",
    "ToolCallingBackend",
    "LlamaCppAdapter",
    "OllamaAdapter",
    "OpenAICompatibleAdapter",
    "TextGenWebUIAdapter",
    "SUPPORTED_PROVIDERS",
    "create_http_adapter",
    "create_ollama_adapter",
]
