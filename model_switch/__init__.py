"""
model-switch: one interface over interchangeable local LLM backends.

    manager = BackendManager()
    manager.register_backend("ollama", OllamaAdapter("http://localhost:11434", "qwen2.5:3b"))
    manager.register_backend("lmstudio", create_http_adapter("http://localhost:1234/v1", provider="lmstudio"))
    manager.set_fallback_backend("lmstudio")
    await manager.switch_backend("ollama")
    response = await manager.generate("Hello")
"""

from model_switch.adapters import (
    ModelBackend,
    OllamaAdapter,
    ToolCallingBackend,
    create_http_adapter,
    create_ollama_adapter,
)
from model_switch.manager import BackendManager
from model_switch.schema import (
    BackendInfo,
    GenerateOptions,
    Message,
    Response,
    ToolCall,
    ToolDefinition,
    Usage,
)

__version__ = "0.1.0"

__all__ = [
    "BackendManager",
    "ModelBackend",
    "ToolCallingBackend",
    "OllamaAdapter",
    "create_http_adapter",
    "create_ollama_adapter",
    "BackendInfo",
    "GenerateOptions",
    "Message",
    "Response",
    "ToolCall",
    "ToolDefinition",
    "Usage",
]
