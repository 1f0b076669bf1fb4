"""
Configuration constants and environment loading for model-switch.
"""

import os
from typing import Optional

from pydantic import BaseModel

from model_switch.errors import ConfigurationError


# ─────────────────────────────────────────────────────────────────────
# DEFAULTS
# ─────────────────────────────────────────────────────────────────────

DEFAULT_TEMPERATURE: float = 0.7
DEFAULT_MAX_TOKENS: int = 2048

DEFAULT_OLLAMA_HOST: str = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL: str = "qwen2.5:3b"
DEFAULT_OLLAMA_BACKEND_NAME: str = "ollama"


# ─────────────────────────────────────────────────────────────────────
# INTERNAL CONSTANTS - Wire-level defaults
# ─────────────────────────────────────────────────────────────────────

# Per-request HTTP timeout owned by each adapter. A shorter caller deadline
# (asyncio.wait_for) still wins.
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 60.0

# Text Generation WebUI caps output here unless max_tokens overrides it
DEFAULT_TEXTGEN_MAX_NEW_TOKENS: int = 200

# Model name sent to OpenAI-compatible servers when none is configured.
# Most local servers ignore it and answer with whatever is loaded.
DEFAULT_OPENAI_MODEL: str = "gpt-4"


# ─────────────────────────────────────────────────────────────────────
# DATA MODELS
# ─────────────────────────────────────────────────────────────────────

class BackendConfig(BaseModel):
    """One HTTP backend as configured in the environment."""
    name: str
    provider: str
    base_url: str
    api_key: Optional[str] = None
    model: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "BackendConfig":
        """
        Parse "name=provider,url[,api_key[,model]]".

        Empty api_key/model segments are treated as unset, so
        "lm=lmstudio,http://localhost:1234/v1,,qwen3-8b" is valid.

        Raises:
            ConfigurationError: missing name, provider or url
        """
        name, sep, rest = value.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ConfigurationError(
                f"invalid backend entry {value!r}: expected name=provider,url[,api_key[,model]]"
            )

        parts = [p.strip() for p in rest.split(",")]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise ConfigurationError(
                f"invalid backend entry {value!r}: provider and url are required"
            )

        api_key = parts[2] if len(parts) > 2 and parts[2] else None
        model = parts[3] if len(parts) > 3 and parts[3] else None
        return cls(name=name, provider=parts[0], base_url=parts[1], api_key=api_key, model=model)


# ─────────────────────────────────────────────────────────────────────
# ENVIRONMENT LOADING
# ─────────────────────────────────────────────────────────────────────

def get_ollama_host() -> str:
    """Ollama server URL from OLLAMA_HOST, or the local default."""
    return os.environ.get("OLLAMA_HOST", "").strip() or DEFAULT_OLLAMA_HOST


def get_ollama_model() -> str:
    """Ollama model name from OLLAMA_MODEL, or the default."""
    return os.environ.get("OLLAMA_MODEL", "").strip() or DEFAULT_OLLAMA_MODEL


def is_ollama_enabled() -> bool:
    """
    Check if the Ollama backend should be registered.

    On unless OLLAMA_DISABLED is set to a truthy value.
    """
    return os.environ.get("OLLAMA_DISABLED", "").strip().lower() not in ("1", "true", "yes")


def load_backends_from_env() -> list[BackendConfig]:
    """
    Load HTTP backend definitions from environment variables.

    Looks for variables matching pattern: MODEL_BACKEND_1, MODEL_BACKEND_2, etc.
    Stops at the first missing index; blank values are skipped.

    Raises:
        ConfigurationError: an entry is malformed
    """
    backends = []
    i = 1
    while True:
        key = f"MODEL_BACKEND_{i}"
        value = os.environ.get(key)
        if value is None:
            # No more backends defined
            break
        if value.strip():
            backends.append(BackendConfig.parse(value.strip()))
        i += 1
    return backends


def get_default_backend_name() -> Optional[str]:
    """Backend to switch to at startup (MODEL_DEFAULT_BACKEND). None means auto-select."""
    return os.environ.get("MODEL_DEFAULT_BACKEND", "").strip() or None


def get_fallback_backend_name() -> Optional[str]:
    """Backend to fall back to when the current one fails (MODEL_FALLBACK_BACKEND)."""
    return os.environ.get("MODEL_FALLBACK_BACKEND", "").strip() or None
