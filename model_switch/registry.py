"""
Backend registration from configuration.

Builds adapters from environment settings and registers them on an
explicitly passed BackendManager. There is no module-level manager.

Usage:
    # At startup
    manager = BackendManager()
    register_default_backends(manager)
    await select_initial_backend(manager)

    # Anywhere a model is needed
    response = await manager.generate("Hello")
"""

import logging

from model_switch.adapters.base import ModelBackend
from model_switch.adapters.factory import create_http_adapter, create_ollama_adapter
from model_switch.config import (
    DEFAULT_OLLAMA_BACKEND_NAME,
    BackendConfig,
    get_default_backend_name,
    get_fallback_backend_name,
    get_ollama_host,
    get_ollama_model,
    is_ollama_enabled,
    load_backends_from_env,
)
from model_switch.manager import BackendManager

logger = logging.getLogger(__name__)


def create_backend(config: BackendConfig) -> ModelBackend:
    """
    Build the adapter described by `config`.

    Raises:
        ConfigurationError: empty URL, unknown provider or missing ollama model
    """
    if config.provider == "ollama":
        return create_ollama_adapter(config.base_url, config.model or get_ollama_model())
    return create_http_adapter(
        config.base_url,
        api_key=config.api_key,
        provider=config.provider,
        model=config.model,
    )


def register_default_backends(manager: BackendManager) -> list[str]:
    """
    Register backends based on environment variables.

    Additive: registers all configured backends, not just one.
    - Ollama: OLLAMA_HOST / OLLAMA_MODEL (defaults apply), unless OLLAMA_DISABLED
    - HTTP backends: every MODEL_BACKEND_n entry
    - Fallback: MODEL_FALLBACK_BACKEND, if set

    Returns:
        Names registered, in registration order

    Raises:
        ConfigurationError: a configured backend is invalid
        RegistryError: duplicate names, or an unknown fallback name
    """
    names = []

    if is_ollama_enabled():
        manager.register_backend(
            DEFAULT_OLLAMA_BACKEND_NAME,
            create_ollama_adapter(get_ollama_host(), get_ollama_model()),
        )
        names.append(DEFAULT_OLLAMA_BACKEND_NAME)

    for config in load_backends_from_env():
        manager.register_backend(config.name, create_backend(config))
        names.append(config.name)

    fallback = get_fallback_backend_name()
    if fallback:
        manager.set_fallback_backend(fallback)

    logger.debug("registered backends: %s", names)
    return names


async def select_initial_backend(manager: BackendManager) -> str:
    """
    Pick the startup backend: MODEL_DEFAULT_BACKEND if set, else auto-select.

    Returns:
        The selected backend name

    Raises:
        NotRegisteredError / BackendUnavailableError: configured default unusable
        NoBackendsAvailableError: auto-select found nothing available
    """
    name = get_default_backend_name()
    if name:
        await manager.switch_backend(name)
        return name
    return await manager.auto_select_best_backend()
