"""
Error taxonomy for model backends.

Transport failures (connection refused, timeouts, cancellation) are not
wrapped: they surface as the httpx / asyncio exceptions that caused them.
"""

from typing import Optional


class ConfigurationError(ValueError):
    """Adapter could not be constructed (empty base URL, unknown provider)."""
    pass


class ProtocolError(Exception):
    """Backend answered, but not with something we can use.

    Raised for non-2xx statuses, backend-reported ``error`` fields and
    malformed or empty response bodies.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RegistryError(Exception):
    """Base class for BackendManager failures. Always recoverable by the caller."""
    pass


class AlreadyRegisteredError(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"backend {name} already registered")
        self.name = name


class NotRegisteredError(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"backend {name} not registered")
        self.name = name


class BackendUnavailableError(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"backend {name} not available")
        self.name = name


class NoBackendSelectedError(RegistryError):
    def __init__(self):
        super().__init__("no backend selected")


class NoBackendsAvailableError(RegistryError):
    def __init__(self):
        super().__init__("no available backends found")


class ToolsNotSupportedError(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"backend {name} does not support tool calling")
        self.name = name
