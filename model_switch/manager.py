"""
BackendManager - named backend registry with one-hop failover.

The manager is an explicit object: create one per session and pass it to
whatever needs a model. It implements ModelBackend itself, so consumers can
hold a manager where they would otherwise hold a single adapter.

Locking: one lock guards the registry mapping and the current/fallback
selections. It is only ever held to copy references out or to mutate the
mapping, never across network I/O. Availability probes in
switch_backend() and auto_select_best_backend() run outside the lock, and
the selection is committed only if the probed instance is still registered
under the same name.
"""

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Optional, Sequence

from model_switch.adapters.base import ModelBackend, ToolCallingBackend
from model_switch.errors import (
    AlreadyRegisteredError,
    BackendUnavailableError,
    NoBackendSelectedError,
    NoBackendsAvailableError,
    NotRegisteredError,
    ToolsNotSupportedError,
)
from model_switch.schema import (
    BackendInfo,
    GenerateOptions,
    Message,
    Response,
    ToolDefinition,
)

logger = logging.getLogger(__name__)


class BackendManager:
    """
    Registry of named backends with a current and an optional fallback.

    generate()/chat() call the current backend; if it raises and a different
    fallback is configured, the fallback is called exactly once and its
    result (or exception) is returned as-is. Availability is checked when
    switching, not before every call.
    """

    def __init__(self):
        self._backends: dict[str, ModelBackend] = {}
        self._current: Optional[str] = None
        self._fallback: Optional[str] = None
        self._lock = threading.Lock()

    # ─────────────────────────────────────────────────────────────────
    # REGISTRY MUTATION
    # ─────────────────────────────────────────────────────────────────

    def register_backend(self, name: str, backend: ModelBackend) -> None:
        """
        Register a backend under a unique name.

        The manager keeps a reference only; it never closes the backend.

        Raises:
            AlreadyRegisteredError: name is taken (registry left unchanged)
        """
        with self._lock:
            if name in self._backends:
                raise AlreadyRegisteredError(name)
            self._backends[name] = backend
        logger.debug("registered backend %s (%r)", name, backend)

    def unregister_backend(self, name: str) -> None:
        """
        Remove a backend, clearing the current/fallback selection if it held either.

        Raises:
            NotRegisteredError: name is unknown
        """
        with self._lock:
            if name not in self._backends:
                raise NotRegisteredError(name)
            del self._backends[name]
            if self._current == name:
                self._current = None
            if self._fallback == name:
                self._fallback = None
        logger.debug("unregistered backend %s", name)

    def set_fallback_backend(self, name: str) -> None:
        """
        Use `name` when the current backend fails.

        No availability check: a dead fallback is only discovered when used.

        Raises:
            NotRegisteredError: name is unknown
        """
        with self._lock:
            if name not in self._backends:
                raise NotRegisteredError(name)
            self._fallback = name
        logger.info("fallback backend set to %s", name)

    async def switch_backend(self, name: str) -> None:
        """
        Make `name` the current backend if it is available right now.

        Raises:
            NotRegisteredError: name is unknown, or was unregistered mid-probe
            BackendUnavailableError: the availability probe returned False
        """
        with self._lock:
            backend = self._backends.get(name)
        if backend is None:
            raise NotRegisteredError(name)

        if not await backend.is_available():
            raise BackendUnavailableError(name)

        with self._lock:
            if self._backends.get(name) is not backend:
                raise NotRegisteredError(name)
            self._current = name
        logger.info("switched to backend %s", name)

    async def auto_select_best_backend(self) -> str:
        """
        Select the first available backend, probing in registration order.

        Returns:
            The name of the selected backend

        Raises:
            NoBackendsAvailableError: no registered backend is available
        """
        with self._lock:
            candidates = list(self._backends.items())

        for name, backend in candidates:
            if not await backend.is_available():
                logger.debug("backend %s unavailable, skipping", name)
                continue
            with self._lock:
                if self._backends.get(name) is not backend:
                    continue
                self._current = name
            logger.info("auto-selected backend %s", name)
            return name

        raise NoBackendsAvailableError()

    # ─────────────────────────────────────────────────────────────────
    # READS
    # ─────────────────────────────────────────────────────────────────

    def get_current_backend(self) -> Optional[str]:
        """Name of the current backend, or None."""
        with self._lock:
            return self._current

    def get_fallback_backend(self) -> Optional[str]:
        """Name of the fallback backend, or None."""
        with self._lock:
            return self._fallback

    def get_backend(self, name: str) -> Optional[ModelBackend]:
        """The backend registered as `name`, or None."""
        with self._lock:
            return self._backends.get(name)

    def get_current_model(self) -> Optional[ModelBackend]:
        """The current backend instance, or None."""
        with self._lock:
            if self._current is None:
                return None
            return self._backends.get(self._current)

    async def list_backends(self) -> list[BackendInfo]:
        """
        Snapshot of every registered backend, in registration order.

        Every call probes every backend; availability is never cached.
        """
        with self._lock:
            entries = list(self._backends.items())
            current = self._current

        available = await asyncio.gather(
            *(backend.is_available() for _, backend in entries)
        )
        return [
            BackendInfo(name=name, available=ok, current=(name == current))
            for (name, _), ok in zip(entries, available)
        ]

    # ─────────────────────────────────────────────────────────────────
    # DISPATCH
    # ─────────────────────────────────────────────────────────────────

    def _selection(self) -> tuple[Optional[str], Optional[ModelBackend], Optional[str], Optional[ModelBackend]]:
        with self._lock:
            current = self._backends.get(self._current) if self._current else None
            fallback = self._backends.get(self._fallback) if self._fallback else None
            return self._current, current, self._fallback, fallback

    async def _dispatch(
        self,
        call: Callable[[ModelBackend], Awaitable[Response]],
        require_tools: bool = False,
    ) -> Response:
        current_name, current, fallback_name, fallback = self._selection()

        if current is None:
            raise NoBackendSelectedError()
        if require_tools and not isinstance(current, ToolCallingBackend):
            raise ToolsNotSupportedError(current_name)

        try:
            return await call(current)
        except Exception as e:
            usable = (
                fallback is not None
                and fallback_name != current_name
                and (not require_tools or isinstance(fallback, ToolCallingBackend))
            )
            if not usable:
                raise
            logger.warning(
                "backend %s failed (%s), falling back to %s", current_name, e, fallback_name
            )

        return await call(fallback)

    async def generate(
        self, prompt: str, options: Optional[GenerateOptions] = None
    ) -> Response:
        """
        Generate with the current backend, falling back once on failure.

        Raises:
            NoBackendSelectedError: nothing selected (no network call made)
        """
        return await self._dispatch(lambda backend: backend.generate(prompt, options))

    async def chat(
        self, messages: Sequence[Message], options: Optional[GenerateOptions] = None
    ) -> Response:
        """Chat with the current backend, falling back once on failure."""
        return await self._dispatch(lambda backend: backend.chat(messages, options))

    async def chat_with_tools(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition],
        options: Optional[GenerateOptions] = None,
    ) -> Response:
        """
        Tool-aware chat on the current backend.

        Raises:
            ToolsNotSupportedError: the current backend cannot propose tool calls
        """
        return await self._dispatch(
            lambda backend: backend.chat_with_tools(messages, tools, options),
            require_tools=True,
        )

    async def is_available(self) -> bool:
        """Probe the current backend. False when nothing is selected."""
        backend = self.get_current_model()
        if backend is None:
            return False
        return await backend.is_available()
