"""Channel-to-handler registry consulted by the IPC server on every request."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from localipc.contracts import IPCHandler

if TYPE_CHECKING:
    from pydantic import BaseModel

    from localipc.contracts import HandlerFunc, HandlerLike

logger = logging.getLogger(__name__)


def validate_channel_name(channel: str) -> str:
    """Return *channel* unchanged, or raise ``ValueError`` if it cannot be routed.

    A channel travels as a single URL path segment, so it must be a non-empty
    string without ``/`` and must not be a dot segment (``.`` or ``..``).
    """
    if not isinstance(channel, str) or not channel:
        msg = "Channel name must be a non-empty string"
        raise ValueError(msg)
    if "/" in channel:
        msg = f"Channel name may not contain '/': {channel!r}"
        raise ValueError(msg)
    if channel in {".", ".."}:
        msg = f"Channel name may not be a dot segment: {channel!r}"
        raise ValueError(msg)
    return channel


@dataclass(frozen=True, eq=False)
class RegisteredHandler:
    """A handler as stored in the registry.

    Attributes:
        channel: Channel the handler serves.
        func: Callable invoked with the request value.
        request_model: Optional pydantic model the request is validated into.
    """

    channel: str
    func: HandlerFunc
    request_model: type[BaseModel] | None = None

    def coerce_request(self, data: Any) -> Any:
        """Validate *data* into ``request_model`` when one is configured.

        Raises:
            pydantic.ValidationError: If *data* does not fit the model.
        """
        if self.request_model is None:
            return data
        return self.request_model.model_validate(data)

    async def invoke(self, data: Any) -> Any:
        """Run the handler, awaiting its result when it is awaitable."""
        result = self.func(data)
        if inspect.isawaitable(result):
            result = await result
        return result


def as_handler_func(handler: HandlerLike) -> HandlerFunc:
    """Normalise an ``IPCHandler`` object or a plain callable to a callable."""
    if isinstance(handler, IPCHandler):
        return handler.handle
    if callable(handler):
        return handler
    msg = f"IPC handler must be callable or define handle(), got {type(handler).__name__}"
    raise TypeError(msg)


class HandlerRegistry:
    """Mapping from channel name to handler.

    Registration silently replaces an existing entry for the same channel.
    Removal is keyed on the entry as well as the name, so dropping a stale
    registration never evicts the handler that replaced it.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, RegisteredHandler] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, channel: object) -> bool:
        return channel in self._handlers

    def get(self, channel: str) -> RegisteredHandler | None:
        return self._handlers.get(channel)

    def register(self, entry: RegisteredHandler) -> RegisteredHandler | None:
        """Store *entry*, returning the entry it displaced, if any."""
        previous = self._handlers.get(entry.channel)
        self._handlers[entry.channel] = entry
        return previous

    def unregister(self, entry: RegisteredHandler) -> bool:
        """Remove *entry* if it is still the one registered for its channel."""
        if self._handlers.get(entry.channel) is not entry:
            return False
        del self._handlers[entry.channel]
        return True

    def clear(self) -> None:
        self._handlers.clear()


class Registration:
    """Disposable token returned by ``IPCServer.register_handler``."""

    def __init__(self, registry: HandlerRegistry, entry: RegisteredHandler) -> None:
        self._registry = registry
        self._entry = entry
        self._disposed = False

    @property
    def channel(self) -> str:
        return self._entry.channel

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Remove the handler from its registry. Calling twice is a no-op."""
        if self._disposed:
            return
        self._disposed = True
        if self._registry.unregister(self._entry):
            logger.debug("IPC handler for %s unregistered", self._entry.channel)

    def __enter__(self) -> Registration:
        return self

    def __exit__(self, *exc: object) -> None:
        self.dispose()


__all__ = [
    "HandlerRegistry",
    "RegisteredHandler",
    "Registration",
    "as_handler_func",
    "validate_channel_name",
]
