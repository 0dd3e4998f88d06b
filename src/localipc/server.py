"""IPC server that binds a local endpoint and dispatches requests by channel."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from aiohttp import web
from pydantic import ValidationError

from localipc.constants import HANDLE_ENV_VAR, JSON_CONTENT_TYPE
from localipc.endpoint import resolve_endpoint
from localipc.errors import BindFailedError
from localipc.marshalling import decode_payload, encode_payload
from localipc.registry import (
    HandlerRegistry,
    RegisteredHandler,
    Registration,
    as_handler_func,
    validate_channel_name,
)
from localipc.transports import DefaultTransport

if TYPE_CHECKING:
    from pydantic import BaseModel

    from localipc.contracts import HandlerLike
    from localipc.transports import ServerHandle, Transport

logger = logging.getLogger(__name__)


class ServerState(enum.Enum):
    """Lifecycle of an ``IPCServer``; ``DISPOSED`` is terminal."""

    UNBOUND = "unbound"
    LISTENING = "listening"
    DISPOSED = "disposed"


class IPCServer:
    """Local IPC server routing ``POST /<channel>`` requests to handlers.

    Usage::

        server = await create_ipc_server("my-session")
        registration = server.register_handler("echo", lambda data: data)
        child_env = {**os.environ, **server.get_env()}
        ...
        registration.dispose()
        await server.dispose()

    Or as an async context manager::

        async with await create_ipc_server() as server:
            ...
    """

    def __init__(self, handle_path: str, *, transport: Transport | None = None) -> None:
        self._handle_path = handle_path
        self._transport = transport or DefaultTransport()
        self._registry = HandlerRegistry()
        self._handle: ServerHandle | None = None
        self._state = ServerState.UNBOUND

    async def __aenter__(self) -> IPCServer:
        if self._state is ServerState.UNBOUND:
            await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.dispose()

    @property
    def handle_path(self) -> str:
        """Endpoint address clients connect to."""
        return self._handle_path

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def is_listening(self) -> bool:
        """Whether the server is currently accepting connections."""
        return self._state is ServerState.LISTENING

    async def start(self) -> None:
        """Bind the endpoint and begin accepting connections.

        Raises:
            BindFailedError: If the endpoint cannot be acquired.
            RuntimeError: If the server was already started or disposed.
        """
        if self._state is not ServerState.UNBOUND:
            msg = f"Server cannot start from state {self._state.value}"
            raise RuntimeError(msg)

        try:
            self._handle = await self._transport.start_server(
                self._handle_path,
                self._on_request,
            )
        except OSError as exc:
            raise BindFailedError(self._handle_path, exc.strerror or str(exc)) from exc

        self._state = ServerState.LISTENING
        logger.info(
            "IPC server started: transport=%s handle=%s",
            self._handle.transport_type,
            self._handle_path,
        )

    def register_handler(
        self,
        channel: str,
        handler: HandlerLike,
        *,
        request_model: type[BaseModel] | None = None,
    ) -> Registration:
        """Serve *channel* with *handler*, replacing any existing handler.

        Args:
            channel: Non-empty channel name without ``/``.
            handler: An ``IPCHandler`` or a callable taking the request value.
            request_model: Optional pydantic model to validate requests into;
                invalid requests are answered with ``400``.

        Returns:
            A ``Registration`` whose ``dispose()`` removes the handler.
        """
        if self._state is ServerState.DISPOSED:
            msg = "Cannot register handlers on a disposed server"
            raise RuntimeError(msg)
        validate_channel_name(channel)

        entry = RegisteredHandler(
            channel=channel,
            func=as_handler_func(handler),
            request_model=request_model,
        )
        if self._registry.register(entry) is not None:
            logger.warning("IPC handler for %s replaced", channel)
        else:
            logger.debug("IPC handler for %s registered", channel)
        return Registration(self._registry, entry)

    def get_env(self) -> dict[str, str]:
        """Environment entries that let a child process find this server."""
        return {HANDLE_ENV_VAR: self._handle_path}

    async def dispose(self) -> None:
        """Close the listener and remove the endpoint. Safe to call twice."""
        if self._state is ServerState.DISPOSED:
            return
        self._state = ServerState.DISPOSED
        self._registry.clear()
        handle, self._handle = self._handle, None
        if handle is not None:
            await handle.close()
        logger.info("IPC server disposed: handle=%s", self._handle_path)

    async def _on_request(self, request: web.Request) -> web.StreamResponse:
        """Dispatch one HTTP request to the handler registered for its path."""
        if request.method != "POST":
            logger.warning("IPC request with unsupported method %s", request.method)
            return web.Response(status=405, headers={"Allow": "POST"})

        channel = request.match_info.get("channel", "")
        entry = self._registry.get(channel) if channel and "/" not in channel else None
        if entry is None:
            logger.warning("IPC handler for /%s not found", channel)
            return web.Response(status=404)

        body = await request.read()
        try:
            data = entry.coerce_request(decode_payload(body))
        except (ValueError, ValidationError):
            logger.warning("Malformed IPC request for %s (%d bytes)", channel, len(body))
            return web.Response(status=400)

        try:
            result = await entry.invoke(data)
            payload = encode_payload(result)
        except Exception:
            logger.exception("IPC handler for %s failed", channel)
            return web.Response(status=500)

        return web.Response(status=200, body=payload, content_type=JSON_CONTENT_TYPE)


async def create_ipc_server(
    context: str | None = None,
    *,
    transport: Transport | None = None,
) -> IPCServer:
    """Create a listening ``IPCServer``.

    Args:
        context: Agreed-upon string the endpoint is derived from. Servers
            created with the same context share an address; without one a
            fresh random address is used.
        transport: Transport override; defaults to the platform transport.

    Raises:
        RandomnessUnavailableError: If no context is given and no entropy
            source is available.
        BindFailedError: If the endpoint cannot be acquired.
    """
    handle_path = resolve_endpoint(context)
    logger.info("IPC handle path: %s", handle_path)
    server = IPCServer(handle_path, transport=transport)
    await server.start()
    return server


__all__ = ["IPCServer", "ServerState", "create_ipc_server"]
