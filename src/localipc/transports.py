"""IPC transport implementations for local HTTP exchanges.

Provides Unix domain socket transport on POSIX and named pipe transport on
Windows. ``DefaultTransport`` is automatically set to the right choice for the
current platform.
"""

from __future__ import annotations

import contextlib
import logging
import os
import platform
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

import aiohttp
from aiohttp import web

from localipc.constants import MAX_BODY_BYTES
from localipc.endpoint import remove_stale_endpoint

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine
    from typing import Any

    RequestHandler = Callable[[web.Request], Awaitable[web.StreamResponse]]

logger = logging.getLogger(__name__)

# In-flight handlers are cancelled on close after this grace period; no drain.
_SHUTDOWN_TIMEOUT = 0.1

# ---------------------------------------------------------------------------
# Shared types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServerHandle:
    """Handle returned after starting a transport server.

    Attributes:
        transport_type: Identifier string (``socket`` or ``pipe``).
        address: The endpoint address (socket file path or pipe name).
        close: Async callable that stops listening and releases the endpoint.
    """

    transport_type: str
    address: str
    close: Callable[[], Coroutine[Any, Any, None]]


async def _start_runner(handler: RequestHandler) -> web.AppRunner:
    """Build and set up an app runner that routes every path to *handler*."""
    app = web.Application(client_max_size=MAX_BODY_BYTES)
    app.router.add_route("*", "/{channel:.*}", handler)
    runner = web.AppRunner(app, shutdown_timeout=_SHUTDOWN_TIMEOUT)
    await runner.setup()
    return runner


# ---------------------------------------------------------------------------
# Unix socket transport
# ---------------------------------------------------------------------------


class UnixSocketTransport:
    """IPC transport over Unix domain sockets.

    Only available on macOS and Linux.  On Windows this class raises
    ``NotImplementedError`` at construction time.
    """

    transport_type = "socket"

    def __init__(self) -> None:
        if platform.system() == "Windows":
            msg = "Unix sockets are not supported on Windows"
            raise NotImplementedError(msg)

    async def start_server(self, address: str, handler: RequestHandler) -> ServerHandle:
        """Serve *handler* on a Unix socket at *address*.

        Any stale socket file is removed before binding.

        Raises:
            OSError: If the socket cannot be bound.
        """
        remove_stale_endpoint(address)

        parent = os.path.dirname(address)
        if parent:
            os.makedirs(parent, exist_ok=True)

        runner = await _start_runner(handler)
        site = web.UnixSite(runner, address)
        try:
            await site.start()
        except BaseException:
            await runner.cleanup()
            raise

        with contextlib.suppress(OSError):
            os.chmod(address, 0o600)

        logger.info("Unix socket server listening on %s", address)

        async def _close() -> None:
            await runner.cleanup()
            remove_stale_endpoint(address)
            logger.info("Unix socket server stopped")

        return ServerHandle(transport_type=self.transport_type, address=address, close=_close)

    def connector(self, address: str) -> aiohttp.BaseConnector:
        """Return a connector that opens connections to the socket at *address*."""
        return aiohttp.UnixConnector(path=address, force_close=True)


# ---------------------------------------------------------------------------
# Named pipe transport
# ---------------------------------------------------------------------------


class NamedPipeTransport:
    """IPC transport over Windows named pipes.

    Requires the proactor event loop, which is the default on Windows.
    """

    transport_type = "pipe"

    def __init__(self) -> None:
        if platform.system() != "Windows":
            msg = "Named pipes are only supported on Windows"
            raise NotImplementedError(msg)

    async def start_server(self, address: str, handler: RequestHandler) -> ServerHandle:
        """Serve *handler* on the named pipe *address*."""
        runner = await _start_runner(handler)
        site = web.NamedPipeSite(runner, address)
        try:
            await site.start()
        except BaseException:
            await runner.cleanup()
            raise

        logger.info("Named pipe server listening on %s", address)

        async def _close() -> None:
            await runner.cleanup()
            logger.info("Named pipe server stopped")

        return ServerHandle(transport_type=self.transport_type, address=address, close=_close)

    def connector(self, address: str) -> aiohttp.BaseConnector:
        """Return a connector that opens connections to the pipe *address*."""
        return aiohttp.NamedPipeConnector(path=address, force_close=True)


# ---------------------------------------------------------------------------
# Default transport selection
# ---------------------------------------------------------------------------

if sys.platform == "win32":
    DefaultTransport = NamedPipeTransport
else:
    DefaultTransport = UnixSocketTransport

Transport: TypeAlias = UnixSocketTransport | NamedPipeTransport

__all__ = [
    "DefaultTransport",
    "NamedPipeTransport",
    "ServerHandle",
    "Transport",
    "UnixSocketTransport",
]
