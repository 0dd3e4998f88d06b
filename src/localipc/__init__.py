"""Local request/response IPC over Unix domain sockets and Windows named pipes."""

from __future__ import annotations

from localipc.client import IPCClient
from localipc.constants import HANDLE_ENV_VAR
from localipc.contracts import CallOptions, Disposable, IPCHandler
from localipc.endpoint import resolve_endpoint
from localipc.errors import (
    BadStatusError,
    BindFailedError,
    DeserializationError,
    IPCError,
    MissingEndpointError,
    RandomnessUnavailableError,
    TransportError,
)
from localipc.registry import Registration
from localipc.server import IPCServer, ServerState, create_ipc_server
from localipc.version import get_localipc_version

__version__ = get_localipc_version()

__all__ = [
    "HANDLE_ENV_VAR",
    "BadStatusError",
    "BindFailedError",
    "CallOptions",
    "DeserializationError",
    "Disposable",
    "IPCClient",
    "IPCError",
    "IPCHandler",
    "IPCServer",
    "MissingEndpointError",
    "RandomnessUnavailableError",
    "Registration",
    "ServerState",
    "TransportError",
    "create_ipc_server",
    "resolve_endpoint",
]
