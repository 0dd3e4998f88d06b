"""Error types raised by the local IPC server and client."""

from __future__ import annotations


class IPCError(Exception):
    """Base for all local IPC failures."""


class RandomnessUnavailableError(IPCError):
    """Raised when no entropy source is available to derive an endpoint."""


class BindFailedError(IPCError):
    """Raised when the server cannot acquire its endpoint."""

    def __init__(self, handle_path: str, reason: str) -> None:
        super().__init__(f"Failed to bind IPC endpoint {handle_path}: {reason}")
        self.handle_path = handle_path


class MissingEndpointError(IPCError):
    """Raised when a client cannot determine where to connect."""


class TransportError(IPCError):
    """Raised when a call fails at the connection level.

    The underlying exception is available as ``__cause__``.
    """

    def __init__(self, handle_path: str, reason: str) -> None:
        super().__init__(f"IPC transport failure on {handle_path}: {reason}")
        self.handle_path = handle_path


class BadStatusError(IPCError):
    """Raised when the server answers with a non-success status code."""

    def __init__(self, status: int) -> None:
        super().__init__(f"Bad status code: {status}")
        self.status = status


class DeserializationError(IPCError):
    """Raised when a response body is not valid serialized data."""


__all__ = [
    "BadStatusError",
    "BindFailedError",
    "DeserializationError",
    "IPCError",
    "MissingEndpointError",
    "RandomnessUnavailableError",
    "TransportError",
]
