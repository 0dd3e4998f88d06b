"""IPC client that calls a channel on a local IPC server."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aiohttp

from localipc.constants import HANDLE_ENV_VAR, JSON_CONTENT_TYPE, REQUEST_HOST
from localipc.contracts import CallOptions
from localipc.errors import (
    BadStatusError,
    DeserializationError,
    MissingEndpointError,
    TransportError,
)
from localipc.marshalling import decode_payload, encode_payload
from localipc.registry import validate_channel_name
from localipc.transports import DefaultTransport

if TYPE_CHECKING:
    from collections.abc import Mapping

    from localipc.transports import Transport

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = CallOptions()


def handle_path_from_env(environ: Mapping[str, str] | None = None) -> str | None:
    """Return the endpoint address published in *environ* (``os.environ`` by default)."""
    env = os.environ if environ is None else environ
    return env.get(HANDLE_ENV_VAR) or None


class IPCClient:
    """Async client bound to one channel of a local IPC server.

    Every ``call`` opens a fresh connection, sends one request and reads one
    response; nothing is pooled or retried.

    Usage::

        client = IPCClient("echo", server.handle_path)
        result = await client.call({"message": "hi"})

    A child process started with ``server.get_env()`` can omit the address::

        client = IPCClient("echo")
    """

    def __init__(
        self,
        channel_name: str,
        handle_path: str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        transport: Transport | None = None,
        timeout: float | None = None,
    ) -> None:
        resolved = handle_path or handle_path_from_env(environ)
        if not resolved:
            msg = f"Missing {HANDLE_ENV_VAR}"
            raise MissingEndpointError(msg)

        self._channel_name = validate_channel_name(channel_name)
        self._handle_path = resolved
        self._transport = transport or DefaultTransport()
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def channel_name(self) -> str:
        return self._channel_name

    @property
    def handle_path(self) -> str:
        """Endpoint address this client connects to."""
        return self._handle_path

    @property
    def url(self) -> str:
        return f"http://{REQUEST_HOST}/{quote(self._channel_name, safe='')}"

    async def call(self, payload: Any, options: CallOptions | None = None) -> Any:
        """Send *payload* to the channel and return the response.

        Args:
            payload: JSON-serializable value (pydantic models included). With
                ``disable_marshalling`` a ``bytes`` payload is sent as is.
            options: Per-call options.

        Returns:
            The deserialized response, or the raw body as ``bytes`` when
            ``disable_marshalling`` is set.

        Raises:
            BadStatusError: If the server does not answer with ``200``.
            DeserializationError: If the response body is not valid JSON.
            TransportError: If the connection fails or times out.
        """
        opts = options or _DEFAULT_OPTIONS
        if opts.disable_marshalling and isinstance(payload, bytes | bytearray):
            body = bytes(payload)
        else:
            body = encode_payload(payload)

        logger.debug("IPC call: channel=%s bytes=%d", self._channel_name, len(body))
        try:
            async with (
                aiohttp.ClientSession(
                    connector=self._transport.connector(self._handle_path),
                    timeout=self._timeout,
                ) as session,
                session.post(
                    self.url,
                    data=body,
                    headers={"Content-Type": JSON_CONTENT_TYPE},
                ) as response,
            ):
                if response.status != 200:
                    raise BadStatusError(response.status)
                raw = await response.read()
        except (aiohttp.ClientError, TimeoutError, OSError) as exc:
            raise TransportError(self._handle_path, str(exc) or type(exc).__name__) from exc

        if opts.disable_marshalling:
            return raw
        try:
            return decode_payload(raw)
        except ValueError as exc:
            msg = f"Invalid response from channel {self._channel_name}"
            raise DeserializationError(msg) from exc


__all__ = ["IPCClient", "handle_path_from_env"]
