"""Endpoint address derivation for local IPC servers.

An endpoint address is the path of a Unix domain socket on POSIX systems or
the name of a named pipe on Windows. Addresses are derived from a SHA-256
digest so that two processes agreeing on a context string meet at the same
endpoint, while servers created without context get a fresh one each time.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import secrets

from localipc.constants import ENDPOINT_HASH_CHARS, ENDPOINT_PREFIX, RANDOM_CONTEXT_BYTES
from localipc.errors import RandomnessUnavailableError
from localipc.paths import get_runtime_dir, uses_named_pipes

logger = logging.getLogger(__name__)

_PIPE_NAMESPACE = "\\\\.\\pipe\\"


def _random_seed() -> bytes:
    try:
        return secrets.token_bytes(RANDOM_CONTEXT_BYTES)
    except NotImplementedError as exc:
        msg = "No source of randomness available to derive an IPC endpoint"
        raise RandomnessUnavailableError(msg) from exc


def endpoint_hash(context: str | None = None) -> str:
    """Return the truncated hex digest used to name an endpoint.

    Args:
        context: Agreed-upon string; random bytes are hashed when omitted.

    Raises:
        RandomnessUnavailableError: If no context is given and the OS cannot
            provide random bytes.
    """
    seed = context.encode("utf-8") if context else _random_seed()
    return hashlib.sha256(seed).hexdigest()[:ENDPOINT_HASH_CHARS]


def endpoint_path_for_hash(digest: str) -> str:
    """Embed *digest* in the platform-specific endpoint template."""
    if uses_named_pipes():
        return _PIPE_NAMESPACE + f"{ENDPOINT_PREFIX}-{digest}-sock"
    return os.path.join(get_runtime_dir(), f"{ENDPOINT_PREFIX}-{digest}.sock")


def resolve_endpoint(context: str | None = None) -> str:
    """Derive the endpoint address for *context* (or a random one).

    No filesystem access happens here.
    """
    return endpoint_path_for_hash(endpoint_hash(context))


def is_filesystem_endpoint(handle_path: str) -> bool:
    """Whether *handle_path* is backed by a file that needs cleanup."""
    return bool(handle_path) and not uses_named_pipes()


def remove_stale_endpoint(handle_path: str) -> None:
    """Best-effort removal of a socket file left behind by a previous server."""
    if not is_filesystem_endpoint(handle_path):
        return
    with contextlib.suppress(OSError):
        os.unlink(handle_path)
        logger.debug("Removed stale IPC endpoint %s", handle_path)


__all__ = [
    "endpoint_hash",
    "endpoint_path_for_hash",
    "is_filesystem_endpoint",
    "remove_stale_endpoint",
    "resolve_endpoint",
]
