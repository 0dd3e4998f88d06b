"""Shared IPC naming and framing constants."""

from __future__ import annotations

HANDLE_ENV_VAR = "LOCALIPC_HANDLE"
RUNTIME_DIR_ENV_VAR = "LOCALIPC_RUNTIME_DIR"

ENDPOINT_PREFIX = "ipc"
ENDPOINT_HASH_CHARS = 10
RANDOM_CONTEXT_BYTES = 20

# Host component of client request URLs; the connector ignores it.
REQUEST_HOST = "localipc"
JSON_CONTENT_TYPE = "application/json"

MAX_BODY_BYTES = 64 * 1024 * 1024  # 64 MiB per request body

__all__ = [
    "ENDPOINT_HASH_CHARS",
    "ENDPOINT_PREFIX",
    "HANDLE_ENV_VAR",
    "JSON_CONTENT_TYPE",
    "MAX_BODY_BYTES",
    "RANDOM_CONTEXT_BYTES",
    "REQUEST_HOST",
    "RUNTIME_DIR_ENV_VAR",
]
