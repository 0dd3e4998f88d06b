"""JSON payload encoding shared by the IPC server and client."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def encode_payload(value: Any) -> bytes:
    """Serialise *value* as compact UTF-8 JSON.

    Pydantic models are dumped in JSON mode, at any nesting depth.

    Raises:
        TypeError: If *value* contains something JSON cannot represent.
        ValueError: On circular references.
    """
    return json.dumps(value, separators=(",", ":"), default=_json_default).encode("utf-8")


def decode_payload(body: bytes) -> Any:
    """Parse a UTF-8 JSON body.

    Raises:
        ValueError: If *body* is not valid UTF-8 or not valid JSON.
            ``json.JSONDecodeError`` and ``UnicodeDecodeError`` are both
            subclasses.
    """
    return json.loads(body.decode("utf-8"))


__all__ = ["decode_payload", "encode_payload"]
