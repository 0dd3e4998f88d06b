"""Handler and option contracts for local IPC."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@runtime_checkable
class IPCHandler(Protocol):
    """Object serving one channel.

    ``handle`` receives the deserialized request value and returns the
    response value, either directly or as an awaitable.
    """

    def handle(self, data: Any) -> Awaitable[Any] | Any: ...


@runtime_checkable
class Disposable(Protocol):
    """Something that releases a resource when disposed."""

    def dispose(self) -> None: ...


HandlerFunc: TypeAlias = "Callable[[Any], Awaitable[Any] | Any]"
HandlerLike: TypeAlias = "IPCHandler | HandlerFunc"


class CallOptions(BaseModel):
    """Per-call options accepted by ``IPCClient.call``."""

    model_config = ConfigDict(frozen=True)

    disable_marshalling: bool = Field(
        default=False,
        description=(
            "Return the raw response body as bytes instead of parsing JSON; "
            "bytes payloads are also sent untouched"
        ),
    )


__all__ = [
    "CallOptions",
    "Disposable",
    "HandlerFunc",
    "HandlerLike",
    "IPCHandler",
]
