"""Run an IPC server in the foreground."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Any

import click

from localipc.errors import IPCError
from localipc.registry import validate_channel_name
from localipc.server import create_ipc_server

logger = logging.getLogger(__name__)


def _echo(data: Any) -> Any:
    return data


async def _serve(context: str | None, echo_channels: tuple[str, ...]) -> None:
    try:
        server = await create_ipc_server(context)
    except IPCError as exc:
        raise click.ClickException(str(exc)) from exc

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows; Ctrl+C surfaces as KeyboardInterrupt there.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    try:
        for channel in echo_channels:
            server.register_handler(channel, _echo)
        for key, value in server.get_env().items():
            click.echo(f"{key}={value}")
        await stop.wait()
    finally:
        await server.dispose()


@click.command()
@click.option("--context", default=None, help="Derive a stable endpoint from this string.")
@click.option(
    "--echo",
    "echo_channels",
    multiple=True,
    metavar="CHANNEL",
    help="Register a handler on CHANNEL that returns its input (repeatable).",
)
def serve(context: str | None, echo_channels: tuple[str, ...]) -> None:
    """Start a server and print its handle until SIGINT or SIGTERM."""
    for channel in echo_channels:
        try:
            validate_channel_name(channel)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--echo") from exc

    try:
        asyncio.run(_serve(context, echo_channels))
    except KeyboardInterrupt:
        logger.info("IPC server interrupted")
