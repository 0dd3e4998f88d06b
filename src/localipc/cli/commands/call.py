"""Call a channel on a running IPC server."""

from __future__ import annotations

import asyncio
import json
import sys

import click

from localipc.client import IPCClient
from localipc.constants import HANDLE_ENV_VAR
from localipc.contracts import CallOptions
from localipc.errors import IPCError


@click.command()
@click.argument("channel")
@click.argument("payload", required=False)
@click.option(
    "--handle",
    envvar=HANDLE_ENV_VAR,
    help=f"Endpoint address of the server [env: {HANDLE_ENV_VAR}].",
)
@click.option("--raw", is_flag=True, help="Print the response body without parsing it.")
def call(channel: str, payload: str | None, handle: str | None, raw: bool) -> None:
    """Send PAYLOAD (JSON, read from stdin when omitted) to CHANNEL."""
    text = payload if payload is not None else sys.stdin.read()
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON ({exc.msg})", param_hint="PAYLOAD") from exc

    try:
        client = IPCClient(channel, handle)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="CHANNEL") from exc
    except IPCError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        result = asyncio.run(client.call(value, CallOptions(disable_marshalling=raw)))
    except IPCError as exc:
        raise click.ClickException(str(exc)) from exc

    if raw:
        click.echo(result, nl=False)
    else:
        click.echo(json.dumps(result))
