"""Print the endpoint address a server would bind."""

from __future__ import annotations

import click

from localipc.endpoint import resolve_endpoint


@click.command()
@click.option("--context", default=None, help="Context string the address is derived from.")
def endpoint(context: str | None) -> None:
    """Print the endpoint for CONTEXT, or a fresh random one."""
    click.echo(resolve_endpoint(context))
