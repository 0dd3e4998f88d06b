"""Root CLI command registration."""

from __future__ import annotations

import logging

import click

from localipc.version import get_localipc_version

from .call import call
from .endpoint import endpoint
from .serve import serve

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.version_option(get_localipc_version(), prog_name="localipc")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LOCALIPC_LOG_LEVEL",
    help="Logging level written to stderr.",
)
def cli(log_level: str) -> None:
    """Serve and call local IPC channels."""
    logging.basicConfig(level=log_level.upper(), format="%(name)s: %(message)s")


cli.add_command(serve)
cli.add_command(call)
cli.add_command(endpoint)
