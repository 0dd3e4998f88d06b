"""Command line bootstrap for localipc servers and clients."""

from __future__ import annotations

from localipc.cli.commands.root import cli

__all__ = ["cli"]
