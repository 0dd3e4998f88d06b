"""CLI entry point for localipc."""

from __future__ import annotations

import sys

if sys.version_info < (3, 12):  # noqa: UP036
    print("Error: localipc requires Python 3.12 or higher.")
    sys.exit(1)

from localipc.cli.commands.root import cli  # noqa: E402

if __name__ == "__main__":
    cli()
