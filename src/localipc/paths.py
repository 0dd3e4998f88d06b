"""Runtime directory helpers for local IPC endpoints."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

from localipc.constants import RUNTIME_DIR_ENV_VAR


def uses_named_pipes() -> bool:
    """Whether endpoints on this platform are named pipes rather than socket files."""
    return sys.platform == "win32"


def get_runtime_dir() -> Path:
    """Get the directory that holds Unix domain socket endpoints.

    ``LOCALIPC_RUNTIME_DIR`` wins when set, then ``XDG_RUNTIME_DIR``, then the
    system temp directory.
    """
    override = os.environ.get(RUNTIME_DIR_ENV_VAR)
    if override:
        return Path(override).resolve()
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    if runtime_dir:
        return Path(runtime_dir)
    return Path(tempfile.gettempdir())


__all__ = ["get_runtime_dir", "uses_named_pipes"]
