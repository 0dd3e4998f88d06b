"""Pytest fixtures for localipc tests."""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from hypothesis import Phase, Verbosity, settings

from localipc.constants import HANDLE_ENV_VAR, RUNTIME_DIR_ENV_VAR
from localipc.server import create_ipc_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from localipc.server import IPCServer


settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=None,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def short_tmp() -> Generator[Path, None, None]:
    """Create a short temp directory for Unix socket paths (macOS 104-byte limit)."""
    d = tempfile.mkdtemp(prefix="l-", dir=None if sys.platform == "win32" else "/tmp")
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture(autouse=True)
def runtime_dir(monkeypatch: pytest.MonkeyPatch, short_tmp: Path) -> Path:
    """Point endpoint resolution at a private directory and hide inherited handles."""
    monkeypatch.setenv(RUNTIME_DIR_ENV_VAR, str(short_tmp))
    monkeypatch.delenv(HANDLE_ENV_VAR, raising=False)
    return short_tmp


@pytest.fixture
def context() -> str:
    """A context string unique to the test."""
    return f"test-{uuid4().hex}"


@pytest.fixture
async def ipc_server(context: str) -> AsyncGenerator[IPCServer]:
    """A listening server with no handlers registered."""
    server = await create_ipc_server(context)
    yield server
    await server.dispose()
