"""Tests for endpoint address derivation and stale endpoint cleanup."""

from __future__ import annotations

import hashlib
import os
import re
import tempfile
from typing import TYPE_CHECKING

import pytest

from localipc.constants import RUNTIME_DIR_ENV_VAR
from localipc.endpoint import (
    endpoint_hash,
    endpoint_path_for_hash,
    is_filesystem_endpoint,
    remove_stale_endpoint,
    resolve_endpoint,
)
from localipc.errors import RandomnessUnavailableError

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.unit


def _expected_hash(context: str) -> str:
    return hashlib.sha256(context.encode("utf-8")).hexdigest()[:10]


@pytest.fixture
def posix_endpoints(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("localipc.endpoint.uses_named_pipes", lambda: False)


@pytest.fixture
def pipe_endpoints(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("localipc.endpoint.uses_named_pipes", lambda: True)


def test_same_context_yields_same_address() -> None:
    assert resolve_endpoint("/home/me/project") == resolve_endpoint("/home/me/project")


def test_different_contexts_yield_different_addresses() -> None:
    assert resolve_endpoint("session-a") != resolve_endpoint("session-b")


def test_missing_context_yields_fresh_addresses() -> None:
    assert resolve_endpoint() != resolve_endpoint()


def test_empty_context_is_treated_as_missing() -> None:
    assert resolve_endpoint("") != resolve_endpoint("")


def test_endpoint_hash_is_ten_hex_chars() -> None:
    assert re.fullmatch(r"[0-9a-f]{10}", endpoint_hash())
    assert endpoint_hash("ctx") == _expected_hash("ctx")


@pytest.mark.usefixtures("posix_endpoints")
def test_posix_address_uses_runtime_dir(runtime_dir: Path) -> None:
    address = resolve_endpoint("ctx")

    assert address == os.path.join(runtime_dir.resolve(), f"ipc-{_expected_hash('ctx')}.sock")


@pytest.mark.usefixtures("posix_endpoints")
def test_posix_address_honors_xdg_runtime_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv(RUNTIME_DIR_ENV_VAR)
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))

    assert endpoint_path_for_hash("0123456789") == os.path.join(tmp_path, "ipc-0123456789.sock")


@pytest.mark.usefixtures("posix_endpoints")
def test_posix_address_falls_back_to_temp_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(RUNTIME_DIR_ENV_VAR)
    monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)

    assert endpoint_path_for_hash("0123456789") == os.path.join(
        tempfile.gettempdir(), "ipc-0123456789.sock"
    )


@pytest.mark.usefixtures("pipe_endpoints")
def test_windows_address_is_named_pipe() -> None:
    address = resolve_endpoint("ctx")

    assert address == f"\\\\.\\pipe\\ipc-{_expected_hash('ctx')}-sock"
    assert not is_filesystem_endpoint(address)


def test_missing_randomness_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_entropy(_n: int) -> bytes:
        raise NotImplementedError

    monkeypatch.setattr("secrets.token_bytes", _no_entropy)

    with pytest.raises(RandomnessUnavailableError):
        resolve_endpoint()
    assert resolve_endpoint("ctx")


def test_resolve_endpoint_touches_no_files(runtime_dir: Path) -> None:
    resolve_endpoint("ctx")

    assert list(runtime_dir.iterdir()) == []


@pytest.mark.usefixtures("posix_endpoints")
def test_remove_stale_endpoint_unlinks_existing_file(runtime_dir: Path) -> None:
    stale = runtime_dir / "ipc-0123456789.sock"
    stale.write_text("", encoding="utf-8")

    remove_stale_endpoint(str(stale))

    assert not stale.exists()


@pytest.mark.usefixtures("posix_endpoints")
def test_remove_stale_endpoint_ignores_missing_file(runtime_dir: Path) -> None:
    remove_stale_endpoint(str(runtime_dir / "absent.sock"))


@pytest.mark.usefixtures("pipe_endpoints")
def test_remove_stale_endpoint_skips_named_pipes(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unexpected(_path: str) -> None:
        raise AssertionError("named pipes have no file to unlink")

    monkeypatch.setattr("os.unlink", _unexpected)

    remove_stale_endpoint("\\\\.\\pipe\\ipc-0123456789-sock")
