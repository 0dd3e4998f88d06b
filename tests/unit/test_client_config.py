"""Tests for IPC client construction and endpoint resolution."""

from __future__ import annotations

import pytest

from localipc.client import IPCClient, handle_path_from_env
from localipc.constants import HANDLE_ENV_VAR
from localipc.contracts import CallOptions
from localipc.errors import MissingEndpointError

pytestmark = pytest.mark.unit


def test_explicit_handle_path_wins_over_environment() -> None:
    client = IPCClient("echo", "/tmp/explicit.sock", environ={HANDLE_ENV_VAR: "/tmp/env.sock"})

    assert client.handle_path == "/tmp/explicit.sock"
    assert client.channel_name == "echo"


def test_handle_path_falls_back_to_environment() -> None:
    client = IPCClient("echo", environ={HANDLE_ENV_VAR: "/tmp/env.sock"})

    assert client.handle_path == "/tmp/env.sock"


def test_handle_path_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(HANDLE_ENV_VAR, "/tmp/process.sock")

    assert IPCClient("echo").handle_path == "/tmp/process.sock"


@pytest.mark.parametrize("environ", [{}, {HANDLE_ENV_VAR: ""}])
def test_missing_endpoint_raises(environ: dict[str, str]) -> None:
    with pytest.raises(MissingEndpointError, match=HANDLE_ENV_VAR):
        IPCClient("echo", environ=environ)


def test_missing_endpoint_without_process_environment() -> None:
    with pytest.raises(MissingEndpointError):
        IPCClient("echo")


@pytest.mark.parametrize("channel", ["a/b", ".", ".."])
def test_invalid_channel_name_raises(channel: str) -> None:
    with pytest.raises(ValueError):
        IPCClient(channel, "/tmp/x.sock")


def test_handle_path_from_env_treats_empty_as_missing() -> None:
    assert handle_path_from_env({HANDLE_ENV_VAR: ""}) is None
    assert handle_path_from_env({HANDLE_ENV_VAR: "/tmp/x.sock"}) == "/tmp/x.sock"


def test_request_url_encodes_channel_as_single_segment() -> None:
    client = IPCClient("hello world?", "/tmp/x.sock")

    assert client.url == "http://localipc/hello%20world%3F"


def test_call_options_default_to_marshalling() -> None:
    options = CallOptions()

    assert options.disable_marshalling is False
    with pytest.raises(ValueError):
        options.disable_marshalling = True  # type: ignore[misc]
