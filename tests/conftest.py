"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Generator, TypedDict

import pytest

from tests.utils.http import reserve_port, wait_for_port

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SERVER_ENTRYPOINT = PROJECT_ROOT / "main.py"
BUNDLED_STATIC_ROOT = PROJECT_ROOT / "static"


class ServerProcessInfo(TypedDict):
    """Metadata describing a running server fixture instance."""

    base_url: str
    host: str
    port: int
    directory: Path
    process: subprocess.Popen[str]
    log_file: Path


def _launch_server(
    host: str,
    port: int,
    directory: Path,
    log_file: Path,
    extra_args: list[str] | None = None,
) -> Generator[ServerProcessInfo, None, None]:
    args = [
        sys.executable,
        str(SERVER_ENTRYPOINT),
        "--directory",
        str(directory),
        "--host",
        host,
        "--port",
        str(port),
        "--log-destination",
        str(log_file),
        "--socket-timeout",
        "5",
        "--shutdown-grace-seconds",
        "2",
    ]
    if extra_args:
        args.extend(extra_args)

    with subprocess.Popen(
        args,
        cwd=PROJECT_ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    ) as process:
        try:
            wait_for_port(host, port)
        except Exception:
            process.terminate()
            stdout, stderr = process.communicate(timeout=5)
            print(f"\nServer stdout:\n{stdout}")
            print(f"\nServer stderr:\n{stderr}")
            raise

        yield {
            "base_url": f"http://{host}:{port}",
            "host": host,
            "port": port,
            "directory": directory,
            "process": process,
            "log_file": log_file,
        }

        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure package logs reach the root logger so caplog can see them."""
    logger = logging.getLogger("session_server")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


@pytest.fixture()
def static_root(tmp_path: Path) -> Path:
    """Copy the bundled content root into a temporary directory."""

    target = tmp_path / "static"
    shutil.copytree(BUNDLED_STATIC_ROOT, target)
    return target


@pytest.fixture(name="server_process")
def _server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the HTTP server in a background process for integration tests."""

    host = "127.0.0.1"
    port = reserve_port(host)
    workdir = tmp_path_factory.mktemp("server")
    directory = workdir / "static"
    shutil.copytree(BUNDLED_STATIC_ROOT, directory)
    yield from _launch_server(host, port, directory, workdir / "server.log")


@pytest.fixture(name="strict_server_process")
def _strict_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch a server that verifies passwords on login."""

    host = "127.0.0.1"
    port = reserve_port(host)
    workdir = tmp_path_factory.mktemp("server-strict")
    directory = workdir / "static"
    shutil.copytree(BUNDLED_STATIC_ROOT, directory)
    yield from _launch_server(
        host, port, directory, workdir / "server.log", ["--require-password"]
    )


@pytest.fixture()
def base_url(server_process: ServerProcessInfo) -> str:
    """Expose the running server base URL to integration tests."""

    return server_process["base_url"]
