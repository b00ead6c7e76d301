"""Integration tests for graceful shutdown behavior."""

from __future__ import annotations

import signal
from typing import TYPE_CHECKING

import pytest
import requests

pytestmark = pytest.mark.integration

if TYPE_CHECKING:
    from tests.conftest import ServerProcessInfo


def test_sigterm_stops_server_cleanly(server_process: "ServerProcessInfo") -> None:
    """SIGTERM stops the accept loop and the process exits with status 0."""

    assert requests.get(f"{server_process['base_url']}/", timeout=5).status_code == 200

    process = server_process["process"]
    process.send_signal(signal.SIGTERM)
    assert process.wait(timeout=10) == 0

    log_text = server_process["log_file"].read_text()
    assert "shutdown_requested" in log_text
    assert "server_stopped" in log_text
