"""Unit tests for connection tracking during shutdown."""

import threading
import time

from session_server.lifecycle.state import ServerLifecycle


def test_request_stop_is_idempotent():
    lifecycle = ServerLifecycle()
    assert not lifecycle.should_stop()
    lifecycle.request_stop()
    lifecycle.request_stop()
    assert lifecycle.should_stop()


def test_wait_returns_immediately_when_idle():
    assert ServerLifecycle().wait_for_connections(0.1) is True


def test_wait_times_out_while_connection_is_active():
    lifecycle = ServerLifecycle()
    lifecycle.connection_started()
    started = time.monotonic()
    assert lifecycle.wait_for_connections(0.2) is False
    assert time.monotonic() - started >= 0.2
    assert lifecycle.active_connections() == 1


def test_wait_returns_once_last_connection_finishes():
    lifecycle = ServerLifecycle()
    lifecycle.connection_started()
    lifecycle.connection_started()

    def finish_later():
        time.sleep(0.05)
        lifecycle.connection_finished()
        lifecycle.connection_finished()

    thread = threading.Thread(target=finish_later)
    thread.start()
    assert lifecycle.wait_for_connections(5) is True
    thread.join()
    assert lifecycle.active_connections() == 0


def test_finished_never_goes_negative():
    lifecycle = ServerLifecycle()
    lifecycle.connection_finished()
    assert lifecycle.active_connections() == 0
