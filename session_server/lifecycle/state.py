"""Server lifecycle state management."""

import threading
import time

from session_server.domain.correlation_id import get_logger

LIFECYCLE_LOGGER = get_logger("lifecycle")


class ServerLifecycle:
    """Tracks in-flight connections and the stop signal.

    Workers call ``connection_started``/``connection_finished`` around each
    connection; shutdown waits on the condition until the count drains.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._stop_event = threading.Event()
        self._active = 0

    def should_stop(self) -> bool:
        """Return True once shutdown has been requested."""
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        """Stop accepting connections; in-flight ones may finish."""
        if not self._stop_event.is_set():
            self._stop_event.set()
            LIFECYCLE_LOGGER.info("Shutdown requested", extra={"event": "shutdown_requested"})

    def connection_started(self) -> None:
        with self._condition:
            self._active += 1

    def connection_finished(self) -> None:
        with self._condition:
            self._active = max(0, self._active - 1)
            if self._active == 0:
                self._condition.notify_all()

    def active_connections(self) -> int:
        with self._condition:
            return self._active

    def wait_for_connections(self, timeout: float) -> bool:
        """Block until no connection is in flight or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        with self._condition:
            while self._active:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    LIFECYCLE_LOGGER.warning(
                        "Shutdown timeout exceeded",
                        extra={"remaining_workers": self._active},
                    )
                    return False
                self._condition.wait(remaining)
        return True
