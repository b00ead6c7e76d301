"""Main connection acceptance loop."""

import socket
import threading

from session_server.domain.correlation_id import get_logger
from session_server.transport.context import WorkerContext
from session_server.transport.worker import handle_client

ACCEPT_LOGGER = get_logger("transport.accept")


def spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> threading.Thread:
    """Start a dedicated thread for one accepted connection."""
    if ACCEPT_LOGGER.debug_enabled():
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        daemon=False,
    )
    thread.start()
    return thread


def serve_forever(server_socket: socket.socket, context: WorkerContext) -> None:
    """Accept connections until the lifecycle asks to stop, then drain."""
    lifecycle = context.lifecycle
    host, port = server_socket.getsockname()[:2]
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={"event": "server_listening", "host": host, "port": port},
    )
    try:
        while lifecycle is None or not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle is not None and lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue
            spawn_worker(client_socket, client_address, context)
    finally:
        server_socket.close()
        if lifecycle is not None:
            grace = context.config.shutdown_grace_seconds
            ACCEPT_LOGGER.info(
                "Waiting for active connections to complete",
                extra={"event": "shutdown_waiting", "shutdown_grace_seconds": grace},
            )
            lifecycle.wait_for_connections(grace)
        ACCEPT_LOGGER.info("Server shutdown complete", extra={"event": "server_stopped"})
