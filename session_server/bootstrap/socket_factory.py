"""Listening socket creation."""

import socket

from session_server.domain.correlation_id import get_logger

SOCKET_LOGGER = get_logger("socket")

ACCEPT_POLL_SECONDS = 0.5


def create_server_socket(host: str, port: int) -> socket.socket:
    """Bind a TCP listener whose accept() wakes up to check for shutdown."""
    try:
        server_socket = socket.create_server(
            (host, port), reuse_port=hasattr(socket, "SO_REUSEPORT")
        )
    except OSError as error:
        SOCKET_LOGGER.critical(
            "Failed to bind listening socket",
            extra={
                "event": "bind_failed",
                "host": host,
                "port": port,
                "error_type": type(error).__name__,
            },
        )
        raise
    server_socket.settimeout(ACCEPT_POLL_SECONDS)
    return server_socket
