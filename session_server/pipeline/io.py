"""Socket-level reading and writing of HTTP messages."""

import socket
from typing import BinaryIO, Optional

from session_server.bootstrap.config import ServerConfig
from session_server.domain.correlation_id import get_logger
from session_server.domain.http_types import HttpRequest, HttpResponse
from session_server.pipeline.parser import parse_request

IO_LOGGER = get_logger("pipeline.io")


def open_reader(client_socket: socket.socket) -> BinaryIO:
    """Wrap the socket in a buffered binary reader for the parser."""
    return client_socket.makefile("rb")


def receive_request(reader: BinaryIO, config: ServerConfig) -> Optional[HttpRequest]:
    """Parse one request from the socket reader using configured limits."""
    return parse_request(
        reader,
        max_line_bytes=config.max_line_bytes,
        max_body_bytes=config.max_body_bytes,
    )


def send_response(client_socket: socket.socket, response: HttpResponse) -> int:
    """Serialize the response, write it in full and return the byte count."""
    payload = response.to_bytes()
    client_socket.sendall(payload)
    if IO_LOGGER.debug_enabled():
        IO_LOGGER.debug(
            "Sent response",
            extra={
                "event": "response_sent",
                "status_code": response.status.code,
                "bytes_out": len(payload),
            },
        )
    return len(payload)
