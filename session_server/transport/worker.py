"""Worker thread logic for handling individual client connections."""

import socket
import time
from typing import BinaryIO, Optional

from session_server.domain.correlation_id import (
    bind_correlation_id,
    clear_correlation_id,
    get_logger,
)
from session_server.domain.http_types import (
    HttpRequest,
    HttpResponse,
    MalformedRequest,
    RequestEntityTooLarge,
)
from session_server.domain.response_builders import (
    bad_request_response,
    entity_too_large_response,
    internal_error_response,
    not_found_response,
)
from session_server.pipeline.io import open_reader, receive_request, send_response
from session_server.pipeline.router import NoMatch
from session_server.transport.context import WorkerContext

WORKER_LOGGER = get_logger("transport.worker")


def process_request(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Route and dispatch a parsed request, converting failures to responses."""
    try:
        controller = context.router.find(request)
    except NoMatch:
        return not_found_response()
    try:
        return controller.service(request)
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Controller failed",
            extra={
                "event": "controller_error",
                "route": request.path,
                "error_type": type(error).__name__,
            },
            exc_info=True,
        )
        return internal_error_response()


def _read_request(
    reader: BinaryIO, context: WorkerContext, client_addr_str: str
) -> tuple[Optional[HttpRequest], Optional[HttpResponse]]:
    """Parse the request, or produce the error response the client should get."""
    try:
        return receive_request(reader, context.config), None
    except RequestEntityTooLarge:
        WORKER_LOGGER.warning(
            "Request body size exceeded limit",
            extra={"event": "body_size_exceeded", "client": client_addr_str},
        )
        return None, entity_too_large_response()
    except MalformedRequest as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={
                "event": "malformed_request",
                "client": client_addr_str,
                "reason": str(error),
            },
        )
        return None, bad_request_response()


def _close_socket(client_socket: socket.socket) -> None:
    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    client_socket.close()


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve exactly one request on ``client_socket`` and close it.

    Parse, route, dispatch, serialize and write happen strictly in sequence.
    Socket failures are logged and end this connection only.
    """
    client_addr_str = f"{client_address[0]}:{client_address[1]}"
    bind_correlation_id()
    lifecycle = context.lifecycle
    if lifecycle is not None:
        lifecycle.connection_started()
    if context.config.socket_timeout > 0:
        client_socket.settimeout(context.config.socket_timeout)
    started = time.monotonic()

    try:
        with open_reader(client_socket) as reader:
            request, error_response = _read_request(reader, context, client_addr_str)
        if request is None and error_response is None:
            if WORKER_LOGGER.debug_enabled():
                WORKER_LOGGER.debug(
                    "Client disconnected before sending a request",
                    extra={"event": "client_disconnected", "client": client_addr_str},
                )
            return
        response = error_response or process_request(request, context)
        bytes_out = send_response(client_socket, response)
        WORKER_LOGGER.info(
            "Request complete",
            extra={
                "event": "request_complete",
                "client": client_addr_str,
                "method": request.method_token if request else "-",
                "route": request.path if request else "-",
                "status_code": response.status.code,
                "bytes_out": bytes_out,
                "duration_ms": round((time.monotonic() - started) * 1000, 3),
            },
        )
    except (ConnectionError, TimeoutError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
            exc_info=True,
        )
    finally:
        _close_socket(client_socket)
        if lifecycle is not None:
            lifecycle.connection_finished()
        clear_correlation_id()
