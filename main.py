"""HTTP server with static files, login, registration and cookie sessions."""

import signal
import sys

from session_server.bootstrap.config import ServerConfig, parse_cli_args
from session_server.bootstrap.logging_setup import configure_logging
from session_server.bootstrap.socket_factory import create_server_socket
from session_server.lifecycle.state import ServerLifecycle
from session_server.transport.accept_loop import serve_forever
from session_server.transport.context import build_worker_context


def main(argv=None) -> int:
    """Start the server and block until SIGINT or SIGTERM."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    logger = configure_logging(
        args.log_level, args.log_destination, use_json=args.log_format == "json"
    )
    config = ServerConfig.from_args(args)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        logger.info("Received shutdown signal", extra={"signal": signum})
        lifecycle.request_stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    logger.info(
        "Starting HTTP server",
        extra={
            "host": args.host,
            "port": args.port,
            "directory": config.static_root,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    if not config.require_password:
        logger.warning(
            "Login accepts any password for an existing account; "
            "start with --require-password to verify passwords",
            extra={"event": "password_check_disabled"},
        )
    if config.socket_timeout <= 0:
        logger.warning(
            "Socket timeout disabled; a silent client can hold a worker forever",
            extra={"event": "socket_timeout_disabled"},
        )

    try:
        server_socket = create_server_socket(args.host, args.port)
    except OSError:
        return 1
    serve_forever(server_socket, build_worker_context(config, lifecycle))
    return 0


if __name__ == "__main__":
    sys.exit(main())
