"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


DEFAULT_STATIC_ROOT = "static"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_SOCKET_TIMEOUT = _env_int("HTTP_SERVER_SOCKET_TIMEOUT", 60)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("HTTP_SERVER_SHUTDOWN_GRACE_SECONDS", 30)
MAX_BODY_BYTES = _env_int("HTTP_SERVER_MAX_BODY_BYTES", 1024 * 1024)
MAX_LINE_BYTES = _env_int("HTTP_SERVER_MAX_LINE_BYTES", 8192)
DEFAULT_REQUIRE_PASSWORD = _env_bool("HTTP_SERVER_REQUIRE_PASSWORD", False)

WELCOME_MESSAGE = "Hello world!"
HOME_PATH = "/index.html"
LOGIN_PATHS = ("/login", "/login.html")
REGISTER_PATHS = ("/register", "/register.html")
USER_SESSION_ATTRIBUTE = "user"
LOG_FORMATS = ("json", "text")


@dataclass
class ServerConfig:
    """Settings the connection workers and controllers depend on."""

    static_root: str = DEFAULT_STATIC_ROOT
    socket_timeout: int = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    max_body_bytes: int = MAX_BODY_BYTES
    max_line_bytes: int = MAX_LINE_BYTES
    require_password: bool = DEFAULT_REQUIRE_PASSWORD

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ServerConfig":
        """Build a config from parsed CLI arguments."""
        return cls(
            static_root=args.directory,
            socket_timeout=args.socket_timeout,
            shutdown_grace_seconds=args.shutdown_grace_seconds,
            max_body_bytes=args.max_body_bytes,
            max_line_bytes=args.max_line_bytes,
            require_password=args.require_password,
        )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="Session-aware HTTP server")
    parser.add_argument(
        "--directory",
        default=_env_str("HTTP_SERVER_STATIC_ROOT", DEFAULT_STATIC_ROOT),
        help="Content root served for static resources",
    )
    parser.add_argument("--host", default=_env_str("HTTP_SERVER_HOST", DEFAULT_HOST))
    parser.add_argument(
        "--port", type=int, default=_env_int("HTTP_SERVER_PORT", DEFAULT_PORT)
    )
    default_log_level = os.getenv("HTTP_SERVER_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("HTTP_SERVER_LOG_DESTINATION", "stdout")
    default_log_format = os.getenv("HTTP_SERVER_LOG_FORMAT", "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=LOG_FORMATS,
        type=str.lower,
    )
    parser.add_argument(
        "--socket-timeout",
        type=int,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Per-connection socket timeout in seconds (0 waits forever)",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for graceful shutdown",
    )
    parser.add_argument(
        "--max-body-bytes",
        type=int,
        default=MAX_BODY_BYTES,
        help="Largest request body accepted",
    )
    parser.add_argument(
        "--max-line-bytes",
        type=int,
        default=MAX_LINE_BYTES,
        help="Longest start or header line accepted",
    )
    parser.add_argument(
        "--require-password",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_REQUIRE_PASSWORD,
        help="Verify the password on login instead of trusting the account name",
    )
    return parser.parse_args(argv)
