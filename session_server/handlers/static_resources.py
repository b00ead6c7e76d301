"""Resolve request paths to files under the content root."""

from pathlib import Path
from typing import Union

from session_server.domain.correlation_id import get_logger
from session_server.domain.sandbox import ForbiddenPath, resolve_sandbox_path

STATIC_LOGGER = get_logger("handlers.static_resources")

DEFAULT_EXTENSION = ".html"


class ResourceNotFound(LookupError):
    """Raised when no file exists for a request path."""


def resource_path_for(request_path: str) -> str:
    """Append ``.html`` when the final path segment has no extension."""
    final_segment = request_path.rsplit("/", 1)[-1]
    if "." not in final_segment:
        return request_path + DEFAULT_EXTENSION
    return request_path


def join_lines(text: str) -> str:
    """Normalise line endings to ``\\n`` and end the text with one newline."""
    normalised = text.replace("\r\n", "\n").replace("\r", "\n")
    if normalised.endswith("\n"):
        normalised = normalised[:-1]
    return normalised + "\n"


class StaticResourceResolver:
    """Loads static files from a sandboxed content root.

    Files are read as UTF-8 text (undecodable bytes are replaced), so binary
    assets do not survive the trip intact.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def locate(self, request_path: str) -> Path:
        """Return the existing file backing ``request_path``."""
        resource_path = resource_path_for(request_path)
        try:
            target = resolve_sandbox_path(self.root, resource_path)
        except ForbiddenPath as exc:
            STATIC_LOGGER.warning(
                "Path outside content root rejected",
                extra={"event": "forbidden_path", "path": request_path},
            )
            raise ResourceNotFound(request_path) from exc
        except OSError as exc:
            raise ResourceNotFound(request_path) from exc
        try:
            found = target.is_file()
        except OSError as exc:
            raise ResourceNotFound(request_path) from exc
        if not found:
            raise ResourceNotFound(request_path)
        return target

    def resolve(self, request_path: str) -> bytes:
        """Return the file contents for ``request_path``."""
        target = self.locate(request_path)
        text = target.read_text(encoding="utf-8", errors="replace")
        body = join_lines(text).encode("utf-8")
        if STATIC_LOGGER.debug_enabled():
            STATIC_LOGGER.debug(
                "Static resource loaded",
                extra={
                    "event": "static_loaded",
                    "path": target.as_posix(),
                    "bytes_out": len(body),
                },
            )
        return body
