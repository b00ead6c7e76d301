"""Turn a buffered byte stream into an ``HttpRequest``.

The parser reads from any object with ``readline(limit)`` and ``read(n)``,
normally ``socket.makefile("rb")``. It blocks on each read and consumes
exactly one request: the start line, the header block and, when a valid
``Content-Length`` is present, that many body bytes.
"""

from typing import BinaryIO, Optional

from session_server.bootstrap.config import MAX_BODY_BYTES, MAX_LINE_BYTES
from session_server.domain.correlation_id import get_logger
from session_server.domain.http_types import (
    Headers,
    HttpMethod,
    HttpRequest,
    MalformedRequest,
    RequestEntityTooLarge,
    parse_pairs,
)

PARSER_LOGGER = get_logger("pipeline.parser")

HEADER_SEPARATOR = ": "


def _read_line(stream: BinaryIO, max_line_bytes: int) -> Optional[str]:
    """Read one line without its terminator; None means end of stream."""
    # Room for CRLF so the limit applies to the content alone.
    raw = stream.readline(max_line_bytes + 2)
    if not raw:
        return None
    line = raw.rstrip(b"\r\n")
    if len(line) > max_line_bytes:
        raise MalformedRequest("Line exceeds maximum length")
    if not raw.endswith(b"\n"):
        raise MalformedRequest("Stream ended mid-line")
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedRequest("Line is not valid UTF-8") from exc


def parse_start_line(line: str) -> tuple[str, str, str]:
    """Split a start line into method token, request-target and version."""
    tokens = line.split(" ")
    if len(tokens) != 3 or not all(tokens):
        raise MalformedRequest(f"Invalid start line: {line!r}")
    method, target, version = tokens
    return method, target, version


def split_target(target: str) -> tuple[str, dict[str, str]]:
    """Separate the path from the query string and parse the query."""
    path, _, query = target.partition("?")
    return path, parse_pairs(query) if query else {}


def parse_header_line(line: str) -> tuple[str, str]:
    if HEADER_SEPARATOR not in line:
        raise MalformedRequest(f"Invalid header line: {line!r}")
    name, value = line.split(HEADER_SEPARATOR, 1)
    if not name:
        raise MalformedRequest("Empty header name")
    return name, value


def read_headers(stream: BinaryIO, max_line_bytes: int) -> Headers:
    """Read header lines up to and including the blank separator line."""
    pairs = []
    while True:
        line = _read_line(stream, max_line_bytes)
        if line is None:
            raise MalformedRequest("Stream ended before end of headers")
        if line == "":
            return Headers(pairs)
        pairs.append(parse_header_line(line))


def declared_content_length(headers: Headers) -> int:
    """Return Content-Length when it is a non-negative integer, else 0."""
    value = headers.get("Content-Length")
    if value is None:
        return 0
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        PARSER_LOGGER.debug(
            "Ignoring unusable Content-Length", extra={"event": "content_length_ignored"}
        )
        return 0
    return int(value)


def read_body(stream: BinaryIO, length: int) -> bytes:
    """Read exactly ``length`` bytes or fail when the stream ends early."""
    chunks = []
    remaining = length
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            raise MalformedRequest("Stream ended before body was complete")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def parse_request(
    stream: BinaryIO,
    max_line_bytes: int = MAX_LINE_BYTES,
    max_body_bytes: int = MAX_BODY_BYTES,
) -> Optional[HttpRequest]:
    """Parse one request from ``stream``.

    Returns None when the peer closed the connection before sending anything.
    Raises ``MalformedRequest`` for framing errors and
    ``RequestEntityTooLarge`` when the declared body exceeds the limit.
    """
    start_line = _read_line(stream, max_line_bytes)
    if start_line is None:
        return None
    method_token, target, version = parse_start_line(start_line)
    path, query_params = split_target(target)
    headers = read_headers(stream, max_line_bytes)

    content_length = declared_content_length(headers)
    if content_length > max_body_bytes:
        raise RequestEntityTooLarge(content_length)
    body = read_body(stream, content_length)

    request = HttpRequest(
        method=HttpMethod.from_token(method_token),
        path=path,
        version=version,
        query_params=query_params,
        headers=headers,
        body=body,
        method_token=method_token,
    )
    if PARSER_LOGGER.debug_enabled():
        PARSER_LOGGER.debug(
            "Request parsed",
            extra={
                "event": "request_parsed",
                "method": method_token,
                "route": path,
                "bytes_in": content_length,
            },
        )
    return request
