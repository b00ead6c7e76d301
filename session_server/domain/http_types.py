"""Shared HTTP type definitions to avoid circular imports."""

import urllib.parse
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Optional

HTTP_VERSION = "HTTP/1.1"
SESSION_COOKIE_NAME = "JSESSIONID"

TEXT_HTML = "text/html"
TEXT_CSS = "text/css"
APPLICATION_JAVASCRIPT = "application/javascript"


class MalformedRequest(ValueError):
    """Raised when the start line, a header line or the body framing is invalid."""


class RequestEntityTooLarge(Exception):
    """Raised when a declared request body exceeds configured limits."""


class HttpMethod(Enum):
    """Request methods; anything unrecognised maps to OTHER."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"
    OTHER = "OTHER"

    @classmethod
    def from_token(cls, token: str) -> "HttpMethod":
        """Map a start-line method token (case-sensitive) to a member."""
        try:
            return cls(token)
        except ValueError:
            return cls.OTHER


class HttpStatus(Enum):
    """Status codes emitted by the server with their reason phrases."""

    OK = (200, "OK")
    FOUND = (302, "Found")
    BAD_REQUEST = (400, "Bad Request")
    UNAUTHORIZED = (401, "Unauthorized")
    NOT_FOUND = (404, "Not Found")
    METHOD_NOT_ALLOWED = (405, "Method Not Allowed")
    PAYLOAD_TOO_LARGE = (413, "Payload Too Large")
    INTERNAL_SERVER_ERROR = (500, "Internal Server Error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def reason(self) -> str:
        return self.value[1]

    @property
    def status_line(self) -> str:
        """Return ``HTTP/1.1 <code> <reason>``."""
        return f"{HTTP_VERSION} {self.code} {self.reason}"

    @classmethod
    def from_code(cls, code: int) -> "HttpStatus":
        """Look up a member by numeric code."""
        for member in cls:
            if member.code == code:
                return member
        raise ValueError(f"Unsupported status code: {code}")


class Headers(Mapping):
    """Immutable header mapping that keeps names as received.

    Lookups ignore case, so ``headers["content-length"]`` finds a header sent
    as ``Content-Length``. When a name repeats, the last occurrence wins.
    """

    __slots__ = ("_items",)

    def __init__(self, pairs=()) -> None:
        items: dict[str, tuple[str, str]] = {}
        source = pairs.items() if isinstance(pairs, Mapping) else pairs
        for name, value in source:
            items[name.lower()] = (name, value)
        self._items = items

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


def parse_pairs(encoded: str, decode: bool = False) -> dict[str, str]:
    """Split ``k=v&k=v`` text into a dict.

    Later duplicates overwrite earlier ones. Empty segments and segments
    without ``=`` are dropped. With ``decode`` set, keys and values are
    form-decoded (``+`` and percent escapes).
    """
    pairs: dict[str, str] = {}
    for segment in encoded.split("&"):
        if "=" not in segment:
            continue
        key, value = segment.split("=", 1)
        if decode:
            key = urllib.parse.unquote_plus(key)
            value = urllib.parse.unquote_plus(value)
        pairs[key] = value
    return pairs


def content_type_for_path(path: str) -> str:
    """Derive the response content type from the final path segment."""
    final_segment = path.rsplit("/", 1)[-1]
    if final_segment.endswith(".css"):
        return TEXT_CSS
    if final_segment.endswith(".js"):
        return APPLICATION_JAVASCRIPT
    return TEXT_HTML


def extract_session_id(cookie_header: Optional[str]) -> Optional[str]:
    """Pull the session identifier out of a ``Cookie`` header value."""
    if not cookie_header:
        return None
    marker = f"{SESSION_COOKIE_NAME}="
    start = cookie_header.find(marker)
    if start == -1:
        return None
    remainder = cookie_header[start + len(marker) :]
    identifier = remainder.split(";", 1)[0].strip()
    return identifier or None


@dataclass(frozen=True)
class HttpRequest:
    """Represents a parsed HTTP request."""

    method: HttpMethod
    path: str
    version: str = HTTP_VERSION
    query_params: Mapping[str, str] = field(default_factory=dict)
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    method_token: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))
        if not self.method_token:
            object.__setattr__(self, "method_token", self.method.value)

    @property
    def content_type(self) -> str:
        """Content type derived from the path, never from request headers."""
        return content_type_for_path(self.path)

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def form(self) -> dict[str, str]:
        """Decode the body as ``application/x-www-form-urlencoded`` pairs."""
        if not self.body:
            return {}
        return parse_pairs(self.body.decode("utf-8", errors="replace"), decode=True)

    @property
    def session_id(self) -> Optional[str]:
        """Return the session identifier presented in the Cookie header."""
        return extract_session_id(self.headers.get("Cookie"))

    def is_get(self) -> bool:
        return self.method is HttpMethod.GET

    def is_post(self) -> bool:
        return self.method is HttpMethod.POST


@dataclass(frozen=True)
class HttpResponse:
    """A finalized response; ``headers`` are already in wire order."""

    status: HttpStatus
    headers: tuple[tuple[str, str], ...]
    body: bytes

    @property
    def status_line(self) -> str:
        return self.status.status_line

    def header(self, name: str) -> Optional[str]:
        """Return a header value by case-insensitive name."""
        wanted = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == wanted:
                return value
        return None

    def to_bytes(self) -> bytes:
        """Serialize status line, headers, blank line and body."""
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers)
        head = "\r\n".join(lines).encode("utf-8") + b"\r\n\r\n"
        return head + self.body
