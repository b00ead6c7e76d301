"""Response builder and canned responses."""

from typing import Optional, Union

from session_server.domain.http_types import (
    SESSION_COOKIE_NAME,
    TEXT_HTML,
    HttpResponse,
    HttpStatus,
)


class ResponseBuilder:
    """Mutable response under construction.

    Setters return the builder so calls can be chained. ``set_location`` only
    adds the header; choosing a redirect status is up to the caller.
    """

    def __init__(self, status: HttpStatus) -> None:
        self.status = status
        self.content_type = TEXT_HTML
        self.body = b""
        self.location: Optional[str] = None
        self.cookie: Optional[str] = None

    def set_body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        self.body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        return self

    def set_content_type(self, content_type: str) -> "ResponseBuilder":
        self.content_type = content_type
        return self

    def set_location(self, location: str) -> "ResponseBuilder":
        self.location = location
        return self

    def set_cookie(self, cookie: str) -> "ResponseBuilder":
        self.cookie = cookie
        return self

    def finish(self) -> HttpResponse:
        """Freeze the builder into an immutable response."""
        headers = [
            ("Content-Type", self.content_type),
            ("Content-Length", str(len(self.body))),
        ]
        if self.location is not None:
            headers.append(("Location", self.location))
        if self.cookie is not None:
            headers.append(("Set-Cookie", self.cookie))
        # One request per connection.
        headers.append(("Connection", "close"))
        return HttpResponse(self.status, tuple(headers), self.body)

    def to_bytes(self) -> bytes:
        return self.finish().to_bytes()


def build(status: Union[HttpStatus, int]) -> ResponseBuilder:
    """Start a response for a status member or numeric code."""
    if isinstance(status, int):
        status = HttpStatus.from_code(status)
    return ResponseBuilder(status)


def session_cookie(session_id: str) -> str:
    """Return the ``Set-Cookie`` value that binds a client to a session."""
    return f"{SESSION_COOKIE_NAME}={session_id}"


def redirect_response(location: str, session_id: Optional[str] = None) -> HttpResponse:
    """Produce a 302 response, optionally setting the session cookie."""
    builder = build(HttpStatus.FOUND).set_location(location)
    if session_id is not None:
        builder.set_cookie(session_cookie(session_id))
    return builder.finish()


def error_response(status: HttpStatus) -> HttpResponse:
    """Produce a response whose body is the status reason phrase."""
    return build(status).set_body(status.reason).finish()


def bad_request_response() -> HttpResponse:
    return error_response(HttpStatus.BAD_REQUEST)


def not_found_response() -> HttpResponse:
    return error_response(HttpStatus.NOT_FOUND)


def method_not_allowed_response() -> HttpResponse:
    """Produce the 405 response returned for verbs other than GET and POST."""
    return error_response(HttpStatus.METHOD_NOT_ALLOWED)


def entity_too_large_response() -> HttpResponse:
    return error_response(HttpStatus.PAYLOAD_TOO_LARGE)


def internal_error_response() -> HttpResponse:
    return error_response(HttpStatus.INTERNAL_SERVER_ERROR)
