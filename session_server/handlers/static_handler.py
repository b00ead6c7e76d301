"""Default controller serving the greeting and static files."""

from typing import Optional

from session_server.bootstrap.config import WELCOME_MESSAGE
from session_server.domain.correlation_id import get_logger
from session_server.domain.http_types import (
    TEXT_HTML,
    HttpRequest,
    HttpResponse,
    HttpStatus,
    content_type_for_path,
)
from session_server.domain.response_builders import build, not_found_response
from session_server.handlers.base import Controller
from session_server.handlers.static_resources import (
    ResourceNotFound,
    StaticResourceResolver,
)

STATIC_HANDLER_LOGGER = get_logger("handlers.static")


class StaticController(Controller):
    """Serves ``/`` with a fixed greeting and everything else from disk."""

    def __init__(self, resolver: StaticResourceResolver) -> None:
        self.resolver = resolver

    def serve(self, request: HttpRequest, path: Optional[str] = None) -> HttpResponse:
        """Render ``path`` (the request path by default) as a 200 or a 404."""
        path = path or request.path
        if path == "/":
            return (
                build(HttpStatus.OK)
                .set_content_type(TEXT_HTML)
                .set_body(WELCOME_MESSAGE)
                .finish()
            )
        try:
            body = self.resolver.resolve(path)
        except ResourceNotFound:
            STATIC_HANDLER_LOGGER.info(
                "Static resource not found",
                extra={"event": "static_not_found", "route": path},
            )
            return not_found_response()
        return (
            build(HttpStatus.OK)
            .set_content_type(content_type_for_path(path))
            .set_body(body)
            .finish()
        )

    def do_get(self, request: HttpRequest) -> HttpResponse:
        return self.serve(request)

    def do_post(self, request: HttpRequest) -> HttpResponse:
        return self.serve(request)
