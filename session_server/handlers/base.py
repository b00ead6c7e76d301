"""Controller contract and verb dispatch."""

from abc import ABC, abstractmethod

from session_server.domain.correlation_id import get_logger
from session_server.domain.http_types import HttpMethod, HttpRequest, HttpResponse
from session_server.domain.response_builders import method_not_allowed_response

CONTROLLER_LOGGER = get_logger("handlers.controller")


class Controller(ABC):
    """Application logic bound to one or more routes.

    ``service`` is the single entry point. GET and POST go to ``do_get`` and
    ``do_post``; every other method gets a 405 without touching either.
    """

    def service(self, request: HttpRequest) -> HttpResponse:
        if request.method is HttpMethod.GET:
            return self.do_get(request)
        if request.method is HttpMethod.POST:
            return self.do_post(request)
        CONTROLLER_LOGGER.info(
            "Method not allowed",
            extra={
                "event": "method_not_allowed",
                "method": request.method_token,
                "route": request.path,
            },
        )
        return method_not_allowed_response()

    @abstractmethod
    def do_get(self, request: HttpRequest) -> HttpResponse:
        """Handle a GET request."""

    @abstractmethod
    def do_post(self, request: HttpRequest) -> HttpResponse:
        """Handle a POST request."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
