"""Request routing logic."""

from dataclasses import dataclass
from typing import Callable

from session_server.bootstrap.config import LOGIN_PATHS, REGISTER_PATHS, ServerConfig
from session_server.domain.correlation_id import get_logger
from session_server.domain.http_types import HttpRequest
from session_server.domain.sessions import SessionStore
from session_server.domain.users import InMemoryUserRepository
from session_server.handlers.account_handlers import LoginController, RegistrationController
from session_server.handlers.base import Controller
from session_server.handlers.static_handler import StaticController
from session_server.handlers.static_resources import StaticResourceResolver

ROUTER_LOGGER = get_logger("pipeline.router")

PathPredicate = Callable[[str], bool]


class NoMatch(LookupError):
    """Raised when no binding accepts the request path."""


def exact_path(*paths: str) -> PathPredicate:
    """Accept any of ``paths`` exactly."""
    accepted = frozenset(paths)

    def predicate(path: str) -> bool:
        return path in accepted

    predicate.__name__ = f"exact_path({', '.join(paths)})"
    return predicate


def path_prefix(prefix: str) -> PathPredicate:
    """Accept any path starting with ``prefix``."""

    def predicate(path: str) -> bool:
        return path.startswith(prefix)

    predicate.__name__ = f"path_prefix({prefix})"
    return predicate


@dataclass(frozen=True)
class Binding:
    predicate: PathPredicate
    controller: Controller


class Router:
    """Ordered (predicate, controller) bindings; the first match wins.

    Register the most specific bindings first. The order is part of the
    contract: a catch-all prefix registered early shadows everything after it.
    """

    def __init__(self) -> None:
        self._bindings: list[Binding] = []

    def register(self, predicate: PathPredicate, controller: Controller) -> "Router":
        self._bindings.append(Binding(predicate, controller))
        return self

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return tuple(self._bindings)

    def find(self, request: HttpRequest) -> Controller:
        """Return the controller of the first binding accepting the path."""
        for binding in self._bindings:
            if binding.predicate(request.path):
                if ROUTER_LOGGER.debug_enabled():
                    ROUTER_LOGGER.debug(
                        "Route matched",
                        extra={
                            "event": "route_matched",
                            "route": request.path,
                            "reason": getattr(binding.predicate, "__name__", "predicate"),
                        },
                    )
                return binding.controller
        ROUTER_LOGGER.info(
            "No matching route found",
            extra={
                "event": "route_not_found",
                "route": request.path,
                "method": request.method_token,
            },
        )
        raise NoMatch(request.path)


def build_default_router(
    config: ServerConfig,
    sessions: SessionStore,
    users: InMemoryUserRepository,
) -> Router:
    """Wire login, registration and static controllers in priority order."""
    static = StaticController(StaticResourceResolver(config.static_root))
    login = LoginController(
        sessions, users, static, require_password=config.require_password
    )
    registration = RegistrationController(sessions, users, static)
    return (
        Router()
        .register(exact_path(*LOGIN_PATHS), login)
        .register(exact_path(*REGISTER_PATHS), registration)
        .register(path_prefix("/"), static)
    )
