"""Unit tests for ordered route matching."""

import pytest

from session_server.bootstrap.config import ServerConfig
from session_server.domain.http_types import HttpMethod, HttpRequest
from session_server.domain.sessions import SessionStore
from session_server.domain.users import InMemoryUserRepository
from session_server.handlers.account_handlers import (
    LoginController,
    RegistrationController,
)
from session_server.handlers.base import Controller
from session_server.handlers.static_handler import StaticController
from session_server.pipeline.router import (
    NoMatch,
    Router,
    build_default_router,
    exact_path,
    path_prefix,
)


class NamedController(Controller):
    def __init__(self, name):
        self.name = name

    def do_get(self, request):
        raise NotImplementedError

    def do_post(self, request):
        raise NotImplementedError


def get(path):
    return HttpRequest(HttpMethod.GET, path)


def test_first_registered_binding_wins():
    """When several predicates accept a path the earliest one is used."""
    first, second = NamedController("first"), NamedController("second")
    router = Router().register(path_prefix("/"), first).register(exact_path("/login"), second)
    assert router.find(get("/login")) is first


def test_specific_binding_registered_first_shadows_catch_all():
    login, static = NamedController("login"), NamedController("static")
    router = Router().register(exact_path("/login"), login).register(path_prefix("/"), static)
    assert router.find(get("/login")) is login
    assert router.find(get("/login/extra")) is static
    assert router.find(get("/")) is static


def test_no_binding_raises_no_match():
    router = Router().register(exact_path("/login"), NamedController("login"))
    with pytest.raises(NoMatch):
        router.find(get("/other"))


def test_empty_router_raises_no_match():
    with pytest.raises(NoMatch):
        Router().find(get("/"))


def test_exact_path_accepts_any_alias():
    predicate = exact_path("/login", "/login.html")
    assert predicate("/login")
    assert predicate("/login.html")
    assert not predicate("/login.htm")
    assert predicate.__name__ == "exact_path(/login, /login.html)"


def test_bindings_are_reported_in_registration_order():
    a, b = NamedController("a"), NamedController("b")
    router = Router().register(exact_path("/a"), a).register(exact_path("/b"), b)
    assert [binding.controller for binding in router.bindings] == [a, b]


@pytest.mark.parametrize(
    ("path", "controller_type"),
    [
        ("/login", LoginController),
        ("/login.html", LoginController),
        ("/register", RegistrationController),
        ("/register.html", RegistrationController),
        ("/", StaticController),
        ("/index.html", StaticController),
        ("/css/styles.css", StaticController),
    ],
)
def test_default_router_bindings(path, controller_type):
    router = build_default_router(ServerConfig(), SessionStore(), InMemoryUserRepository())
    assert type(router.find(get(path))) is controller_type


def test_default_router_rejects_paths_without_leading_slash():
    router = build_default_router(ServerConfig(), SessionStore(), InMemoryUserRepository())
    with pytest.raises(NoMatch):
        router.find(get("*"))


def test_default_router_passes_password_setting_to_login():
    config = ServerConfig(require_password=True)
    router = build_default_router(config, SessionStore(), InMemoryUserRepository())
    assert router.find(get("/login")).require_password is True
