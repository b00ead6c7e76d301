"""Login and registration controllers backed by the session store."""

from typing import Optional

from session_server.bootstrap.config import HOME_PATH, USER_SESSION_ATTRIBUTE
from session_server.domain.correlation_id import get_logger
from session_server.domain.http_types import HttpRequest, HttpResponse
from session_server.domain.response_builders import redirect_response
from session_server.domain.sessions import SessionStore
from session_server.domain.users import DuplicateAccount, InMemoryUserRepository, User
from session_server.handlers.base import Controller
from session_server.handlers.static_handler import StaticController

ACCOUNT_LOGGER = get_logger("handlers.account")


class AccountController(Controller):
    """Shared session plumbing for controllers that sign users in.

    Anything these controllers decline to handle falls through to the static
    controller, which renders the page named by the request path.
    """

    def __init__(
        self,
        sessions: SessionStore,
        users: InMemoryUserRepository,
        fallback: StaticController,
    ) -> None:
        self.sessions = sessions
        self.users = users
        self.fallback = fallback

    def current_user(self, request: HttpRequest) -> Optional[User]:
        """Return the signed-in user, or None when the client is anonymous.

        A missing cookie, an unknown session or a user that has since left the
        repository all count as anonymous.
        """
        session = self.sessions.find(request.session_id)
        if session is None:
            return None
        user = self.sessions.get_attribute(session, USER_SESSION_ATTRIBUTE)
        if not isinstance(user, User):
            return None
        return self.users.find_by_account(user.account)

    def sign_in(self, user: User) -> HttpResponse:
        """Open a session for ``user`` and redirect home with the cookie."""
        session = self.sessions.create()
        self.sessions.set_attribute(session, USER_SESSION_ATTRIBUTE, user)
        return redirect_response(HOME_PATH, session_id=session.id)


class LoginController(AccountController):
    """Handles the login page and login form submissions."""

    def __init__(
        self,
        sessions: SessionStore,
        users: InMemoryUserRepository,
        fallback: StaticController,
        require_password: bool = False,
    ) -> None:
        super().__init__(sessions, users, fallback)
        self.require_password = require_password

    def do_get(self, request: HttpRequest) -> HttpResponse:
        if self.current_user(request) is not None:
            return redirect_response(HOME_PATH)
        return self.fallback.serve(request)

    def do_post(self, request: HttpRequest) -> HttpResponse:
        form = request.form
        user = self.users.find_by_account(form.get("account"))
        if user is None:
            ACCOUNT_LOGGER.info(
                "Login failed", extra={"event": "login_failed", "reason": "unknown_account"}
            )
            return self.fallback.serve(request)
        if self.require_password and not user.check_password(form.get("password")):
            ACCOUNT_LOGGER.info(
                "Login failed", extra={"event": "login_failed", "reason": "bad_password"}
            )
            return self.fallback.serve(request)
        ACCOUNT_LOGGER.info("Login succeeded", extra={"event": "login_succeeded"})
        return self.sign_in(user)


class RegistrationController(AccountController):
    """Creates an account and signs the new user in."""

    def do_get(self, request: HttpRequest) -> HttpResponse:
        return self.fallback.serve(request)

    def do_post(self, request: HttpRequest) -> HttpResponse:
        form = request.form
        account = form.get("account", "")
        password = form.get("password", "")
        if not account or not password:
            ACCOUNT_LOGGER.info(
                "Registration rejected",
                extra={"event": "registration_rejected", "reason": "missing_field"},
            )
            return self.fallback.serve(request)
        try:
            user = self.users.save(User(account, password, form.get("email", "")))
        except DuplicateAccount:
            ACCOUNT_LOGGER.info(
                "Registration rejected",
                extra={"event": "registration_rejected", "reason": "duplicate_account"},
            )
            return self.fallback.serve(request)
        return self.sign_in(user)
