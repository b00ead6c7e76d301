"""User accounts and the in-memory repository that stores them."""

import hmac
import threading
from dataclasses import dataclass, field
from typing import Optional

from session_server.domain.correlation_id import get_logger

USER_LOGGER = get_logger("domain.users")


class DuplicateAccount(Exception):
    """Raised when saving a user whose account name is already taken."""


@dataclass(frozen=True)
class User:
    """A registered account."""

    account: str
    password: str = field(repr=False)
    email: str = ""

    def check_password(self, candidate: Optional[str]) -> bool:
        """Compare passwords in constant time."""
        if candidate is None:
            return False
        return hmac.compare_digest(self.password.encode(), candidate.encode())


class InMemoryUserRepository:
    """Thread-safe user store keyed by account name."""

    def __init__(self, users=()) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        for user in users:
            self.save(user)

    def save(self, user: User) -> User:
        with self._lock:
            if user.account in self._users:
                raise DuplicateAccount(user.account)
            self._users[user.account] = user
        USER_LOGGER.info("User saved", extra={"event": "user_saved"})
        return user

    def find_by_account(self, account: Optional[str]) -> Optional[User]:
        if not account:
            return None
        with self._lock:
            return self._users.get(account)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
