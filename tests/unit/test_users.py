"""Unit tests for the user repository."""

import pytest

from session_server.domain.users import DuplicateAccount, InMemoryUserRepository, User


def test_save_and_find_by_account():
    repository = InMemoryUserRepository()
    user = repository.save(User("gugu", "password", "gugu@example.com"))
    assert repository.find_by_account("gugu") is user
    assert repository.find_by_account("nobody") is None
    assert repository.find_by_account(None) is None


def test_duplicate_account_is_refused():
    repository = InMemoryUserRepository([User("gugu", "password")])
    with pytest.raises(DuplicateAccount):
        repository.save(User("gugu", "other"))
    assert repository.find_by_account("gugu").password == "password"
    assert len(repository) == 1


def test_check_password():
    user = User("gugu", "secret")
    assert user.check_password("secret")
    assert not user.check_password("wrong")
    assert not user.check_password(None)


def test_password_is_hidden_from_repr():
    assert "secret" not in repr(User("gugu", "secret"))
