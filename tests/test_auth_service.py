"""Tests for registration and login."""

import pytest

from auditor.auth import hash_password, verify_password
from auditor.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from auditor.repositories.user_repository import UserRepository
from auditor.services.auth_service import AuthService


def test_password_hashing():
    hashed = hash_password("secret")

    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)


def test_first_user_is_network_admin(test_db):
    service = AuthService()

    first_key, _ = service.register_user("admin", "pw")
    second_key, _ = service.register_user("editor", "pw")

    assert first_key.startswith("pda_")
    assert UserRepository.get_by_api_key(first_key).is_network_admin is True
    assert UserRepository.get_by_api_key(second_key).is_network_admin is False


def test_duplicate_username(test_db):
    service = AuthService()
    service.register_user("admin", "pw")

    with pytest.raises(UserAlreadyExistsError):
        service.register_user("admin", "other")


def test_login_rotates_key(test_db):
    service = AuthService()
    old_key, _ = service.register_user("admin", "pw")

    new_key = service.login_user("admin", "pw")

    assert new_key != old_key
    assert UserRepository.get_by_api_key(old_key) is None
    assert UserRepository.get_by_api_key(new_key).username == "admin"


@pytest.mark.parametrize("username,password", [("admin", "wrong"), ("nobody", "pw")])
def test_login_rejects_bad_credentials(test_db, username, password):
    AuthService().register_user("admin", "pw")

    with pytest.raises(InvalidCredentialsError):
        AuthService().login_user(username, password)
