"""Authentication service for business logic."""

import sqlite3
from datetime import datetime

from common.logging_config import get_logger
from auditor.auth import hash_password, verify_password, generate_api_key
from auditor.exceptions import UserAlreadyExistsError, InvalidCredentialsError
from auditor.repositories.user_repository import UserRepository
from auditor.utils import generate_uuid

logger = get_logger(__name__)


class AuthService:
    def __init__(self):
        self.user_repo = UserRepository()

    def register_user(self, username: str, password: str) -> tuple[str, str]:
        """
        Register a user and issue their first API key.

        The first account in the network becomes its network admin, as
        the installing user does on the host platform.
        """
        logger.info(f"Attempting to register user: {username}")
        existing_user = self.user_repo.get_by_username(username)
        if existing_user is not None:
            logger.warning(f"Registration failed: username '{username}' already exists")
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        user_id = generate_uuid()
        password_hash = hash_password(password)
        api_key = generate_api_key()
        created_at = datetime.utcnow()
        is_network_admin = self.user_repo.count_users() == 0

        try:
            self.user_repo.create_user(
                user_id=user_id,
                username=username,
                password_hash=password_hash,
                api_key=api_key,
                created_at=created_at,
                is_network_admin=is_network_admin,
            )
            logger.info(
                f"Successfully registered user: {username} [user_id={user_id}] "
                f"[network_admin={is_network_admin}]"
            )
        except sqlite3.IntegrityError:
            logger.warning(f"Registration failed due to integrity error: username '{username}'")
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        return api_key, user_id

    def login_user(self, username: str, password: str) -> str:
        logger.info(f"Login attempt for user: {username}")
        user = self.user_repo.get_by_username(username)
        if user is None:
            logger.warning(f"Login failed: username '{username}' not found")
            raise InvalidCredentialsError("Invalid username or password")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password for username '{username}'")
            raise InvalidCredentialsError("Invalid username or password")

        new_api_key = generate_api_key()
        self.user_repo.update_api_key(user.user_id, new_api_key, datetime.utcnow())
        logger.info(f"Successfully logged in user: {username} [user_id={user.user_id}]")

        return new_api_key
