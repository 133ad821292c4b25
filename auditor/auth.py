"""Authentication and capability checks."""

import uuid
from typing import Optional

import bcrypt
from fastapi import Depends, Header

from common.logging_config import get_logger
from auditor.config import API_KEY_PREFIX
from auditor.exceptions import InvalidAPIKeyError, PermissionDeniedError
from auditor.repositories.user_repository import User, UserRepository

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: Bcrypt hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = password.encode('utf-8')
    hash_bytes = password_hash.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hash_bytes)


def generate_api_key() -> str:
    """
    Generate a new API Key with the configured prefix.

    Returns:
        API Key string in format: {prefix}{uuid4}
    """
    return f"{API_KEY_PREFIX}{uuid.uuid4()}"


async def get_current_user(authorization: Optional[str] = Header(None)) -> User:
    """
    FastAPI dependency to validate the API Key and load its user.

    Args:
        authorization: Authorization header value (format: "Bearer <api_key>")

    Returns:
        The authenticated user

    Raises:
        InvalidAPIKeyError: If the header is missing, malformed, or the key is unknown
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise InvalidAPIKeyError("Invalid authorization header format")

    api_key = authorization[len("Bearer "):].strip()

    user = UserRepository.get_by_api_key(api_key)
    if user is None:
        logger.warning("API key validation failed: invalid key")
        raise InvalidAPIKeyError("Invalid API key")

    return user


async def require_network_admin(user: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency requiring the network administration capability.

    Raises:
        PermissionDeniedError: If the user is not a network admin
    """
    if not user.is_network_admin:
        logger.warning(f"Network admin capability missing [user_id={user.user_id}]")
        raise PermissionDeniedError("Permission denied")
    return user
