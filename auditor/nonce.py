"""Anti-forgery nonces bound to a user's session key."""

import hashlib
import hmac
import math
import time
from typing import Optional

from common.constants import NONCE_ACTION
from common.logging_config import get_logger
from auditor.config import NONCE_LIFETIME, NONCE_SECRET
from auditor.exceptions import InvalidNonceError
from auditor.repositories.user_repository import User

logger = get_logger(__name__)


def nonce_tick(now: Optional[float] = None) -> int:
    """
    Time window counter; a nonce stays valid for two consecutive ticks.
    """
    if now is None:
        now = time.time()
    return math.ceil(now / (NONCE_LIFETIME / 2))


def _nonce_for_tick(user: User, action: str, tick: int) -> str:
    message = f"{tick}|{action}|{user.user_id}|{user.api_key or ''}"
    digest = hmac.new(NONCE_SECRET.encode('utf-8'), message.encode('utf-8'), hashlib.sha256).hexdigest()
    return digest[-12:-2]


def create_nonce(user: User, action: str = NONCE_ACTION, now: Optional[float] = None) -> str:
    """
    Create a nonce for a user and action.

    The nonce is tied to the user's current API key, so logging in again
    (which rotates the key) invalidates every nonce issued before.

    Args:
        user: Authenticated user
        action: Action name the nonce protects
        now: Current time in seconds (defaults to time.time())

    Returns:
        10-character hex nonce
    """
    return _nonce_for_tick(user, action, nonce_tick(now))


def verify_nonce(user: User, nonce: Optional[str], action: str = NONCE_ACTION, now: Optional[float] = None) -> int:
    """
    Verify a nonce.

    Returns:
        1 if generated in the current half-lifetime, 2 if in the previous
        one, 0 if invalid
    """
    if not nonce:
        return 0

    tick = nonce_tick(now)
    if hmac.compare_digest(_nonce_for_tick(user, action, tick), nonce):
        return 1
    if hmac.compare_digest(_nonce_for_tick(user, action, tick - 1), nonce):
        return 2
    return 0


def check_request_nonce(user: User, nonce: Optional[str], action: str = NONCE_ACTION) -> None:
    """
    Reject a request whose nonce does not verify.

    Raises:
        InvalidNonceError: If the nonce is missing, expired or forged
    """
    if not verify_nonce(user, nonce, action):
        logger.warning(f"Nonce verification failed [user_id={user.user_id}] [action={action}]")
        raise InvalidNonceError("Invalid or expired security token")
