"""User repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from auditor.config import TABLE_PREFIX
from auditor.database import get_db_connection

logger = get_logger(__name__)

USERS_TABLE = f"{TABLE_PREFIX}users"


@dataclass
class User:
    user_id: str
    username: str
    password_hash: str
    api_key: Optional[str]
    is_network_admin: bool
    created_at: datetime
    key_updated_at: Optional[datetime]


def _row_to_user(row) -> User:
    return User(
        user_id=row["user_id"],
        username=row["username"],
        password_hash=row["password_hash"],
        api_key=row["api_key"],
        is_network_admin=bool(row["is_network_admin"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        key_updated_at=datetime.fromisoformat(row["key_updated_at"]) if row["key_updated_at"] else None,
    )


class UserRepository:
    @staticmethod
    def create_user(
        user_id: str,
        username: str,
        password_hash: str,
        api_key: str,
        created_at: datetime,
        is_network_admin: bool = False,
    ) -> User:
        logger.debug(f"Creating user: {username} [user_id={user_id}]")

        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO {USERS_TABLE} (user_id, username, password_hash, api_key,
                                               is_network_admin, created_at, key_updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, username, password_hash, api_key, int(is_network_admin),
                     created_at.isoformat(), created_at.isoformat())
                )
                conn.commit()
                logger.info(f"User created successfully: {username} [user_id={user_id}]")
            except Exception as e:
                logger.error(f"Failed to create user {username}: {e}", exc_info=True)
                raise

        return User(
            user_id=user_id,
            username=username,
            password_hash=password_hash,
            api_key=api_key,
            is_network_admin=is_network_admin,
            created_at=created_at,
            key_updated_at=created_at,
        )

    @staticmethod
    def get_by_username(username: str) -> Optional[User]:
        logger.debug(f"Fetching user by username: {username}")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""SELECT user_id, username, password_hash, api_key, is_network_admin,
                           created_at, key_updated_at
                    FROM {USERS_TABLE} WHERE username = ?""",
                (username,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"User not found: {username}")
                return None

            return _row_to_user(row)

    @staticmethod
    def get_by_api_key(api_key: str) -> Optional[User]:
        logger.debug("Fetching user by API key")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""SELECT user_id, username, password_hash, api_key, is_network_admin,
                           created_at, key_updated_at
                    FROM {USERS_TABLE} WHERE api_key = ?""",
                (api_key,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug("User not found for provided API key")
                return None

            logger.debug(f"User found by API key [user_id={row['user_id']}]")
            return _row_to_user(row)

    @staticmethod
    def update_api_key(user_id: str, new_api_key: str, updated_at: datetime) -> None:
        logger.debug(f"Updating API key [user_id={user_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    UPDATE {USERS_TABLE}
                    SET api_key = ?, key_updated_at = ?
                    WHERE user_id = ?
                    """,
                    (new_api_key, updated_at.isoformat(), user_id)
                )
                conn.commit()
                logger.info(f"API key updated successfully [user_id={user_id}]")
            except Exception as e:
                logger.error(f"Failed to update API key [user_id={user_id}]: {e}", exc_info=True)
                raise

    @staticmethod
    def set_network_admin(user_id: str, is_network_admin: bool) -> None:
        logger.debug(f"Setting network admin={is_network_admin} [user_id={user_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE {USERS_TABLE} SET is_network_admin = ? WHERE user_id = ?",
                (int(is_network_admin), user_id)
            )
            conn.commit()

    @staticmethod
    def count_users() -> int:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT COUNT(*) AS total FROM {USERS_TABLE}")
            return cursor.fetchone()["total"]
