"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from auditor.config import DATABASE_PATH, TABLE_PREFIX, MAIN_SITE_ID


def posts_table_name(site_id: int) -> str:
    """
    Name of the posts table holding a site's content.

    The main site uses the bare prefix (wp_posts); every other site gets
    its own partition (wp_<id>_posts).

    Args:
        site_id: Site identifier

    Returns:
        Table name for the site's posts
    """
    site_id = int(site_id)
    if site_id == MAIN_SITE_ID:
        return f"{TABLE_PREFIX}posts"
    return f"{TABLE_PREFIX}{site_id}_posts"


def create_posts_table(cursor: sqlite3.Cursor, site_id: int) -> None:
    """
    Create the posts table for a site if it doesn't exist.
    """
    table = posts_table_name(site_id)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {table} (
            ID INTEGER PRIMARY KEY AUTOINCREMENT,
            post_title TEXT NOT NULL DEFAULT '',
            post_type TEXT NOT NULL DEFAULT 'post',
            post_mime_type TEXT NOT NULL DEFAULT '',
            post_date TEXT NOT NULL,
            guid TEXT NOT NULL DEFAULT '',
            attached_file TEXT NOT NULL DEFAULT ''
        )
    """)

    cursor.execute(f"""
        CREATE INDEX IF NOT EXISTS idx_{table}_type_date ON {table}(post_type, post_date)
    """)


def init_database() -> None:
    """
    Initialize database and create tables if they don't exist.
    """
    db_path = Path(DATABASE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection() as conn:
        cursor = conn.cursor()

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {TABLE_PREFIX}blogs (
                blog_id INTEGER PRIMARY KEY AUTOINCREMENT,
                domain TEXT NOT NULL,
                path TEXT NOT NULL DEFAULT '/',
                blogname TEXT NOT NULL DEFAULT '',
                registered TEXT NOT NULL
            )
        """)

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {TABLE_PREFIX}users (
                user_id TEXT PRIMARY KEY,
                username TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                api_key TEXT UNIQUE,
                is_network_admin INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                key_updated_at TEXT
            )
        """)

        cursor.execute(f"""
            CREATE UNIQUE INDEX IF NOT EXISTS idx_blogs_domain_path ON {TABLE_PREFIX}blogs(domain, path)
        """)

        create_posts_table(cursor, MAIN_SITE_ID)

        conn.commit()


@contextmanager
def get_db_connection() -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
