"""Site repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List

from common.logging_config import get_logger
from auditor.config import MAX_ROW_ID, MAX_SITES, TABLE_PREFIX
from auditor.database import get_db_connection, create_posts_table

logger = get_logger(__name__)


@dataclass
class Site:
    site_id: int
    domain: str
    path: str
    blogname: str
    registered: datetime


def _row_to_site(row) -> Site:
    return Site(
        site_id=row["blog_id"],
        domain=row["domain"],
        path=row["path"],
        blogname=row["blogname"],
        registered=datetime.fromisoformat(row["registered"]),
    )


class SiteRepository:
    @staticmethod
    def create_site(
        domain: str,
        path: str = "/",
        blogname: str = "",
        registered: Optional[datetime] = None,
    ) -> Site:
        logger.debug(f"Creating site: {domain}{path}")

        if registered is None:
            registered = datetime.utcnow()

        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO {TABLE_PREFIX}blogs (domain, path, blogname, registered)
                    VALUES (?, ?, ?, ?)
                    """,
                    (domain, path, blogname, registered.isoformat())
                )
                site_id = cursor.lastrowid
                create_posts_table(cursor, site_id)
                conn.commit()
                logger.info(f"Site created successfully: {domain}{path} [site_id={site_id}]")
            except Exception as e:
                logger.error(f"Failed to create site {domain}{path}: {e}", exc_info=True)
                raise

        return Site(
            site_id=site_id,
            domain=domain,
            path=path,
            blogname=blogname,
            registered=registered,
        )

    @staticmethod
    def get_site(site_id: int) -> Optional[Site]:
        logger.debug(f"Fetching site [site_id={site_id}]")
        if not 0 < site_id <= MAX_ROW_ID:
            logger.debug(f"Site id out of range [site_id={site_id}]")
            return None

        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""SELECT blog_id, domain, path, blogname, registered
                    FROM {TABLE_PREFIX}blogs WHERE blog_id = ?""",
                (site_id,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"Site not found [site_id={site_id}]")
                return None

            return _row_to_site(row)

    @staticmethod
    def list_sites(limit: int = MAX_SITES) -> List[Site]:
        logger.debug(f"Fetching sites [limit={limit}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""SELECT blog_id, domain, path, blogname, registered
                    FROM {TABLE_PREFIX}blogs ORDER BY blog_id LIMIT ?""",
                (limit,)
            )
            sites = [_row_to_site(row) for row in cursor.fetchall()]

        logger.debug(f"Fetched {len(sites)} sites")
        return sites
