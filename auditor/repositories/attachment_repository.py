"""Attachment repository for a site's media library."""

from dataclasses import dataclass
from typing import List

from common.constants import ATTACHMENT_POST_TYPE
from common.logging_config import get_logger
from auditor.database import get_db_connection, posts_table_name

logger = get_logger(__name__)


@dataclass
class Attachment:
    attachment_id: int
    post_title: str
    post_mime_type: str
    post_date: str
    guid: str
    attached_file: str


class AttachmentRepository:
    """
    Reads attachment records from one site's posts table.

    Every method takes the site id explicitly; the table it selects from
    is that site's partition.
    """

    @staticmethod
    def create_attachment(
        site_id: int,
        post_title: str,
        post_mime_type: str,
        post_date: str,
        attached_file: str = "",
        guid: str = "",
    ) -> Attachment:
        table = posts_table_name(site_id)
        logger.debug(f"Creating attachment '{post_title}' in {table}")

        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO {table} (post_title, post_type, post_mime_type, post_date, guid, attached_file)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (post_title, ATTACHMENT_POST_TYPE, post_mime_type, post_date, guid, attached_file)
                )
                attachment_id = cursor.lastrowid
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to create attachment in {table}: {e}", exc_info=True)
                raise

        return Attachment(
            attachment_id=attachment_id,
            post_title=post_title,
            post_mime_type=post_mime_type,
            post_date=post_date,
            guid=guid,
            attached_file=attached_file,
        )

    @staticmethod
    def get_by_mime_type(site_id: int, mime_type: str) -> List[Attachment]:
        """
        Attachments whose MIME type matches case-insensitively, newest first.
        """
        table = posts_table_name(site_id)
        logger.debug(f"Fetching attachments from {table} [mime_type={mime_type}]")

        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""SELECT ID, post_title, post_mime_type, post_date, guid, attached_file
                    FROM {table}
                    WHERE post_type = ?
                    AND LOWER(post_mime_type) = ?
                    ORDER BY post_date DESC""",
                (ATTACHMENT_POST_TYPE, mime_type.lower())
            )
            attachments = [
                Attachment(
                    attachment_id=row["ID"],
                    post_title=row["post_title"],
                    post_mime_type=row["post_mime_type"],
                    post_date=row["post_date"],
                    guid=row["guid"],
                    attached_file=row["attached_file"],
                )
                for row in cursor.fetchall()
            ]

        logger.debug(f"Fetched {len(attachments)} attachments from {table}")
        return attachments
