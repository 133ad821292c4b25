"""Inventory service: collects a site's PDFs and exports them."""

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from common.constants import MISSING_FILE_LABEL, TARGET_MIME_TYPE
from common.logging_config import get_logger
from common.types import InventoryEntry
from auditor.csv_export import build_export_filename, encode_inventory_csv
from auditor.exceptions import AuditorException, InventoryError, SiteNotFoundError
from auditor.repositories.attachment_repository import Attachment, AttachmentRepository
from auditor.repositories.site_repository import Site, SiteRepository
from auditor.site_context import SiteContext, SiteScope, site_context
from auditor.utils import format_bytes, url_basename

logger = get_logger(__name__)


@dataclass(frozen=True)
class InventoryExport:
    content: bytes
    filename: str


def read_file_size(path: str) -> int:
    """
    Size of a file in bytes, 0 when it cannot be read.
    """
    try:
        return os.path.getsize(path) or 0
    except OSError as e:
        logger.debug(f"Could not read size of {path}: {e}")
        return 0


class InventoryService:
    def __init__(self, context: Optional[SiteContext] = None, mime_type: str = TARGET_MIME_TYPE):
        self.context = context if context is not None else site_context
        self.mime_type = mime_type
        self.site_repo = SiteRepository()
        self.attachment_repo = AttachmentRepository()

    def get_site(self, site_id: int) -> Site:
        site = self.site_repo.get_site(site_id)
        if site is None:
            logger.warning(f"Site lookup failed [site_id={site_id}]")
            raise SiteNotFoundError("Invalid site.")
        return site

    def collect(self, site_id: int) -> List[InventoryEntry]:
        """
        Collect the PDF inventory of one site, newest uploads first.

        The site's context is active only while its attachments are read
        and resolved, and the previous site is restored on every exit.
        Missing or unreadable files produce sentinel entries rather than
        failing the whole collection.

        Args:
            site_id: Site to scan

        Returns:
            List of InventoryEntry for the site

        Raises:
            SiteNotFoundError: If the site does not exist (no context switch happens)
        """
        site = self.get_site(site_id)
        return self.collect_for_site(site)

    def collect_for_site(self, site: Site) -> List[InventoryEntry]:
        with self.context.switched_to(site) as scope:
            attachments = self.attachment_repo.get_by_mime_type(scope.site_id, self.mime_type)
            entries = [self._build_entry(scope, attachment) for attachment in attachments]

        missing = sum(1 for entry in entries if entry.file_size == MISSING_FILE_LABEL)
        logger.info(
            f"Collected {len(entries)} PDFs [site_id={site.site_id}] [missing={missing}]"
        )
        return entries

    def _build_entry(self, scope: SiteScope, attachment: Attachment) -> InventoryEntry:
        file_url = scope.attachment_url(attachment.attached_file, attachment.guid)
        file_path = scope.attachment_path(attachment.attached_file)

        if not file_path or not os.path.exists(file_path):
            logger.debug(
                f"Attachment file missing [site_id={scope.site_id}] [attachment_id={attachment.attachment_id}]"
            )
            return InventoryEntry(
                id=attachment.attachment_id,
                filename=url_basename(file_url),
                url=file_url,
                upload_date=attachment.post_date,
                file_size=MISSING_FILE_LABEL,
                file_size_raw=0,
            )

        file_size = read_file_size(file_path)

        return InventoryEntry(
            id=attachment.attachment_id,
            filename=os.path.basename(file_path),
            url=file_url,
            upload_date=attachment.post_date,
            file_size=format_bytes(file_size),
            file_size_raw=file_size,
        )

    def list_inventory(self, site_id: int) -> List[InventoryEntry]:
        """
        Collect a site's inventory for the listing endpoint.

        Raises:
            SiteNotFoundError: If the site does not exist
            InventoryError: On any unexpected failure while collecting
        """
        try:
            return self.collect(site_id)
        except AuditorException:
            raise
        except Exception as e:
            logger.error(f"Failed to collect PDFs [site_id={site_id}]: {e}", exc_info=True)
            raise InventoryError("Error loading PDFs", code="ERROR_LOADING") from e

    def export_inventory(self, site_id: int, today: Optional[datetime] = None) -> InventoryExport:
        """
        Collect a site's inventory and encode it as a CSV download.

        Args:
            site_id: Site to export
            today: Date used in the file name (defaults to the current UTC date)

        Returns:
            InventoryExport with CSV bytes and a sanitized file name

        Raises:
            SiteNotFoundError: If the site does not exist
            InventoryError: On any unexpected failure while collecting or encoding
        """
        try:
            site = self.get_site(site_id)
            entries = self.collect_for_site(site)
            content = encode_inventory_csv(entries)
        except AuditorException:
            raise
        except Exception as e:
            logger.error(f"Failed to generate CSV [site_id={site_id}]: {e}", exc_info=True)
            raise InventoryError("Error generating CSV", code="ERROR_GENERATING") from e

        if today is None:
            today = datetime.now(timezone.utc)
        filename = build_export_filename(site.blogname, today.date())

        logger.info(f"Generated CSV export '{filename}' [site_id={site_id}] [rows={len(entries)}]")
        return InventoryExport(content=content, filename=filename)
