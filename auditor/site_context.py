"""Per-site execution context for the network."""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from common.logging_config import get_logger
from auditor.config import MAIN_SITE_ID, UPLOADS_ROOT, UPLOADS_URL_PATH, URL_SCHEME
from auditor.database import posts_table_name
from auditor.repositories.site_repository import Site

logger = get_logger(__name__)


@dataclass(frozen=True)
class SiteScope:
    """
    Data partition of the active site: its posts table and upload location.
    """
    site_id: int
    posts_table: str
    uploads_dir: Path
    uploads_url: str

    def attachment_path(self, attached_file: str) -> str:
        """
        Local path of an attachment, or an empty string when it has none.
        """
        if not attached_file:
            return ""
        return str(self.uploads_dir / attached_file.lstrip('/'))

    def attachment_url(self, attached_file: str, guid: str = "") -> str:
        """
        Public URL of an attachment, falling back to its guid.
        """
        if not attached_file:
            return guid
        return f"{self.uploads_url}/{attached_file.lstrip('/')}"


def site_scope(site: Site) -> SiteScope:
    """
    Build the scope for a site.

    The main site stores uploads at the uploads root; every other site
    has its own sites/<id> subdirectory.

    Args:
        site: Site record

    Returns:
        SiteScope for the site
    """
    uploads_dir = Path(UPLOADS_ROOT)
    uploads_url = f"{URL_SCHEME}://{site.domain}{site.path.rstrip('/')}/{UPLOADS_URL_PATH}"

    if site.site_id != MAIN_SITE_ID:
        uploads_dir = uploads_dir / "sites" / str(site.site_id)
        uploads_url = f"{uploads_url}/sites/{site.site_id}"

    return SiteScope(
        site_id=site.site_id,
        posts_table=posts_table_name(site.site_id),
        uploads_dir=uploads_dir,
        uploads_url=uploads_url,
    )


class SiteContext:
    """
    Process-wide pointer to the site whose data is currently active.

    Only one site is current at a time, so the whole window between a
    switch and its restore holds a re-entrant lock. Nested switches on the
    same thread restore in LIFO order.
    """

    def __init__(self, main_site_id: int = MAIN_SITE_ID):
        self._lock = threading.RLock()
        self._current_site_id = main_site_id
        self._previous: List[int] = []

    @property
    def current_site_id(self) -> int:
        return self._current_site_id

    @property
    def depth(self) -> int:
        """Number of switches currently waiting to be restored."""
        return len(self._previous)

    @contextmanager
    def switched_to(self, site: Site) -> Iterator[SiteScope]:
        """
        Make a site current for the duration of the block.

        The previous site is restored when the block exits, whether it
        returns or raises.

        Args:
            site: Site to switch to

        Yields:
            SiteScope of the site
        """
        with self._lock:
            self._previous.append(self._current_site_id)
            self._current_site_id = site.site_id
            logger.debug(f"Switched to site [site_id={site.site_id}] from [site_id={self._previous[-1]}]")
            try:
                yield site_scope(site)
            finally:
                self._current_site_id = self._previous.pop()
                logger.debug(f"Restored site [site_id={self._current_site_id}]")


site_context = SiteContext()
