"""Per-site PDF tables for the REPL: loading, sorting, rendering, export."""

import asyncio
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from html import escape
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from common.constants import SORT_KEYS
from common.logging_config import get_logger
from common.types import InventoryEntry, SiteSummary
from cli.auditor_client import AuditorClient, AuditorRequestError
from cli.constants import STRINGS

logger = get_logger(__name__)

COLUMN_LABELS = {
    "filename": "Filename",
    "url": "Direct Link",
    "upload_date": "Upload Date",
    "file_size_raw": "File Size",
}

_DIGIT_RUNS = re.compile(r'(\d+)')


class SectionState(Enum):
    COLLAPSED = "collapsed"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass
class SiteSection:
    """
    Client-side state of one site's section.

    Once LOADED the section keeps its entries (or its error) for the rest
    of the session; it is never fetched again.
    """
    site_id: int
    state: SectionState = SectionState.COLLAPSED
    expanded: bool = False
    loading: bool = False
    exporting: bool = False
    entries: List[InventoryEntry] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SortState:
    """Active sort column of a site; the server order is newest upload first."""
    key: str = "upload_date"
    ascending: bool = False


def natural_key(filename: str) -> list:
    """
    Sort key that orders embedded numbers by value (file2 before file10).
    """
    text = unicodedata.normalize('NFKC', filename).casefold()
    parts = _DIGIT_RUNS.split(text)
    return [int(part) if i % 2 else part for i, part in enumerate(parts)]


def date_key(upload_date: str) -> datetime:
    """
    Sort key for an upload date; unparsable dates sort as the earliest.
    """
    try:
        value = datetime.fromisoformat(upload_date.strip())
    except (ValueError, AttributeError):
        return datetime.min
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def size_key(file_size_raw) -> int:
    try:
        return int(file_size_raw)
    except (TypeError, ValueError):
        return 0


SORT_KEY_FUNCTIONS: Dict[str, Callable[[InventoryEntry], object]] = {
    "filename": lambda entry: natural_key(entry.filename),
    "upload_date": lambda entry: date_key(entry.upload_date),
    "file_size_raw": lambda entry: size_key(entry.file_size_raw),
}


def sort_entries(entries: List[InventoryEntry], key: str, ascending: bool) -> List[InventoryEntry]:
    """
    Sort entries by a column.

    Args:
        entries: Entries to sort
        key: One of "filename", "upload_date", "file_size_raw"
        ascending: Sort direction

    Returns:
        New sorted list; equal rows keep their relative order

    Raises:
        ValueError: If the key is not a sortable column
    """
    if key not in SORT_KEY_FUNCTIONS:
        raise ValueError(f"Unknown sort key: {key}")
    return sorted(entries, key=SORT_KEY_FUNCTIONS[key], reverse=not ascending)


class TableController:
    """
    Expands, sorts, renders and exports the site sections of a session.

    Fetches run as asyncio tasks so the prompt stays responsive; the
    per-site loading flag keeps a section from being fetched twice.
    """

    def __init__(self, client: AuditorClient, on_update: Optional[Callable[[int], None]] = None):
        """
        Args:
            client: Auditor API client
            on_update: Called with the site id when a fetch settles
        """
        self.client = client
        self.on_update = on_update
        self.sections: Dict[int, SiteSection] = {}
        self.sort_states: Dict[int, SortState] = {}
        self.site_names: Dict[int, str] = {}

    def remember_sites(self, sites: Iterable[SiteSummary]) -> None:
        for site in sites:
            self.site_names[site.site_id] = site.blogname

    def section(self, site_id: int) -> SiteSection:
        if site_id not in self.sections:
            self.sections[site_id] = SiteSection(site_id=site_id)
        return self.sections[site_id]

    def sort_state(self, site_id: int) -> SortState:
        if site_id not in self.sort_states:
            self.sort_states[site_id] = SortState()
        return self.sort_states[site_id]

    def toggle_site(self, site_id: int) -> Optional[asyncio.Task]:
        """
        Expand or collapse a site's section.

        The first expand marks the section as loading and starts its
        fetch. Any later toggle only changes visibility.

        Args:
            site_id: Site to toggle

        Returns:
            The fetch task when one was started, else None
        """
        section = self.section(site_id)

        if section.expanded:
            section.expanded = False
            return None

        section.expanded = True

        if section.state != SectionState.COLLAPSED or section.loading:
            return None

        section.loading = True
        section.state = SectionState.LOADING
        logger.debug(f"Starting fetch [site_id={site_id}]")
        return asyncio.create_task(self._load(section))

    async def _load(self, section: SiteSection) -> None:
        try:
            section.entries = list(await self.client.fetch_inventory(section.site_id))
            section.error = None
        except AuditorRequestError as e:
            logger.warning(f"Fetch failed [site_id={section.site_id}]: {e}")
            section.error = str(e)
        except Exception as e:
            logger.error(f"Unexpected fetch failure [site_id={section.site_id}]: {e}", exc_info=True)
            section.error = STRINGS["error_loading"]
        finally:
            section.loading = False
            section.state = SectionState.LOADED

        if self.on_update is not None:
            self.on_update(section.site_id)

    def handle_sort(self, site_id: int, key: str) -> Optional[SortState]:
        """
        Sort a loaded site's table by a column.

        Sorting the active column again flips it from ascending to
        descending; any other request sorts ascending.

        Args:
            site_id: Site whose table to sort
            key: One of "filename", "upload_date", "file_size_raw"

        Returns:
            The new sort state, or None when the site has no rows to sort

        Raises:
            ValueError: If the key is not a sortable column
        """
        if key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {key}")

        section = self.sections.get(site_id)
        if section is None or section.state != SectionState.LOADED or section.error or not section.entries:
            return None

        current = self.sort_state(site_id)
        ascending = not (current.key == key and current.ascending)

        section.entries = sort_entries(section.entries, key, ascending)
        state = SortState(key=key, ascending=ascending)
        self.sort_states[site_id] = state
        logger.debug(f"Sorted site [site_id={site_id}] by {key} {'asc' if ascending else 'desc'}")
        return state

    def _heading(self, site_id: int) -> str:
        name = self.site_names.get(site_id)
        if name:
            return f"<header>Site {site_id}: {escape(name)}</header>"
        return f"<header>Site {site_id}</header>"

    def render_site(self, site_id: int) -> str:
        """
        Render a site's section as prompt_toolkit HTML markup.

        Every value coming from the server is escaped.
        """
        heading = self._heading(site_id)
        section = self.sections.get(site_id)

        if section is None or section.state == SectionState.COLLAPSED:
            return f"{heading}\n<muted>Not loaded. Run: expand {site_id}</muted>"
        if not section.expanded:
            return f"{heading} <muted>(collapsed)</muted>"
        if section.state == SectionState.LOADING:
            return f"{heading}\n<muted>{escape(STRINGS['loading_pdfs'])}</muted>"
        if section.error:
            return f"{heading}\n<error>{escape(section.error)}</error>"
        if not section.entries:
            return f"{heading}\n{escape(STRINGS['no_pdfs'])}"

        lines = [heading, self._render_table(site_id, section.entries)]
        if section.exporting:
            lines.append(f"<muted>{escape(STRINGS['downloading'])}</muted>")
        else:
            lines.append(f"<muted>{escape(STRINGS['download_csv'])}: export {site_id}</muted>")
        return "\n".join(lines)

    def _render_table(self, site_id: int, entries: List[InventoryEntry]) -> str:
        state = self.sort_state(site_id)
        indicator = " ▲" if state.ascending else " ▼"

        headers = []
        for column, label in COLUMN_LABELS.items():
            headers.append(label + indicator if column == state.key else label)

        rows = [
            [entry.filename, entry.url, entry.upload_date, entry.file_size]
            for entry in entries
        ]

        widths = [len(header) for header in headers]
        for row in rows:
            for i, value in enumerate(row):
                widths[i] = max(widths[i], len(value))

        def format_row(values: List[str]) -> str:
            return "  ".join(escape(value.ljust(widths[i])) for i, value in enumerate(values)).rstrip()

        lines = [f"<b>{format_row(headers)}</b>"]
        lines.extend(format_row(row) for row in rows)
        return "\n".join(lines)

    async def export_site(self, site_id: int, output_dir: Path) -> str:
        """
        Export a site's listing and save the CSV file.

        Args:
            site_id: Site to export
            output_dir: Directory the file is written to

        Returns:
            Message describing the saved file or the failure
        """
        section = self.section(site_id)
        if section.exporting:
            return f"Export already in progress for site {site_id}."

        section.exporting = True
        try:
            filename, csv_content = await self.client.export_inventory(site_id)
            output_dir.mkdir(parents=True, exist_ok=True)
            output_file = output_dir / Path(filename).name
            with open(output_file, 'w', encoding='utf-8', newline='') as f:
                f.write(csv_content)
        except AuditorRequestError as e:
            logger.warning(f"Export failed [site_id={site_id}]: {e}")
            return f"Export failed: {e}"
        except OSError as e:
            logger.error(f"Could not save export [site_id={site_id}]: {e}")
            return f"Export failed: could not write file ({e})"
        finally:
            section.exporting = False

        logger.info(f"Saved CSV export [site_id={site_id}] to {output_file}")
        return f"Saved {output_file}"
