"""CSV export of a site's PDF inventory."""

import csv
import io
import re
from datetime import date
from typing import Iterable

from common.constants import CSV_BOM, CSV_HEADER, EXPORT_FILENAME_LABEL
from common.types import InventoryEntry

_UNSAFE_FILENAME_CHARS = re.compile(
    "[" + re.escape("?[]/\\=<>:;,'\"&$#*()|~`!{}%+’«»”“") + "\x00]"
)
_DASH_RUNS = re.compile(r"[\s\-]+")


def encode_inventory_csv(entries: Iterable[InventoryEntry]) -> bytes:
    """
    Encode inventory entries as a UTF-8 CSV document.

    The output starts with a byte-order mark so spreadsheet tools pick the
    right encoding. Columns: Filename, Direct Link, Upload Date, File Size.

    Args:
        entries: Entries in the order they should appear

    Returns:
        CSV document as bytes
    """
    buffer = io.StringIO(newline='')
    writer = csv.writer(buffer, lineterminator='\n')

    writer.writerow(CSV_HEADER)
    for entry in entries:
        writer.writerow([
            entry.filename,
            entry.url,
            entry.upload_date,
            entry.file_size,
        ])

    return CSV_BOM + buffer.getvalue().encode('utf-8')


def sanitize_file_name(filename: str) -> str:
    """
    Strip characters that are unsafe in file names.

    Runs of whitespace and dashes (including encoded spaces) become a
    single dash, and leading/trailing dots, dashes and underscores are
    trimmed.

    Args:
        filename: Proposed file name

    Returns:
        Sanitized file name
    """
    filename = filename.replace('%20', '-').replace('+', '-')
    filename = _UNSAFE_FILENAME_CHARS.sub('', filename)
    filename = _DASH_RUNS.sub('-', filename)
    return filename.strip('.-_')


def build_export_filename(site_name: str, today: date) -> str:
    """
    Download name for a site's export.

    Built as "<site name> - WordPress PDF listing - <YYYY-MM-DD>.csv" and
    passed through sanitize_file_name, which collapses the spaces and
    dashes, e.g. "Main-Site-WordPress-PDF-listing-2024-05-01.csv".
    """
    return sanitize_file_name(
        f"{site_name} - {EXPORT_FILENAME_LABEL} - {today.strftime('%Y-%m-%d')}.csv"
    )
