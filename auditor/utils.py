"""Utility helper functions for the Auditor service."""

import posixpath
import uuid
from typing import Any
from urllib.parse import urlsplit

from common.constants import SIZE_UNITS
from auditor.exceptions import BadRequestError


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def format_bytes(size_bytes: int, precision: int = 2) -> str:
    """
    Format a byte count as a human-readable size.

    Uses 1024-based units and stops at GB, so anything from 1024 GB up is
    still reported in GB. Trailing zeros are dropped ("1 KB", "1.5 KB").

    Args:
        size_bytes: Size in bytes (negative values count as 0)
        precision: Decimal places to round to

    Returns:
        Formatted string with value and unit (e.g., "2.4 MB", "0 B")
    """
    size_bytes = max(size_bytes, 0)
    precision = max(precision, 0)

    power = (int(size_bytes).bit_length() - 1) // 10 if size_bytes >= 1 else 0
    power = min(power, len(SIZE_UNITS) - 1)

    value = round(size_bytes / (1 << (10 * power)), precision)
    text = f"{value:.{precision}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')

    return f"{text} {SIZE_UNITS[power]}"


def url_basename(url: str) -> str:
    """
    Last segment of a URL's path, without query string or fragment.

    Args:
        url: Absolute or relative URL

    Returns:
        Final path segment, or an empty string when there is none
    """
    if not url:
        return ""
    path = urlsplit(url).path
    return posixpath.basename(path.rstrip('/'))


def parse_site_id(value: Any) -> int:
    """
    Validate a site id received from a request.

    Args:
        value: Raw JSON value from the request body

    Returns:
        The site id as a positive integer

    Raises:
        BadRequestError: If the value is missing, not an integer, or not positive
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise BadRequestError("Site ID not provided")

    if isinstance(value, (bool, list, dict)):
        raise BadRequestError("Invalid site ID")

    if isinstance(value, float):
        if not value.is_integer():
            raise BadRequestError("Invalid site ID")
        value = int(value)

    try:
        site_id = int(str(value).strip())
    except ValueError:
        raise BadRequestError("Invalid site ID")

    if site_id <= 0:
        raise BadRequestError("Invalid site ID")

    return site_id
