"""Shared data type definitions."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InventoryEntry:
    """
    One PDF found in a site's media library.

    file_size is display text only; file_size_raw is the byte count used
    for every numeric comparison and is 0 when the file is missing.
    """
    filename: str
    url: str
    upload_date: str
    file_size: str
    file_size_raw: int = 0
    id: Optional[int] = None


@dataclass(frozen=True)
class SiteSummary:
    """
    Directory listing entry for one site of the network.
    """
    site_id: int
    blogname: str
    domain: str
    path: str
