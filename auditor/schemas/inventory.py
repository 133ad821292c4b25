"""Pydantic schemas for inventory endpoints."""

from typing import Any, List, Optional
from pydantic import BaseModel


class SiteRequest(BaseModel):
    """
    Request model for the list and export endpoints.

    site_id is validated by the handler so that a missing or invalid id
    gets the same 400 response whatever its JSON type.
    """
    site_id: Optional[Any] = None
    nonce: Optional[str] = None


class InventoryEntryResponse(BaseModel):
    """Response model for one PDF of a site."""
    id: Optional[int] = None
    filename: str
    url: str
    upload_date: str
    file_size: str
    file_size_raw: int


class ListInventoryResponse(BaseModel):
    """Response model for a site's PDF listing."""
    site_id: int
    pdfs: List[InventoryEntryResponse]
    count: int


class ExportInventoryResponse(BaseModel):
    """Response model for a site's CSV export."""
    csv_content: str
    filename: str


class SiteResponse(BaseModel):
    """Response model for a site of the network."""
    site_id: int
    blogname: str
    domain: str
    path: str


class ListSitesResponse(BaseModel):
    """Response model for the site directory."""
    sites: List[SiteResponse]
    count: int
