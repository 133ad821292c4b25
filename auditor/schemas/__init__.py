"""Pydantic schemas for API requests and responses."""

from auditor.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    NonceResponse
)
from auditor.schemas.inventory import (
    SiteRequest,
    InventoryEntryResponse,
    ListInventoryResponse,
    ExportInventoryResponse,
    SiteResponse,
    ListSitesResponse
)
from auditor.schemas.common import ErrorResponse

__all__ = [
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "NonceResponse",
    "SiteRequest",
    "InventoryEntryResponse",
    "ListInventoryResponse",
    "ExportInventoryResponse",
    "SiteResponse",
    "ListSitesResponse",
    "ErrorResponse"
]
