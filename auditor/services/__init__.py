"""Service layer for business logic."""

from auditor.services.auth_service import AuthService
from auditor.services.inventory_service import InventoryService

__all__ = ["AuthService", "InventoryService"]
