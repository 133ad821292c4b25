"""API routes package."""

from auditor.routes.auth_routes import router as auth_router
from auditor.routes.inventory_routes import router as inventory_router

__all__ = ["auth_router", "inventory_router"]
