"""Repository layer for data access."""

from auditor.repositories.user_repository import UserRepository
from auditor.repositories.site_repository import SiteRepository
from auditor.repositories.attachment_repository import AttachmentRepository

__all__ = [
    "UserRepository",
    "SiteRepository",
    "AttachmentRepository",
]
