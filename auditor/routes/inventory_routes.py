"""Inventory API routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from common.logging_config import get_logger
from auditor.auth import require_network_admin
from auditor.nonce import check_request_nonce
from auditor.repositories.site_repository import SiteRepository
from auditor.repositories.user_repository import User
from auditor.schemas.common import ErrorResponse
from auditor.schemas.inventory import (
    SiteRequest,
    InventoryEntryResponse,
    ListInventoryResponse,
    ExportInventoryResponse,
    SiteResponse,
    ListSitesResponse
)
from auditor.services.inventory_service import InventoryService
from auditor.utils import parse_site_id

logger = get_logger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])

GATE_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

_inventory_service = InventoryService()


def get_inventory_service() -> InventoryService:
    """Dependency to get the process-wide inventory service"""
    return _inventory_service


@router.get("/sites", response_model=ListSitesResponse)
def list_sites(current_user: User = Depends(require_network_admin)):
    """
    List the sites of the network.

    Returns:
        - sites: Up to 999 sites with id, name, domain and path

    Raises:
        - 401: Invalid or missing API Key
        - 403: Caller is not a network admin
    """
    sites = SiteRepository.list_sites()

    return ListSitesResponse(
        sites=[
            SiteResponse(
                site_id=site.site_id,
                blogname=site.blogname,
                domain=site.domain,
                path=site.path,
            )
            for site in sites
        ],
        count=len(sites),
    )


@router.post("/pdfs", response_model=ListInventoryResponse, responses=GATE_RESPONSES)
def list_site_pdfs(
    request: SiteRequest,
    current_user: User = Depends(require_network_admin),
    inventory_service: InventoryService = Depends(get_inventory_service)
):
    """
    List the PDFs of one site.

    Parameters:
        - site_id: Site to scan (positive integer)
        - nonce: Security token from /auth/nonce

    Returns:
        - site_id: The scanned site
        - pdfs: Entries ordered by upload date, newest first
        - count: Number of entries

    Raises:
        - 400: Site ID missing or invalid
        - 401: Invalid or missing API Key
        - 403: Caller is not a network admin, or the nonce is invalid
        - 404: Site does not exist
        - 500: Error loading PDFs
    """
    check_request_nonce(current_user, request.nonce)
    site_id = parse_site_id(request.site_id)
    logger.info(f"Listing PDFs [site_id={site_id}] [user_id={current_user.user_id}]")

    entries = inventory_service.list_inventory(site_id)

    return ListInventoryResponse(
        site_id=site_id,
        pdfs=[InventoryEntryResponse(**asdict(entry)) for entry in entries],
        count=len(entries),
    )


@router.post("/csv", response_model=ExportInventoryResponse, responses=GATE_RESPONSES)
def export_site_csv(
    request: SiteRequest,
    current_user: User = Depends(require_network_admin),
    inventory_service: InventoryService = Depends(get_inventory_service)
):
    """
    Export the PDFs of one site as CSV.

    Parameters:
        - site_id: Site to export (positive integer)
        - nonce: Security token from /auth/nonce

    Returns:
        - csv_content: UTF-8 CSV text starting with a byte-order mark
        - filename: "<site name> - WordPress PDF listing - <YYYY-MM-DD>.csv", sanitized

    Raises:
        - 400: Site ID missing or invalid
        - 401: Invalid or missing API Key
        - 403: Caller is not a network admin, or the nonce is invalid
        - 404: Site does not exist
        - 500: Error generating CSV
    """
    check_request_nonce(current_user, request.nonce)
    site_id = parse_site_id(request.site_id)
    logger.info(f"Exporting PDFs [site_id={site_id}] [user_id={current_user.user_id}]")

    export = inventory_service.export_inventory(site_id)

    return ExportInventoryResponse(
        csv_content=export.content.decode('utf-8'),
        filename=export.filename,
    )
