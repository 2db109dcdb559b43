"""Device claim endpoints."""

import logging

from fastapi import APIRouter, Depends

from hajari.api.dependencies import get_claim_service
from hajari.api.models import (
    ClaimDevicePayload,
    ClaimListResponse,
    ClaimResponse,
    ValidationErrorResponse,
)
from hajari.core.claims import ClaimService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["claims"])


@router.get("/list_users/", response_model=ClaimListResponse)
async def list_users(service: ClaimService = Depends(get_claim_service)):
    """List all claimed devices."""
    listing = await service.list_claims()
    return ClaimListResponse(status=listing.accepted, data=listing.data, timestamp=listing.timestamp)


@router.post(
    "/claim_device",
    response_model=ClaimResponse,
    responses={400: {"model": ValidationErrorResponse}},
)
async def claim_device(
    payload: ClaimDevicePayload,
    service: ClaimService = Depends(get_claim_service),
):
    """
    Claim a device by MAC address.

    A device that is already claimed is reported with ``status: false``;
    the existing claim is left untouched.
    """
    outcome = await service.claim(payload.mac_address, payload.name)
    return ClaimResponse(status=outcome.accepted, data=outcome.message, timestamp=outcome.timestamp)
