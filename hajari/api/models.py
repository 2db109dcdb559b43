"""API models for FastAPI endpoints."""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from hajari.types.claims import ClaimSummary


T = TypeVar("T")


class ResponseStatus(BaseModel, Generic[T]):
    """Envelope used by the claim endpoints."""

    status: bool
    data: T
    timestamp: Optional[datetime] = None


class ClaimDevicePayload(BaseModel):
    """Claim request body."""

    name: str = Field(..., min_length=3, description="Name to claim the device under")
    mac_address: str = Field(..., min_length=10, description="Hardware address of the device")


ClaimResponse = ResponseStatus[str]
ClaimListResponse = ResponseStatus[Dict[str, ClaimSummary]]


class ValidationErrorResponse(BaseModel):
    """Field-keyed validation error codes."""

    errors: Dict[str, List[str]]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    claimed_devices: int
    workers: Optional[Dict[str, Any]] = None
