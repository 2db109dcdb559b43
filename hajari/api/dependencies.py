"""FastAPI dependencies resolving the services attached to the app."""

from fastapi import HTTPException, Request

from hajari.core.claims import ClaimService
from hajari.core.notifications import NotificationChannel


def get_claim_service(request: Request) -> ClaimService:
    """Claim service set on ``app.state`` by ``create_app``."""
    service = getattr(request.app.state, "claim_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Claim service not initialized")
    return service


def get_notification_channel(request: Request) -> NotificationChannel:
    channel = getattr(request.app.state, "notifications", None)
    if channel is None:
        raise HTTPException(status_code=503, detail="Notification channel not initialized")
    return channel
