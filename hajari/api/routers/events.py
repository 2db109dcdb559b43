"""Server-Sent Events (SSE) stream of claim removals."""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from hajari.api.dependencies import get_notification_channel
from hajari.core.notifications import NotificationChannel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

# Seconds between disconnect checks while no notice arrives
DISCONNECT_POLL = 1.0


async def removal_events(
    request: Request,
    channel: NotificationChannel,
) -> AsyncIterator[Dict[str, Any]]:
    """Yield an SSE event for every removal notice until the client disconnects."""
    async with channel.subscription() as queue:
        logger.info("SSE client connected")
        try:
            while not await request.is_disconnected():
                try:
                    notice = await asyncio.wait_for(queue.get(), timeout=DISCONNECT_POLL)
                except asyncio.TimeoutError:
                    continue

                yield {
                    "event": "removed",
                    "id": notice.identifier,
                    "data": notice.model_dump_json(),
                }
        finally:
            logger.info("SSE client disconnected")


@router.get("/stream")
async def event_stream(
    request: Request,
    channel: NotificationChannel = Depends(get_notification_channel),
):
    """
    Stream removal notices as Server-Sent Events.

    Each event is named ``removed`` and carries the notice as JSON:

    ```json
    {"identifier": "00:11:22:33:44:55",
     "message": "device 00:11:22:33:44:55 has been removed",
     "timestamp": "2024-01-01T00:05:00Z"}
    ```
    """
    return EventSourceResponse(removal_events(request, channel))
