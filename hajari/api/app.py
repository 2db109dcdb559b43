"""FastAPI application for Hajari."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hajari import __version__
from hajari.api.models import HealthResponse
from hajari.api.routers import claims, events
from hajari.core.claims import ClaimService
from hajari.core.notifications import NotificationChannel
from hajari.core.worker import BackgroundWorker

logger = logging.getLogger(__name__)

# Pydantic error types reported under a shared code
ERROR_CODES = {
    "string_too_short": "length",
    "string_too_long": "length",
    "missing": "required",
}


def validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """
    Collapse pydantic errors into ``{field: [code, ...]}``.

    Errors not tied to a body field (malformed JSON, missing body) are
    reported under ``body``.
    """
    errors: Dict[str, List[str]] = {}

    for error in exc.errors():
        loc = error.get("loc", ())
        field = loc[1] if len(loc) > 1 and loc[0] == "body" and isinstance(loc[1], str) else "body"
        code = ERROR_CODES.get(error.get("type"), error.get("type", "invalid"))

        codes = errors.setdefault(field, [])
        if code not in codes:
            codes.append(code)

    return errors


def create_app(
    claim_service: Optional[ClaimService] = None,
    notifications: Optional[NotificationChannel] = None,
    workers: Sequence[BackgroundWorker] = (),
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        claim_service: ClaimService backing the claim endpoints
        notifications: Channel streamed by the SSE endpoint
        workers: Background workers reported by the health endpoint

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Hajari Device Claim API",
        description="Claim network devices by name and list current claims",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.claim_service = claim_service
    app.state.notifications = notifications
    app.state.workers = list(workers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = validation_errors(exc)
        logger.debug(f"Rejected {request.method} {request.url.path}: {errors}")
        return JSONResponse(status_code=400, content={"errors": errors})

    # Include routers
    app.include_router(claims.router)
    app.include_router(events.router, prefix="/api/v1")

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """Health check endpoint."""
        worker_health: Dict[str, Any] = {}

        for worker in app.state.workers:
            try:
                worker_health[worker.name] = await worker.health_check()
            except Exception as e:
                logger.error(f"Error checking {worker.name} health: {e}")
                worker_health[worker.name] = {"healthy": False, "error": str(e)}

        healthy = claim_service is not None and all(
            h.get("healthy", False) for h in worker_health.values()
        )
        claimed = await claim_service.registry.count() if claim_service else 0

        return HealthResponse(
            status="healthy" if healthy else "degraded",
            timestamp=datetime.now(timezone.utc).isoformat(),
            claimed_devices=claimed,
            workers=worker_health or None,
        )

    return app
