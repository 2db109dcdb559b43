"""Claim operations consumed by the HTTP layer."""

import logging
from typing import Optional

from hajari.core.registry import AlreadyClaimed, Clock, DeviceRegistry
from hajari.types.claims import ClaimListing, ClaimOutcome


logger = logging.getLogger(__name__)

CLAIM_OK = "ok"
CLAIM_DUPLICATE = "Device already claimed"


class ClaimService:
    """Thin claim/list front end over the device registry."""

    def __init__(self, registry: DeviceRegistry, clock: Optional[Clock] = None):
        """
        Args:
            registry: Shared device registry
            clock: Clock stamping rejected claims (defaults to the registry clock)
        """
        self.registry = registry
        self._clock = clock or registry.now

    async def claim(self, identifier: str, display_name: str) -> ClaimOutcome:
        """
        Claim a device under a display name.

        A duplicate claim is a normal outcome: the first claim is kept and
        ``accepted`` is False.
        """
        try:
            record = await self.registry.insert(identifier, display_name)
        except AlreadyClaimed:
            logger.info(f"Rejected claim of {identifier} as '{display_name}': already claimed")
            return ClaimOutcome(accepted=False, message=CLAIM_DUPLICATE, timestamp=self._clock())

        return ClaimOutcome(accepted=True, message=CLAIM_OK, timestamp=record.claimed_at)

    async def list_claims(self) -> ClaimListing:
        """List every current claim."""
        return ClaimListing(accepted=True, data=await self.registry.snapshot(), timestamp=None)
