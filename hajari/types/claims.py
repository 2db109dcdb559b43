"""Claim records and the results handed to the transport layer."""

from datetime import datetime, timedelta
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ClaimSummary(BaseModel):
    """Public view of a claim, as listed to clients."""

    name: str
    time_active: datetime


class ClaimRecord(BaseModel):
    """
    A device claimed under a human-readable name.

    Only ``last_seen`` may change after creation, and it never moves backwards.
    """

    identifier: str = Field(frozen=True, description="Hardware address used as the registry key")
    display_name: str = Field(frozen=True)
    claimed_at: datetime = Field(frozen=True)
    last_seen: datetime

    @classmethod
    def new(cls, identifier: str, display_name: str, now: datetime) -> "ClaimRecord":
        """Create a record first seen at claim time."""
        return cls(
            identifier=identifier,
            display_name=display_name,
            claimed_at=now,
            last_seen=now,
        )

    def mark_seen(self, now: datetime) -> bool:
        """Move ``last_seen`` forward to ``now``. Returns False if it would regress."""
        if now <= self.last_seen:
            return False
        self.last_seen = now
        return True

    def age(self, now: datetime) -> timedelta:
        return now - self.last_seen

    def is_stale(self, threshold: timedelta, now: datetime) -> bool:
        return self.age(now) > threshold

    def summary(self) -> ClaimSummary:
        return ClaimSummary(name=self.display_name, time_active=self.claimed_at)


class ClaimOutcome(BaseModel):
    """Result of a claim attempt."""

    accepted: bool
    message: str
    timestamp: Optional[datetime] = None


class ClaimListing(BaseModel):
    """Point-in-time listing of every claim."""

    accepted: bool = True
    data: Dict[str, ClaimSummary] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None


class RemovalNotice(BaseModel):
    """Emitted by the sweeper for every claim it revokes."""

    identifier: str
    message: str
    timestamp: datetime

    @classmethod
    def for_device(cls, identifier: str, now: datetime) -> "RemovalNotice":
        return cls(
            identifier=identifier,
            message=f"device {identifier} has been removed",
            timestamp=now,
        )
