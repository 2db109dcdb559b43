"""Shared registry of claimed devices."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

from hajari.types.claims import ClaimRecord, ClaimSummary


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class AlreadyClaimed(Exception):
    """Raised when a device identifier already has a claim."""

    def __init__(self, identifier: str):
        super().__init__(f"Device already claimed: {identifier}")
        self.identifier = identifier


class DeviceRegistry:
    """
    In-memory mapping of device identifier to claim record.

    The registry is the only shared mutable state in the service. It is
    created once at startup and handed to the claim service, the presence
    poller and the eviction sweeper.

    All access goes through a single ``asyncio.Lock``. Every critical section
    is plain dict work with no awaits inside, so readers never observe a
    half-inserted or half-removed record. When ``now`` is omitted the clock is
    read inside the critical section.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Initialize device registry.

        Args:
            clock: Callable returning the current time (defaults to UTC now)
        """
        self._clock = clock or utc_now
        self._records: Dict[str, ClaimRecord] = {}
        self._lock = asyncio.Lock()

    def now(self) -> datetime:
        """Current time according to the registry clock."""
        return self._clock()

    async def insert(
        self,
        identifier: str,
        display_name: str,
        now: Optional[datetime] = None,
    ) -> ClaimRecord:
        """
        Claim a device.

        Args:
            identifier: Device hardware address
            display_name: Name to claim the device under
            now: Claim time (defaults to the registry clock)

        Returns:
            Copy of the newly created record

        Raises:
            AlreadyClaimed: If the identifier already has a claim
        """
        async with self._lock:
            if identifier in self._records:
                raise AlreadyClaimed(identifier)

            record = ClaimRecord.new(identifier, display_name, now or self._clock())
            self._records[identifier] = record

        logger.info(f"Claimed device {identifier} as '{display_name}'")
        return record.model_copy()

    async def snapshot(self) -> Dict[str, ClaimSummary]:
        """Point-in-time copy of all claims, without liveness bookkeeping."""
        async with self._lock:
            return {
                identifier: record.summary()
                for identifier, record in self._records.items()
            }

    async def refresh_seen(
        self,
        identifiers: Iterable[str],
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Mark devices as seen.

        Unknown identifiers are ignored and ``last_seen`` never moves backwards.

        Returns:
            Identifiers whose ``last_seen`` was advanced
        """
        wanted = set(identifiers)
        if not wanted:
            return []

        async with self._lock:
            seen_at = now or self._clock()
            refreshed = [
                identifier
                for identifier, record in self._records.items()
                if identifier in wanted and record.mark_seen(seen_at)
            ]

        if refreshed:
            logger.debug(f"Refreshed last_seen for {len(refreshed)} devices")
        return refreshed

    async def evict_stale(
        self,
        threshold: timedelta,
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Remove every claim not seen for longer than ``threshold``.

        The age check and the removal happen under the same lock acquisition,
        so a refresh that lands before the sweep is always honoured.

        Returns:
            Removed identifiers, in claim order
        """
        async with self._lock:
            checked_at = now or self._clock()
            stale = [
                identifier
                for identifier, record in self._records.items()
                if record.is_stale(threshold, checked_at)
            ]
            for identifier in stale:
                del self._records[identifier]

        return stale

    async def identifiers(self) -> List[str]:
        """Identifiers of all current claims."""
        async with self._lock:
            return list(self._records)

    async def get(self, identifier: str) -> Optional[ClaimRecord]:
        """Copy of a single record, or None if unclaimed."""
        async with self._lock:
            record = self._records.get(identifier)
            return record.model_copy() if record else None

    async def count(self) -> int:
        """Number of claimed devices."""
        async with self._lock:
            return len(self._records)
