"""Eviction of claims whose devices have gone silent."""

from datetime import timedelta
from typing import List

from hajari.core.notifications import NotificationChannel
from hajari.core.registry import DeviceRegistry
from hajari.core.worker import BackgroundWorker
from hajari.types.claims import RemovalNotice


class EvictionSweeper(BackgroundWorker):
    """
    Removes claims not seen for longer than ``kick_time``.

    Every removal is announced on the notification channel. Delivery is
    best-effort and never affects the removal itself.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        channel: NotificationChannel,
        kick_time: timedelta = timedelta(seconds=300),
        interval: float = 1.0,
    ):
        super().__init__("eviction_sweeper", interval)
        self.registry = registry
        self.channel = channel
        self.kick_time = kick_time
        self.evicted = 0

    async def run_once(self) -> List[str]:
        """Run one sweep and return the removed identifiers."""
        removed = await self.registry.evict_stale(self.kick_time)
        self.record_success()
        if not removed:
            return removed

        now = self.registry.now()
        for identifier in removed:
            self._logger.info(f"Removed device {identifier}: not seen for over {self.kick_time}")
            self.channel.publish(RemovalNotice.for_device(identifier, now))

        self.evicted += len(removed)
        return removed

    async def health_check(self):
        health = await super().health_check()
        health["evicted"] = self.evicted
        health["kick_time_seconds"] = self.kick_time.total_seconds()
        return health
