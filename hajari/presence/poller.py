"""Periodic presence polling."""

from typing import Awaitable, Callable, List, Optional

from hajari.core.registry import DeviceRegistry
from hajari.core.worker import BackgroundWorker

from .probe import ArpProbe, Matcher, ProbeError, match_identifiers, substring_match


POLL_INTERVAL = 30

Probe = Callable[[], Awaitable[str]]


class PresencePoller(BackgroundWorker):
    """
    Refreshes ``last_seen`` for every claimed device found by the probe.

    The poller only ever extends freshness; removal is the sweeper's job.
    The registry lock is never held while the probe runs.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        probe: Optional[Probe] = None,
        matcher: Matcher = substring_match,
        interval: float = POLL_INTERVAL,
    ):
        super().__init__("presence_poller", interval)
        self.registry = registry
        self.probe = probe or ArpProbe()
        self.matcher = matcher
        self.probe_failures = 0

    async def run_once(self) -> Optional[List[str]]:
        """
        Probe the network once.

        Returns:
            Refreshed identifiers, or None if the probe failed
        """
        try:
            output = await self.probe()
        except ProbeError as e:
            self.probe_failures += 1
            self._logger.warning(f"Presence probe failed: {e}")
            self.record_failure(str(e))
            return None

        identifiers = await self.registry.identifiers()
        seen = match_identifiers(identifiers, output, self.matcher)
        refreshed = await self.registry.refresh_seen(seen)
        self.record_success()

        self._logger.debug(f"Probe saw {len(seen)} of {len(identifiers)} claimed devices")
        return refreshed

    async def health_check(self):
        health = await super().health_check()
        health["probe_failures"] = self.probe_failures
        return health
