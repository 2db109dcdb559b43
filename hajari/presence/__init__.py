"""Network presence polling and stale-claim eviction."""

from .poller import POLL_INTERVAL, PresencePoller
from .probe import ArpProbe, ArpTableMatcher, ProbeError, get_matcher, normalize_mac, substring_match
from .sweeper import EvictionSweeper

__all__ = [
    "ArpProbe",
    "ArpTableMatcher",
    "EvictionSweeper",
    "POLL_INTERVAL",
    "PresencePoller",
    "ProbeError",
    "get_matcher",
    "normalize_mac",
    "substring_match",
]
