"""pytest configuration for Hajari tests."""

from datetime import datetime, timedelta, timezone

import pytest

from hajari.core.claims import ClaimService
from hajari.core.notifications import NotificationChannel
from hajari.core.registry import DeviceRegistry


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start=None):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def registry(clock):
    return DeviceRegistry(clock=clock)


@pytest.fixture()
def channel():
    return NotificationChannel(maxsize=10)


@pytest.fixture()
def claim_service(registry):
    return ClaimService(registry)
