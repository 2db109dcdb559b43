"""Core components for Hajari."""

from .claims import ClaimService
from .config import ConfigManager
from .notifications import NotificationChannel
from .registry import AlreadyClaimed, DeviceRegistry
from .worker import BackgroundWorker, WorkerState

__all__ = [
    "AlreadyClaimed",
    "BackgroundWorker",
    "ClaimService",
    "ConfigManager",
    "DeviceRegistry",
    "NotificationChannel",
    "WorkerState",
]
