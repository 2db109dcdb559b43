"""Base class for long-running background loops."""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional


class WorkerState(str, Enum):
    """Worker state enumeration."""

    STOPPED = "stopped"
    RUNNING = "running"
    ERROR = "error"


class BackgroundWorker(ABC):
    """
    Base class for the presence poller and the eviction sweeper.

    Runs ``run_once()`` immediately on start, then every ``interval`` seconds
    until stopped. An iteration that raises is logged and counted; the loop
    keeps going. After ``max_consecutive_failures`` failed iterations in a row
    the worker reports ERROR until an iteration succeeds again.
    """

    def __init__(self, name: str, interval: float, max_consecutive_failures: int = 3):
        self.name = name
        self.interval = interval
        self.max_consecutive_failures = max_consecutive_failures

        self.iterations = 0
        self.failures = 0
        self.consecutive_failures = 0
        self.last_error: Optional[str] = None

        self._state = WorkerState.STOPPED
        self._task: Optional[asyncio.Task] = None
        self._logger = logging.getLogger(f"worker.{name}")

    @property
    def state(self) -> WorkerState:
        """Get worker state."""
        return self._state

    @abstractmethod
    async def run_once(self) -> Any:
        """Run a single iteration of the loop."""
        pass

    async def start(self) -> None:
        """Start the loop as a background task."""
        if self._task and not self._task.done():
            return

        self._task = asyncio.create_task(self._loop(), name=f"hajari-{self.name}")
        self._state = WorkerState.RUNNING
        self._logger.info(f"Started, interval {self.interval}s")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                self._logger.error(f"Error stopping {self.name}: {e}", exc_info=True)
            self._task = None

        self._state = WorkerState.STOPPED
        self._logger.info("Stopped")

    async def health_check(self) -> Dict[str, Any]:
        """Health status and counters."""
        return {
            "healthy": self._state == WorkerState.RUNNING,
            "state": self._state.value,
            "iterations": self.iterations,
            "failures": self.failures,
            "consecutive_failures": self.consecutive_failures,
            "last_error": self.last_error,
        }

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
                self.iterations += 1

                # sleep(0) still yields so a zero interval cannot starve the loop
                await asyncio.sleep(self.interval)

            except asyncio.CancelledError:
                self._logger.debug(f"{self.name} loop cancelled")
                raise
            except Exception as e:
                self.failures += 1
                self._logger.error(f"Unexpected error in {self.name} loop: {e}", exc_info=True)
                self.record_failure(str(e))
                await asyncio.sleep(self.interval)

    def record_failure(self, error: str) -> None:
        """Count a failed iteration; enter ERROR once failures run consecutively."""
        self.last_error = error
        self.consecutive_failures += 1

        if (
            self._state == WorkerState.RUNNING
            and self.consecutive_failures >= self.max_consecutive_failures
        ):
            self._state = WorkerState.ERROR
            self._logger.error(
                f"{self.consecutive_failures} consecutive failures, marking {self.name} unhealthy"
            )

    def record_success(self) -> None:
        """Reset the failure streak and leave ERROR."""
        self.consecutive_failures = 0

        if self._state == WorkerState.ERROR:
            self._state = WorkerState.RUNNING
            self._logger.info(f"{self.name} recovered")
