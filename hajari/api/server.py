"""uvicorn runner for the Hajari API."""

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI
from uvicorn import Config, Server

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 10.0


class APIServer:
    """Serves the claim API from a task on the running event loop."""

    def __init__(self, app: FastAPI, host: str = "0.0.0.0", port: int = 3000):
        self.app = app
        self.host = host
        self.port = port
        self.server: Optional[Server] = None
        self._server_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Begin serving; returns once the serve task is scheduled."""
        self.server = Server(Config(app=self.app, host=self.host, port=self.port, log_level="info"))
        self._server_task = asyncio.create_task(self.server.serve(), name="hajari-api")
        logger.info(f"Serving claim API on http://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Ask uvicorn to exit, cancelling it if it does not within the timeout."""
        if not self.server or not self._server_task:
            return

        self.server.should_exit = True

        try:
            await asyncio.wait_for(self._server_task, timeout=SHUTDOWN_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning(f"API server did not exit within {SHUTDOWN_TIMEOUT}s, cancelling")
            self._server_task.cancel()
            try:
                await self._server_task
            except asyncio.CancelledError:
                pass

        self._server_task = None
        logger.info("API server stopped")
