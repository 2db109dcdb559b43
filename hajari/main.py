"""Main application entry point."""

import asyncio
import logging
import signal
import sys
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from hajari import __version__
from hajari.api.app import create_app
from hajari.api.server import APIServer
from hajari.core.claims import ClaimService
from hajari.core.config import ConfigManager
from hajari.core.notifications import NotificationChannel
from hajari.core.registry import DeviceRegistry
from hajari.presence.poller import PresencePoller
from hajari.presence.probe import ArpProbe, get_matcher
from hajari.presence.sweeper import EvictionSweeper


class Hajari:
    """Main application class."""

    def __init__(
        self,
        config_dir: str = "config",
        host: Optional[str] = None,
        port: Optional[int] = None,
        kick_time: Optional[float] = None,
    ):
        self.config_dir = config_dir
        self.host = host
        self.port = port
        self.kick_time = kick_time
        self.config_manager: Optional[ConfigManager] = None
        self.registry: Optional[DeviceRegistry] = None
        self.notifications: Optional[NotificationChannel] = None
        self.poller: Optional[PresencePoller] = None
        self.sweeper: Optional[EvictionSweeper] = None
        self.api_server: Optional[APIServer] = None
        self._shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """Start the application."""
        print("=" * 60)
        print("Hajari - Device Claim Service")
        print("=" * 60)

        try:
            print("\nLoading configuration...")
            self.config_manager = ConfigManager(self.config_dir)
            self.config_manager.load()

            self._setup_logging()

            logger = logging.getLogger(__name__)
            logger.info("Starting Hajari...")

            host, port = self._bind_address(self.config_manager.get_server_config())

            if self.kick_time is not None:
                if self.kick_time <= 0:
                    raise ValueError(f"--kick-time must be positive, got {self.kick_time}")
                kick_time = timedelta(seconds=self.kick_time)
            else:
                kick_time = self.config_manager.get_kick_time()
            probe_config = self.config_manager.get_probe_config()

            self.registry = DeviceRegistry()
            self.notifications = NotificationChannel(
                maxsize=self.config_manager.get_notification_queue_size()
            )

            self.poller = PresencePoller(
                self.registry,
                probe=ArpProbe(probe_config["command"], timeout=probe_config["timeout"]),
                matcher=get_matcher(probe_config["matcher"]),
            )
            self.sweeper = EvictionSweeper(
                self.registry,
                self.notifications,
                kick_time=kick_time,
                interval=self.config_manager.get_sweep_interval(),
            )

            print("Starting presence poller and eviction sweeper...")
            await self.poller.start()
            await self.sweeper.start()

            print(f"Starting API server on {host}:{port}...")
            app = create_app(
                ClaimService(self.registry),
                self.notifications,
                workers=[self.poller, self.sweeper],
            )
            self.api_server = APIServer(app, host=host, port=port)
            await self.api_server.start()

            print("\nHajari is running!")
            print(f"Claims are revoked after {int(kick_time.total_seconds())}s without presence")
            print(f"API docs: http://localhost:{port}/docs")
            print("   Press Ctrl+C to stop\n")

            logger.info("Hajari started successfully")

            # Wait for shutdown signal
            await self._shutdown_event.wait()

        except Exception as e:
            logging.error(f"Failed to start Hajari: {e}", exc_info=True)
            raise

    async def stop(self) -> None:
        """Stop the application."""
        logger = logging.getLogger(__name__)
        logger.info("Stopping Hajari...")

        try:
            if self.api_server:
                print("Stopping API server...")
                await self.api_server.stop()

            for worker in (self.poller, self.sweeper):
                if worker:
                    await worker.stop()

            print("Hajari stopped\n")
            logger.info("Hajari stopped")

        except Exception as e:
            logging.error(f"Error during shutdown: {e}", exc_info=True)

    def _bind_address(self, server_config: Dict[str, Any]) -> Tuple[str, int]:
        """Command-line host/port win over configuration, even when falsy."""
        host = self.host if self.host is not None else server_config["host"]
        port = self.port if self.port is not None else server_config["port"]
        return host, port

    def _setup_logging(self) -> None:
        """Setup logging configuration."""
        log_level = self.config_manager.get_log_level()

        logs_dir = self.config_manager.get_paths()["logs"]
        logs_dir.mkdir(parents=True, exist_ok=True)

        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[
                logging.StreamHandler(),
                logging.FileHandler(logs_dir / "hajari.log"),
            ],
        )

        # Reduce noise from libraries
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    def trigger_shutdown(self) -> None:
        """Trigger graceful shutdown."""
        self._shutdown_event.set()


async def async_main(
    config_dir: str = "config",
    host: Optional[str] = None,
    port: Optional[int] = None,
    kick_time: Optional[float] = None,
) -> None:
    """Async main function."""
    app = Hajari(config_dir, host=host, port=port, kick_time=kick_time)

    loop = asyncio.get_running_loop()

    def signal_handler():
        print("\nShutdown signal received...")
        app.trigger_shutdown()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await app.start()
    finally:
        await app.stop()


def main() -> None:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Hajari - Device Claim Service")
    parser.add_argument(
        "--config",
        default="config",
        help="Configuration directory (default: config)",
    )
    parser.add_argument("--host", help="Bind address (overrides SERVER_URL)")
    parser.add_argument("--port", type=int, help="Bind port (overrides SERVER_PORT)")
    parser.add_argument(
        "--kick-time",
        type=float,
        help="Seconds without presence before a claim is revoked (overrides KICK_TIME)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Hajari {__version__}",
    )

    args = parser.parse_args()

    try:
        asyncio.run(async_main(args.config, args.host, args.port, args.kick_time))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"\nFatal error: {e}")
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
