"""Configuration management."""

import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List

import yaml
from dotenv import load_dotenv


DEFAULT_KICK_TIME = 300
DEFAULT_SWEEP_INTERVAL = 1.0
DEFAULT_PROBE_COMMAND = ["arp", "-a"]


class ConfigManager:
    """
    Configuration manager for the Hajari service.

    Supports:
    - YAML configuration file (config/system.yaml)
    - Environment variable interpolation (${VAR_NAME})
    - Environment variable overrides (SERVER_URL, SERVER_PORT, KICK_TIME, ...)
    - Built-in defaults when no file is present
    """

    def __init__(self, config_dir: str = "config"):
        self.config_dir = Path(config_dir)
        self.system_config: Dict[str, Any] = {}

        # Load environment variables
        load_dotenv()

    def load(self) -> None:
        """Load the configuration file."""
        config_path = self.config_dir / "system.yaml"

        if not config_path.exists():
            # Try example file
            config_path = self.config_dir / "system.yaml.example"

        if not config_path.exists():
            self.system_config = {}
            return

        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}

        # Interpolate environment variables
        self.system_config = self._interpolate_env_vars(raw_config)

    def _interpolate_env_vars(self, config: Any) -> Any:
        """
        Recursively interpolate environment variables in config.

        Supports ${VAR_NAME} syntax.
        """
        if isinstance(config, dict):
            return {k: self._interpolate_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._interpolate_env_vars(item) for item in config]
        elif isinstance(config, str):
            return self._interpolate_string(config)
        else:
            return config

    @staticmethod
    def _interpolate_string(value: str) -> str:
        """Interpolate environment variables in a string."""
        pattern = re.compile(r'\$\{([^}]+)\}')

        def replacer(match):
            var_name = match.group(1)
            return os.getenv(var_name, match.group(0))

        return pattern.sub(replacer, value)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.system_config.get(name) or {}

    def get_server_config(self) -> Dict[str, Any]:
        """Get HTTP bind host and port."""
        server = self._section("server")

        return {
            "host": os.getenv("SERVER_URL", server.get("host", "0.0.0.0")),
            "port": int(os.getenv("SERVER_PORT", server.get("port", 3000))),
        }

    def get_kick_time(self) -> timedelta:
        """
        Get the eviction threshold.

        Raises:
            ValueError: If KICK_TIME is not a positive number of seconds
        """
        raw = os.getenv("KICK_TIME", self._section("presence").get("kick_time", DEFAULT_KICK_TIME))

        try:
            seconds = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"KICK_TIME must be a number of seconds, got {raw!r}")

        if seconds <= 0:
            raise ValueError(f"KICK_TIME must be positive, got {raw!r}")

        return timedelta(seconds=seconds)

    def get_sweep_interval(self) -> float:
        """Get the delay between eviction sweeps in seconds."""
        raw = os.getenv(
            "SWEEP_INTERVAL",
            self._section("presence").get("sweep_interval", DEFAULT_SWEEP_INTERVAL),
        )
        interval = float(raw)

        if interval < 0:
            raise ValueError(f"SWEEP_INTERVAL must not be negative, got {raw!r}")

        return interval

    def get_probe_config(self) -> Dict[str, Any]:
        """Get presence probe command, timeout and matcher name."""
        presence = self._section("presence")
        command: List[str] = presence.get("probe_command", DEFAULT_PROBE_COMMAND)

        if isinstance(command, str):
            command = command.split()

        return {
            "command": list(command),
            "timeout": float(presence.get("probe_timeout", 10)),
            "matcher": presence.get("matcher", "substring"),
        }

    def get_notification_queue_size(self) -> int:
        """Get the per-subscriber notification queue size."""
        return int(self._section("notifications").get("queue_size", 100))

    def get_log_level(self) -> str:
        """Get log level from config or environment."""
        return os.getenv(
            "LOG_LEVEL",
            self._section("system").get("log_level", "INFO")
        ).upper()

    def get_paths(self) -> Dict[str, Path]:
        """Get configured paths."""
        paths = self._section("paths")

        return {
            "logs": Path(os.getenv("LOGS_DIR", paths.get("logs", "./logs"))),
        }
