"""Tests for configuration loading."""

from datetime import timedelta

import pytest

from hajari.core.config import ConfigManager

ENV_VARS = ["SERVER_URL", "SERVER_PORT", "KICK_TIME", "SWEEP_INTERVAL", "LOG_LEVEL", "LOGS_DIR"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_config(directory, text, name="system.yaml"):
    (directory / name).write_text(text)
    manager = ConfigManager(str(directory))
    manager.load()
    return manager


class TestDefaults:
    def test_no_config_file(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        manager.load()

        assert manager.get_server_config() == {"host": "0.0.0.0", "port": 3000}
        assert manager.get_kick_time() == timedelta(seconds=300)
        assert manager.get_sweep_interval() == 1.0
        assert manager.get_probe_config() == {
            "command": ["arp", "-a"],
            "timeout": 10.0,
            "matcher": "substring",
        }
        assert manager.get_notification_queue_size() == 100
        assert manager.get_log_level() == "INFO"

    def test_empty_file(self, tmp_path):
        manager = write_config(tmp_path, "")
        assert manager.get_kick_time() == timedelta(seconds=300)

    def test_example_file_fallback(self, tmp_path):
        manager = write_config(tmp_path, "presence:\n  kick_time: 42\n", name="system.yaml.example")
        assert manager.get_kick_time() == timedelta(seconds=42)


class TestFileAndEnvironment:
    def test_yaml_values(self, tmp_path):
        manager = write_config(tmp_path, """
server:
  host: 127.0.0.1
  port: 8080
presence:
  kick_time: 60
  sweep_interval: 0
  probe_command: ip neigh show
  matcher: arp_table
""")
        assert manager.get_server_config() == {"host": "127.0.0.1", "port": 8080}
        assert manager.get_kick_time() == timedelta(seconds=60)
        assert manager.get_sweep_interval() == 0.0
        assert manager.get_probe_config()["command"] == ["ip", "neigh", "show"]
        assert manager.get_probe_config()["matcher"] == "arp_table"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SERVER_URL", "10.0.0.5")
        monkeypatch.setenv("SERVER_PORT", "9000")
        monkeypatch.setenv("KICK_TIME", "1")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        manager = write_config(tmp_path, "server:\n  port: 8080\npresence:\n  kick_time: 60\n")
        assert manager.get_server_config() == {"host": "10.0.0.5", "port": 9000}
        assert manager.get_kick_time() == timedelta(seconds=1)
        assert manager.get_log_level() == "DEBUG"

    def test_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HAJARI_TEST_HOST", "192.168.0.2")
        manager = write_config(tmp_path, "server:\n  host: ${HAJARI_TEST_HOST}\n  tag: ${HAJARI_UNSET_VAR}\n")
        assert manager.get_server_config()["host"] == "192.168.0.2"
        assert manager.system_config["server"]["tag"] == "${HAJARI_UNSET_VAR}"


class TestKickTimeValidation:
    @pytest.mark.parametrize("value", ["0", "-5", "soon"])
    def test_invalid(self, tmp_path, monkeypatch, value):
        monkeypatch.setenv("KICK_TIME", value)
        manager = ConfigManager(str(tmp_path))
        manager.load()
        with pytest.raises(ValueError):
            manager.get_kick_time()

    def test_negative_sweep_interval(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SWEEP_INTERVAL", "-1")
        manager = ConfigManager(str(tmp_path))
        manager.load()
        with pytest.raises(ValueError):
            manager.get_sweep_interval()
