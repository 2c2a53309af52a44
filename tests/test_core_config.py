"""Tests for run configuration."""

from pathlib import Path

import pytest

from ts3notify.core.config import Config, ConfigError, config_from_args

REQUIRED = ["-u", "serveradmin", "-p", "secret", "-id", "1", "-url", "https://hooks.example.com/x"]


class TestConfigFromArgs:
    """Tests for config_from_args."""

    def test_required_flags(self) -> None:
        """Test short flags and defaults."""
        config = config_from_args(REQUIRED, environ={})
        assert config.username == "serveradmin"
        assert config.password == "secret"
        assert config.server_id == 1
        assert config.webhook_url == "https://hooks.example.com/x"
        assert config.output == Path("clients.json")
        assert config.debug is False
        assert config.host == "localhost"
        assert config.port == 10011

    def test_long_flags(self) -> None:
        """Test long option names."""
        config = config_from_args(
            [
                "--username", "bot",
                "--password", "pw",
                "--server-id", "3",
                "--webhook-url", "https://hooks.example.com/y",
                "--output", "/var/lib/ts3notify/state.json",
                "--debug",
                "--host", "ts.example.com",
                "--port", "10022",
                "--timeout", "2.5",
            ],
            environ={},
        )
        assert config.server_id == 3
        assert config.output == Path("/var/lib/ts3notify/state.json")
        assert config.debug is True
        assert config.host == "ts.example.com"
        assert config.port == 10022
        assert config.timeout == 2.5

    def test_debug_short_flag(self) -> None:
        """Test -d enables debug output."""
        assert config_from_args([*REQUIRED, "-d"], environ={}).debug is True

    def test_missing_options(self) -> None:
        """Test every missing required option is reported."""
        with pytest.raises(ConfigError) as excinfo:
            config_from_args(["-u", "serveradmin"], environ={})
        message = str(excinfo.value)
        assert "password" in message
        assert "server id" in message
        assert "webhook URL" in message
        assert "username" not in message

    def test_environment_fallback(self) -> None:
        """Test credentials and URL can come from the environment."""
        env = {
            "TS3NOTIFY_USERNAME": "envuser",
            "TS3NOTIFY_PASSWORD": "envpass",
            "TS3NOTIFY_WEBHOOK_URL": "https://hooks.example.com/env",
        }
        config = config_from_args(["-id", "2"], environ=env)
        assert config.username == "envuser"
        assert config.password == "envpass"
        assert config.webhook_url == "https://hooks.example.com/env"

    def test_flags_override_environment(self) -> None:
        """Test flags win over environment variables."""
        config = config_from_args(REQUIRED, environ={"TS3NOTIFY_USERNAME": "envuser"})
        assert config.username == "serveradmin"

    def test_non_numeric_server_id_exits(self) -> None:
        """Test argparse rejects a non-numeric server id."""
        with pytest.raises(SystemExit):
            config_from_args(["-u", "a", "-p", "b", "-id", "one", "-url", "x"], environ={})


class TestConfigValidate:
    """Tests for Config.validate."""

    def test_valid(self) -> None:
        """Test a complete config validates."""
        Config(username="a", password="b", server_id=1, webhook_url="https://x").validate()

    def test_zero_server_id(self) -> None:
        """Test server ids start at 1."""
        with pytest.raises(ConfigError):
            Config(username="a", password="b", server_id=0, webhook_url="https://x").validate()

    def test_invalid_port(self) -> None:
        """Test out-of-range ports are rejected."""
        with pytest.raises(ConfigError):
            Config(
                username="a", password="b", server_id=1, webhook_url="https://x", port=70000
            ).validate()

    def test_invalid_timeout(self) -> None:
        """Test non-positive timeouts are rejected."""
        with pytest.raises(ConfigError):
            Config(
                username="a", password="b", server_id=1, webhook_url="https://x", timeout=0
            ).validate()

    def test_password_hidden_from_repr(self) -> None:
        """Test the password does not appear in repr."""
        config = Config(username="a", password="hunter2", server_id=1, webhook_url="https://x")
        assert "hunter2" not in repr(config)
