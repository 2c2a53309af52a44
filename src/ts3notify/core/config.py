"""Run configuration, built from command-line flags and environment variables."""

import argparse
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ts3notify.api.query.client import COMMAND_TIMEOUT, DEFAULT_HOST, DEFAULT_PORT
from ts3notify.core.snapshot import DEFAULT_SNAPSHOT_PATH


# Environment fallbacks, so credentials need not appear in the process list
ENV_USERNAME = "TS3NOTIFY_USERNAME"
ENV_PASSWORD = "TS3NOTIFY_PASSWORD"
ENV_WEBHOOK_URL = "TS3NOTIFY_WEBHOOK_URL"


class ConfigError(Exception):
    """Required option missing or invalid."""


@dataclass(frozen=True)
class Config:
    """Settings for a single run.

    Attributes:
        username: ServerQuery login name.
        password: ServerQuery password.
        server_id: Virtual server id to select.
        webhook_url: Incoming webhook receiving notifications.
        output: Snapshot file path.
        debug: Print notifications instead of posting them.
        host: ServerQuery host.
        port: ServerQuery port.
        timeout: Network timeout in seconds.
        verbose: Enable debug logging.
    """

    username: str
    password: str = field(repr=False)
    server_id: int | None
    webhook_url: str
    output: Path = DEFAULT_SNAPSHOT_PATH
    debug: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = COMMAND_TIMEOUT
    verbose: bool = False

    def validate(self) -> None:
        """Check required options.

        Raises:
            ConfigError: Naming every missing or invalid option.
        """
        problems: list[str] = []
        if not self.username:
            problems.append("username (-u)")
        if not self.password:
            problems.append("password (-p)")
        if self.server_id is None or self.server_id < 1:
            problems.append("server id (-id)")
        if not self.webhook_url:
            problems.append("webhook URL (-url)")
        if problems:
            raise ConfigError(f"Not enough options: {', '.join(problems)}")
        if not 1 <= self.port <= 65535:  # noqa: PLR2004
            raise ConfigError(f"Invalid port: {self.port}")
        if self.timeout <= 0:
            raise ConfigError(f"Invalid timeout: {self.timeout}")


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="ts3notify",
        description="Announce TeamSpeak 3 joins and leaves to a chat webhook",
    )
    parser.add_argument("-u", "--username", default=None, help="ServerQuery username")
    parser.add_argument("-p", "--password", default=None, help="ServerQuery password")
    parser.add_argument(
        "-id", "--server-id", dest="server_id", type=int, default=None, help="virtual server id",
    )
    parser.add_argument(
        "-url", "--webhook-url", dest="webhook_url", default=None, help="incoming webhook URL",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=DEFAULT_SNAPSHOT_PATH,
        help=f"snapshot file (default: {DEFAULT_SNAPSHOT_PATH})",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="print notifications instead of posting them",
    )
    parser.add_argument(
        "--host", default=DEFAULT_HOST, help=f"ServerQuery host (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help=f"ServerQuery port (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--timeout", type=float, default=COMMAND_TIMEOUT,
        help=f"network timeout in seconds (default: {COMMAND_TIMEOUT:g})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def config_from_args(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build a validated Config from command-line arguments.

    Flags win over environment variables.

    Args:
        argv: Arguments without the program name (sys.argv[1:] if None).
        environ: Environment (os.environ if None).

    Returns:
        Validated Config.

    Raises:
        ConfigError: If a required option is missing.
    """
    env = os.environ if environ is None else environ
    parsed = build_parser().parse_args(argv)

    config = Config(
        username=parsed.username or env.get(ENV_USERNAME, ""),
        password=parsed.password or env.get(ENV_PASSWORD, ""),
        server_id=parsed.server_id,
        webhook_url=parsed.webhook_url or env.get(ENV_WEBHOOK_URL, ""),
        output=parsed.output,
        debug=parsed.debug,
        host=parsed.host,
        port=parsed.port,
        timeout=parsed.timeout,
        verbose=parsed.verbose,
    )
    config.validate()
    return config
