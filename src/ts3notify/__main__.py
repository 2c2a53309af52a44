"""Main entry point for ts3notify."""

import asyncio
import logging
import sys
from collections.abc import Sequence

from ts3notify.api.query import QueryConnectionError, QueryError
from ts3notify.api.webhook import WebhookError
from ts3notify.core.config import ConfigError, config_from_args
from ts3notify.core.roster import RosterError
from ts3notify.core.snapshot import SnapshotError
from ts3notify.core.watcher import run

logger = logging.getLogger("ts3notify")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def main(argv: Sequence[str] | None = None) -> int:
    """Run a single polling pass.

    Returns:
        Exit code (0 for success).
    """
    try:
        config = config_from_args(argv)
    except ConfigError as e:
        print(f"ts3notify: {e}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        result = asyncio.run(run(config))
    except (QueryConnectionError, QueryError, RosterError, SnapshotError, WebhookError) as e:
        logger.error("Run failed: %s", e)
        return EXIT_FAILURE

    if result.first_run:
        logger.info("First run, stored %d clients to %s", len(result.roster), config.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
