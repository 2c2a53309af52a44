"""One polling pass: fetch, diff against the snapshot, announce, persist."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ts3notify.api.query.client import QueryClient
from ts3notify.api.webhook import WebhookClient
from ts3notify.core.config import Config
from ts3notify.core.notifier import EventKind, Notifier
from ts3notify.core.reconciler import reconcile
from ts3notify.core.roster import fetch_roster
from ts3notify.core.snapshot import load_snapshot, save_snapshot, snapshot_exists
from ts3notify.models.client import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    """What a pass did.

    Attributes:
        first_run: True if no snapshot existed and the roster was only stored.
        roster: Roster written to the snapshot.
        joined: Text announced for joins ("" if none).
        left: Text announced for leaves ("" if none).
    """

    first_run: bool = False
    roster: list[Client] = field(default_factory=list)
    joined: str = ""
    left: str = ""


class RosterWatcher:
    """Apply a fetched roster to the snapshot file, announcing changes.

    Example:
        watcher = RosterWatcher(Path("clients.json"), Notifier(None, debug=True))
        result = watcher.process(roster)
    """

    def __init__(self, snapshot_path: Path, notifier: Notifier) -> None:
        self.snapshot_path = snapshot_path
        self.notifier = notifier

    def process(self, roster: list[Client]) -> RunResult:
        """Reconcile the roster with the snapshot and persist the result.

        The snapshot is only written after every announcement succeeded.

        Args:
            roster: Freshly fetched roster.

        Returns:
            RunResult describing the pass.

        Raises:
            SnapshotError: If the snapshot cannot be read or written.
            WebhookError: If an announcement cannot be delivered.
        """
        if not snapshot_exists(self.snapshot_path):
            logger.info("No snapshot at %s, storing %d clients", self.snapshot_path, len(roster))
            save_snapshot(self.snapshot_path, roster)
            return RunResult(first_run=True, roster=list(roster))

        previous = load_snapshot(self.snapshot_path)
        result = reconcile(previous, roster)

        joined = left = ""
        if result.has_events:
            joined = self.notifier.notify(result.joins, EventKind.JOIN)
            left = self.notifier.notify(result.leaves, EventKind.LEAVE)
        else:
            logger.info("No joins or leaves since the last run")

        save_snapshot(self.snapshot_path, result.roster)
        return RunResult(roster=result.roster, joined=joined, left=left)


async def fetch_current_roster(config: Config) -> list[Client]:
    """Log in to ServerQuery and fetch the roster of the configured server.

    Raises:
        QueryConnectionError: If the server cannot be reached.
        QueryError: If login, server selection or a query fails.
        RosterError: If the server data is malformed.
    """
    async with QueryClient(config.host, config.port, timeout=config.timeout) as query:
        await query.login(config.username, config.password)
        await query.use(config.server_id)
        roster = await fetch_roster(query)
        await query.quit()
    return roster


async def run(config: Config) -> RunResult:
    """Run one full pass with the given configuration."""
    transport = None if config.debug else WebhookClient(config.webhook_url, timeout=config.timeout)
    watcher = RosterWatcher(config.output, Notifier(transport, debug=config.debug))

    roster = await fetch_current_roster(config)
    return watcher.process(roster)
