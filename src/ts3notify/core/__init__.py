"""Core logic layer.

Classes:
    Config: Run configuration.
    Notifier: Renders and delivers announcements.
    Reconciliation: Result of comparing two rosters.
    RosterWatcher: Applies a fetched roster to the snapshot file.
"""

from ts3notify.core.config import Config, ConfigError, config_from_args
from ts3notify.core.notifier import EventKind, Notifier, render
from ts3notify.core.reconciler import Reconciliation, reconcile
from ts3notify.core.roster import RosterError, fetch_roster
from ts3notify.core.snapshot import SnapshotError, load_snapshot, save_snapshot
from ts3notify.core.watcher import RosterWatcher, RunResult, run

__all__ = [
    "Config",
    "ConfigError",
    "EventKind",
    "Notifier",
    "Reconciliation",
    "RosterError",
    "RosterWatcher",
    "RunResult",
    "SnapshotError",
    "config_from_args",
    "fetch_roster",
    "load_snapshot",
    "reconcile",
    "render",
    "run",
    "save_snapshot",
]
