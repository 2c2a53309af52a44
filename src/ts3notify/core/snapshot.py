"""Snapshot store: the roster persisted between runs as a JSON file."""

import json
import logging
import os
import tempfile
from pathlib import Path

from ts3notify.models.client import Client

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = Path("clients.json")


class SnapshotError(Exception):
    """Snapshot file could not be read or written."""


def snapshot_exists(path: Path) -> bool:
    """Return True if a previous run left a snapshot behind."""
    return path.exists()


def load_snapshot(path: Path) -> list[Client]:
    """Load the roster stored by the previous run.

    A JSON null document loads as an empty roster.

    Args:
        path: Snapshot file.

    Returns:
        List of clients in stored order.

    Raises:
        SnapshotError: If the file is missing, unreadable or malformed.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise SnapshotError(f"Snapshot {path} must contain a JSON array")

    clients: list[Client] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise SnapshotError(f"Snapshot {path} entry {index} is not an object")
        try:
            clients.append(Client.from_dict(item))
        except ValueError as e:
            raise SnapshotError(f"Snapshot {path} entry {index} is invalid: {e}") from e

    logger.debug("Loaded %d clients from %s", len(clients), path)
    return clients


def save_snapshot(path: Path, clients: list[Client]) -> None:
    """Replace the snapshot with the given roster.

    The data is written to a temporary file next to the target and renamed
    over it, so readers see either the old or the new snapshot.

    Args:
        path: Snapshot file.
        clients: Roster to persist.

    Raises:
        SnapshotError: If the file cannot be written.
    """
    payload = json.dumps([c.to_dict() for c in clients], ensure_ascii=False)

    tmp_name = ""
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
        raise SnapshotError(f"Cannot write snapshot {path}: {e}") from e

    logger.debug("Saved %d clients to %s", len(clients), path)
