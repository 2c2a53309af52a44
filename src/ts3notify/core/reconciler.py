"""Reconcile a freshly fetched roster against the previous snapshot.

The notified flag gives at-most-once announcements across runs:

- A client seen for the first time is recorded silently. Its join is
  announced on the next run that still finds it connected.
- A known, not yet announced client is announced as a join.
- An announced client that moved to another channel is announced as a join
  again ("connected to <new channel>").
- An announced client that is gone is announced as a leave. Clients that were
  never announced disappear silently.
"""

import logging
from dataclasses import dataclass, field, replace

from ts3notify.models.client import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Reconciliation:
    """Outcome of comparing two rosters.

    Attributes:
        roster: The new roster with notified flags set to their value for this run.
        joins: Clients to announce as connected (entries of roster).
        leaves: Clients to announce as disconnected (entries of the old roster).
    """

    roster: list[Client] = field(default_factory=list)
    joins: list[Client] = field(default_factory=list)
    leaves: list[Client] = field(default_factory=list)

    @property
    def has_events(self) -> bool:
        """Return True if anything needs to be announced."""
        return bool(self.joins or self.leaves)


def reconcile(old: list[Client], new: list[Client]) -> Reconciliation:
    """Compare rosters and decide which transitions to announce.

    Neither input is modified.

    Args:
        old: Roster persisted by the previous run.
        new: Roster fetched in this run (notified flags are ignored).

    Returns:
        Reconciliation with the annotated roster, joins and leaves.
    """
    previous = {c.client_id: c for c in old}

    roster: list[Client] = []
    joins: list[Client] = []
    for client in new:
        known = previous.get(client.client_id)
        if known is None:
            roster.append(replace(client, notified=False))
            continue

        annotated = client.mark_notified()
        if not known.notified:
            joins.append(annotated)
        elif known.channel_id != client.channel_id:
            logger.debug(
                "Client %d moved from channel %d to %d",
                client.client_id,
                known.channel_id,
                client.channel_id,
            )
            joins.append(annotated)
        roster.append(annotated)

    current_ids = {c.client_id for c in new}
    leaves = [c for c in old if c.notified and c.client_id not in current_ids]

    logger.info(
        "Reconciled %d -> %d clients: %d joins, %d leaves",
        len(old),
        len(new),
        len(joins),
        len(leaves),
    )
    return Reconciliation(roster=roster, joins=joins, leaves=leaves)
