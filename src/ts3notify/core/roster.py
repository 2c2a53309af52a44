"""Roster fetching: connected users with their channel names."""

import logging
from typing import Protocol

from ts3notify.models.client import Client

logger = logging.getLogger(__name__)


class RosterError(Exception):
    """The server returned client or channel data that cannot be used."""


class RosterSource(Protocol):
    """The subset of QueryClient the fetcher needs."""

    async def list_clients(self) -> list[dict[str, str]]: ...

    async def get_channel_name(self, channel_id: int) -> str | None: ...


class ChannelNameCache:
    """Resolve channel ids to names, asking the server once per id.

    The cache lives for a single run; channel names may change between runs.
    """

    def __init__(self, source: RosterSource) -> None:
        self._source = source
        self._names: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._names)

    async def resolve(self, channel_id: int) -> str:
        """Return the channel name, querying the server on first use.

        Raises:
            RosterError: If the server response has no channel name.
        """
        if channel_id in self._names:
            return self._names[channel_id]

        name = await self._source.get_channel_name(channel_id)
        if name is None:
            raise RosterError(f"No channel name returned for channel {channel_id}")
        self._names[channel_id] = name
        return name


async def fetch_roster(source: RosterSource) -> list[Client]:
    """Fetch every connected voice client with its channel name.

    Args:
        source: Logged-in query client with a virtual server selected.

    Returns:
        Clients in server order, all with notified=False.

    Raises:
        RosterError: If a client record is malformed.
        QueryError: If a channel lookup fails.
    """
    records = await source.list_clients()

    clients: list[Client] = []
    for record in records:
        try:
            clients.append(Client.from_query(record))
        except ValueError as e:
            raise RosterError(f"Malformed client record {record}: {e}") from e

    channels = ChannelNameCache(source)
    roster = [c.with_channel_name(await channels.resolve(c.channel_id)) for c in clients]

    logger.info("Fetched %d clients in %d channels", len(roster), len(channels))
    return roster
