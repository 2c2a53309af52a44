"""Render join/leave announcements and deliver them."""

import logging
import sys
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from ts3notify.models.client import Client

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kind of roster transition, with its message phrase."""

    JOIN = " connected to "
    LEAVE = " disconnected from "

    @property
    def phrase(self) -> str:
        """Return the text placed between names and channel."""
        return self.value


class Transport(Protocol):
    """Anything that can deliver a message, e.g. WebhookClient."""

    def send(self, text: str) -> None: ...


def group_by_channel(clients: list[Client]) -> dict[str, list[str]]:
    """Group client names by channel name, in order of first appearance."""
    channels: dict[str, list[str]] = {}
    for client in clients:
        channels.setdefault(client.channel_name, []).append(client.name)
    return channels


def join_names(names: list[str]) -> str:
    """Join names as "A", "A and B" or "A, B and C"."""
    if len(names) < 2:  # noqa: PLR2004
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"


def render(clients: list[Client], kind: EventKind) -> str:
    """Render one line per channel.

    Example:
        "alice and bob connected to Lobby\\n"

    Args:
        clients: Clients taking part in the event.
        kind: Join or leave.

    Returns:
        Newline-terminated lines, or "" when there are no clients.
    """
    return "".join(
        f"{join_names(names)}{kind.phrase}{channel}\n"
        for channel, names in group_by_channel(clients).items()
    )


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


class Notifier:
    """Deliver rendered announcements to a transport or, in debug mode, a local sink.

    Attributes:
        debug: When True, messages go to the sink and the transport is never used.
    """

    def __init__(
        self,
        transport: Transport | None,
        debug: bool = False,
        sink: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            transport: Message transport; may be None only in debug mode.
            debug: Route messages to the sink instead of the transport.
            sink: Debug output, standard output by default.
        """
        if transport is None and not debug:
            raise ValueError("A transport is required unless debug is enabled")
        self._transport = transport
        self.debug = debug
        self._sink = sink or _write_stdout

    def notify(self, clients: list[Client], kind: EventKind) -> str:
        """Render and deliver an announcement.

        Args:
            clients: Clients taking part in the event.
            kind: Join or leave.

        Returns:
            The delivered text ("" if nothing was sent).

        Raises:
            WebhookError: If the transport fails.
        """
        text = render(clients, kind)
        if not text:
            return ""

        logger.info("Announcing %d %s event(s)", len(clients), kind.name.lower())
        if self.debug or self._transport is None:
            self._sink(text)
        else:
            self._transport.send(text)
        return text
