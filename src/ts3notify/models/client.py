"""Client model representing one connected TeamSpeak session."""

from dataclasses import dataclass, replace
from typing import Any

# Snapshot JSON keys, kept compatible with existing clients.json files
_KEY_CLIENT_ID = "cliId"
_KEY_CHANNEL_ID = "cId"
_KEY_NAME = "name"
_KEY_CHANNEL_NAME = "channelName"
_KEY_NOTIFIED = "isNotified"


def _require_int(value: object, key: str) -> int:
    # bool is an int subclass but never a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field {key!r} must be an integer, got {value!r}")
    return value


def _require_str(value: object, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class Client:
    """A user connected to the voice server.

    Attributes:
        client_id: Session id assigned by the server (clid). Matching key across polls.
        channel_id: Id of the channel the client currently occupies (cid).
        name: Nickname at fetch time.
        channel_name: Display name of the channel, resolved per run.
        notified: True once the join of this session has been announced.
    """

    client_id: int
    channel_id: int
    name: str
    channel_name: str = ""
    notified: bool = False

    @classmethod
    def from_query(cls, record: dict[str, str]) -> "Client":
        """Create a client from a clientlist record.

        Args:
            record: Parsed record with clid, cid and client_nickname.

        Returns:
            Client with an empty channel name and notified=False.

        Raises:
            ValueError: If a field is missing or an id is not an integer.
        """
        try:
            return cls(
                client_id=int(record["clid"]),
                channel_id=int(record["cid"]),
                name=record["client_nickname"],
            )
        except KeyError as e:
            raise ValueError(f"Client record is missing {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Client":
        """Create a client from its snapshot representation.

        Raises:
            ValueError: If a key is missing or has the wrong type.
        """
        try:
            notified = data[_KEY_NOTIFIED]
            if not isinstance(notified, bool):
                raise ValueError(f"Field {_KEY_NOTIFIED!r} must be a boolean, got {notified!r}")
            return cls(
                client_id=_require_int(data[_KEY_CLIENT_ID], _KEY_CLIENT_ID),
                channel_id=_require_int(data[_KEY_CHANNEL_ID], _KEY_CHANNEL_ID),
                name=_require_str(data[_KEY_NAME], _KEY_NAME),
                channel_name=_require_str(data[_KEY_CHANNEL_NAME], _KEY_CHANNEL_NAME),
                notified=notified,
            )
        except KeyError as e:
            raise ValueError(f"Snapshot entry is missing {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            _KEY_CLIENT_ID: self.client_id,
            _KEY_CHANNEL_ID: self.channel_id,
            _KEY_NAME: self.name,
            _KEY_CHANNEL_NAME: self.channel_name,
            _KEY_NOTIFIED: self.notified,
        }

    def with_channel_name(self, channel_name: str) -> "Client":
        """Return a copy with the resolved channel name."""
        return replace(self, channel_name=channel_name)

    def mark_notified(self) -> "Client":
        """Return a copy flagged as announced."""
        return replace(self, notified=True)
