"""Test fixtures for ts3notify tests."""

from collections.abc import Callable

import pytest

from ts3notify.models.client import Client

GREETING = [
    b"TS3\n\r",
    b"Welcome to the TeamSpeak 3 ServerQuery interface, type \"help\" for a list of "
    b"commands and \"help <command>\" for information on a specific command.\n\r",
]
OK = b"error id=0 msg=ok\n\r"


class MockStreamReader:
    """Mock asyncio StreamReader for testing."""

    def __init__(self, responses: list[bytes]) -> None:
        self._responses = responses
        self._index = 0
        self._buffer = b""

    async def readline(self) -> bytes:
        """Read a line from mock data."""
        while b"\n" not in self._buffer:
            if self._index >= len(self._responses):
                # EOF: return what is left, like StreamReader
                line, self._buffer = self._buffer, b""
                return line
            self._buffer += self._responses[self._index]
            self._index += 1

        line, self._buffer = self._buffer.split(b"\n", 1)
        return line + b"\n"


class MockStreamWriter:
    """Mock asyncio StreamWriter for testing."""

    def __init__(self) -> None:
        self.data: list[bytes] = []
        self._closed = False

    def write(self, data: bytes) -> None:
        """Record written data."""
        self.data.append(data)

    async def drain(self) -> None:
        """Mock drain."""

    def close(self) -> None:
        """Mark as closed."""
        self._closed = True

    async def wait_closed(self) -> None:
        """Mock wait_closed."""

    def is_closing(self) -> bool:
        """Check if closing."""
        return self._closed

    @property
    def commands(self) -> list[str]:
        """Return the commands sent, without terminators."""
        return [chunk.decode().rstrip("\n") for chunk in self.data]


@pytest.fixture
def mock_connection() -> Callable[[list[bytes]], tuple[MockStreamReader, MockStreamWriter]]:
    """Create mock reader/writer pairs, greeting included."""

    def _mock_connection(responses: list[bytes]) -> tuple[MockStreamReader, MockStreamWriter]:
        reader = MockStreamReader([*GREETING, *responses])
        writer = MockStreamWriter()
        return reader, writer

    return _mock_connection


class FakeRosterSource:
    """In-memory stand-in for QueryClient.list_clients/get_channel_name."""

    def __init__(
        self,
        records: list[dict[str, str]],
        channels: dict[int, str | None],
    ) -> None:
        self.records = records
        self.channels = channels
        self.channel_lookups: list[int] = []

    async def list_clients(self) -> list[dict[str, str]]:
        return list(self.records)

    async def get_channel_name(self, channel_id: int) -> str | None:
        self.channel_lookups.append(channel_id)
        return self.channels[channel_id]


class RecordingTransport:
    """Transport that records every message sent."""

    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[str] = []
        self._error = error

    def send(self, text: str) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append(text)


@pytest.fixture
def lobby_roster() -> list[Client]:
    """Return a small freshly fetched roster."""
    return [
        Client(client_id=1, channel_id=10, name="alice", channel_name="Lobby"),
        Client(client_id=2, channel_id=10, name="bob", channel_name="Lobby"),
        Client(client_id=3, channel_id=20, name="carol", channel_name="Games"),
    ]
