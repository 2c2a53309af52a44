"""Async TeamSpeak 3 ServerQuery client.

Only the commands needed to observe who is connected are implemented.

Example:
    async with QueryClient("localhost") as query:
        await query.login("serveradmin", "secret")
        await query.use(1)
        for record in await query.list_clients():
            print(record["client_nickname"])
"""

import asyncio
import logging
from typing import Self

from ts3notify.api.query.protocol import (
    GREETING,
    check_response,
    format_command,
    parse_records,
)

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 10011
CONNECT_TIMEOUT = 5.0
COMMAND_TIMEOUT = 10.0

# StreamReader line limit (default is 64 KiB)
STREAM_LIMIT = 16 * 1024 * 1024

# client_type of a regular voice client; 1 is a ServerQuery connection
CLIENT_TYPE_VOICE = "0"

# Parameters never written to the debug log
_SECRET_PARAMS = frozenset({"client_login_password"})


class QueryConnectionError(Exception):
    """Failed to connect to or talk with the ServerQuery interface."""


class QueryClient:
    """Async ServerQuery client.

    Attributes:
        host: TeamSpeak server hostname or IP.
        port: ServerQuery port (default 10011).
        timeout: Per-command timeout in seconds.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = COMMAND_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            host: TeamSpeak server hostname or IP.
            port: ServerQuery port.
            timeout: Per-command timeout in seconds.
        """
        self.host = host
        self.port = port
        self.timeout = timeout

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Return True if connected to the ServerQuery interface."""
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        """Connect and consume the greeting.

        Raises:
            QueryConnectionError: If the connection fails or the greeting is invalid.
        """
        try:
            # clientlist returns every client on one line, so allow long lines
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, limit=STREAM_LIMIT),
                timeout=CONNECT_TIMEOUT,
            )
        except TimeoutError as e:
            raise QueryConnectionError(f"Connection to {self.host}:{self.port} timed out") from e
        except OSError as e:
            raise QueryConnectionError(f"Failed to connect to {self.host}:{self.port}: {e}") from e

        try:
            await asyncio.wait_for(self._read_greeting(), timeout=self.timeout)
        except TimeoutError as e:
            await self.disconnect()
            raise QueryConnectionError(
                f"No ServerQuery greeting from {self.host}:{self.port} (timed out)"
            ) from e
        except QueryConnectionError:
            await self.disconnect()
            raise
        except OSError as e:
            await self.disconnect()
            raise QueryConnectionError(f"Failed to connect to {self.host}:{self.port}: {e}") from e

        logger.info("Connected to ServerQuery at %s:%d", self.host, self.port)

    async def _read_greeting(self) -> None:
        """Consume the "TS3" line and the welcome banner."""
        greeting = await self._read_line()
        if greeting != GREETING:
            raise QueryConnectionError(f"Invalid ServerQuery greeting: {greeting}")
        await self._read_line()

    async def disconnect(self) -> None:
        """Close the connection."""
        if self._writer:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except (OSError, TimeoutError, asyncio.CancelledError) as e:
                logger.debug("Expected error during ServerQuery disconnect: %s", e)
            finally:
                self._writer = None
                self._reader = None
                logger.info("Disconnected from ServerQuery")

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        """Async context manager exit."""
        await self.disconnect()

    async def _read_line(self) -> str:
        """Read a single line, stripping the "\\n\\r" terminator."""
        if not self._reader:
            raise QueryConnectionError("Not connected")
        try:
            line = await self._reader.readline()
        except ValueError as e:
            # readline reports a line over STREAM_LIMIT as ValueError
            raise QueryConnectionError(f"ServerQuery response line too long: {e}") from e
        if not line:
            raise QueryConnectionError("Connection closed by server")
        return line.decode("utf-8", errors="replace").strip("\r\n")

    async def _read_until_status(self) -> list[str]:
        """Read response lines up to and including the "error" status line."""
        lines: list[str] = []
        while True:
            line = await self._read_line()
            lines.append(line)
            if line.startswith("error "):
                break
        return lines

    async def _command(self, cmd: str, *flags: str, **params: object) -> list[str]:
        """Send a command and read its response.

        Args:
            cmd: Command name.
            *flags: Option flags.
            **params: Command parameters.

        Returns:
            Response lines including the status line.

        Raises:
            QueryConnectionError: If not connected or the command times out.
            QueryError: If the server reports an error.
        """
        async with self._lock:
            if not self.is_connected:
                raise QueryConnectionError("Not connected")
            assert self._writer is not None

            command_str = format_command(cmd, *flags, **params)
            logger.debug(
                "ServerQuery command: %s",
                format_command(
                    cmd,
                    *flags,
                    **{k: "***" if k in _SECRET_PARAMS else v for k, v in params.items()},
                ),
            )

            self._writer.write(f"{command_str}\n".encode())
            await self._writer.drain()

            try:
                lines = await asyncio.wait_for(self._read_until_status(), timeout=self.timeout)
            except TimeoutError as e:
                raise QueryConnectionError(f"ServerQuery command {cmd} timed out") from e

            check_response(lines, cmd)
            return lines

    # -------------------------------------------------------------------------
    # Session Commands
    # -------------------------------------------------------------------------

    async def login(self, username: str, password: str) -> None:
        """Authenticate with ServerQuery credentials."""
        await self._command(
            "login",
            client_login_name=username,
            client_login_password=password,
        )

    async def use(self, server_id: int) -> None:
        """Select the virtual server by id."""
        await self._command("use", sid=server_id)

    async def quit(self) -> None:
        """Politely end the session. The server closes the socket afterwards."""
        await self._command("quit")

    # -------------------------------------------------------------------------
    # Query Commands
    # -------------------------------------------------------------------------

    async def clientlist(self) -> list[dict[str, str]]:
        """Return every connection on the virtual server, query clients included."""
        lines = await self._command("clientlist")
        return parse_records(lines)

    async def channelinfo(self, channel_id: int) -> dict[str, str]:
        """Return the properties of a channel.

        Raises:
            QueryError: If the channel does not exist.
        """
        lines = await self._command("channelinfo", cid=channel_id)
        records = parse_records(lines)
        return records[0] if records else {}

    async def list_clients(self) -> list[dict[str, str]]:
        """Return clientlist records of real voice clients only."""
        return [r for r in await self.clientlist() if r.get("client_type") == CLIENT_TYPE_VOICE]

    async def get_channel_name(self, channel_id: int) -> str | None:
        """Return the channel's display name, or None if the server omitted it."""
        info = await self.channelinfo(channel_id)
        return info.get("channel_name")
