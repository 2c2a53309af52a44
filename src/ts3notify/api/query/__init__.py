"""TeamSpeak 3 ServerQuery client and protocol helpers."""

from ts3notify.api.query.client import QueryClient, QueryConnectionError
from ts3notify.api.query.protocol import (
    QueryError,
    escape,
    format_command,
    parse_records,
    unescape,
)

__all__ = [
    "QueryClient",
    "QueryConnectionError",
    "QueryError",
    "escape",
    "format_command",
    "parse_records",
    "unescape",
]
