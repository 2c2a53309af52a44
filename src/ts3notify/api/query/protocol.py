"""TeamSpeak 3 ServerQuery protocol parsing utilities.

ServerQuery is a line-based text protocol:
- The server greets with "TS3" followed by a welcome line
- Server lines end with "\\n\\r", commands are sent terminated by "\\n"
- Responses are zero or more data lines, then "error id=<n> msg=<text>"
- A data line holds records separated by "|", a record holds "key=value"
  tokens separated by spaces
- Lines starting with "notify" are server events, not command responses

Reference: TeamSpeak 3 Server Query Manual
"""

import re

# Characters that must be escaped inside keys and values
_ESCAPE_MAP: dict[str, str] = {
    "\\": "\\\\",
    "/": "\\/",
    " ": "\\s",
    "|": "\\p",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}

_UNESCAPE_MAP: dict[str, str] = {escaped[1]: char for char, escaped in _ESCAPE_MAP.items()}

_ESCAPE_SEQUENCE = re.compile(r"\\(.)", re.DOTALL)

ERROR_PREFIX = "error "
NOTIFY_PREFIX = "notify"
GREETING = "TS3"

# Error id reported on success
ERROR_OK = 0


class QueryError(Exception):
    """ServerQuery command returned a non-zero error id."""

    def __init__(self, code: int, command: str, message: str) -> None:
        self.code = code
        self.command = command
        self.message = message
        super().__init__(f"ServerQuery error {code} in {command}: {message}")


def escape(value: str) -> str:
    """Escape a string for use in a ServerQuery command.

    Args:
        value: Raw string.

    Returns:
        String with spaces, pipes, slashes and control characters escaped.
    """
    return "".join(_ESCAPE_MAP.get(char, char) for char in value)


def unescape(value: str) -> str:
    """Reverse ServerQuery escaping.

    Unknown escape sequences resolve to the escaped character itself.

    Args:
        value: Escaped string as sent by the server.

    Returns:
        Plain string.
    """
    return _ESCAPE_SEQUENCE.sub(lambda m: _UNESCAPE_MAP.get(m.group(1), m.group(1)), value)


def parse_record(text: str) -> dict[str, str]:
    """Parse one record ("key=value key2=value2 flag") into a dict.

    Tokens without "=" are flags and map to an empty string.
    """
    record: dict[str, str] = {}
    for token in text.split(" "):
        if not token:
            continue
        key, _, value = token.partition("=")
        record[key] = unescape(value)
    return record


def parse_error_line(line: str) -> tuple[int, str]:
    """Parse the status line closing every response.

    Args:
        line: A line starting with "error ".

    Returns:
        Tuple of (error id, message).

    Raises:
        ValueError: If the line is not a well-formed error line.
    """
    if not line.startswith(ERROR_PREFIX):
        raise ValueError(f"Not a ServerQuery status line: {line!r}")
    fields = parse_record(line[len(ERROR_PREFIX) :])
    if "id" not in fields:
        raise ValueError(f"Status line without error id: {line!r}")
    return int(fields["id"]), fields.get("msg", "")


def is_data_line(line: str) -> bool:
    """Return True if the line carries response data."""
    return bool(line) and not line.startswith((ERROR_PREFIX, NOTIFY_PREFIX))


def check_response(lines: list[str], command: str) -> None:
    """Raise QueryError if the response status is not ok.

    Args:
        lines: Response lines including the final status line.
        command: Command name, used in the error.

    Raises:
        QueryError: If the status line reports an error or is missing.
    """
    for line in lines:
        if line.startswith(ERROR_PREFIX):
            try:
                code, message = parse_error_line(line)
            except ValueError as e:
                raise QueryError(-1, command, str(e)) from e
            if code != ERROR_OK:
                raise QueryError(code, command, message)
            return
    raise QueryError(-1, command, "Response without status line")


def parse_records(lines: list[str]) -> list[dict[str, str]]:
    """Parse response data lines into a list of records.

    Args:
        lines: Response lines. Status and notify lines are skipped.

    Returns:
        One dict per "|"-separated record, values unescaped.
    """
    records: list[dict[str, str]] = []
    for line in lines:
        if not is_data_line(line):
            continue
        for chunk in line.split("|"):
            record = parse_record(chunk)
            if record:
                records.append(record)
    return records


def format_command(command: str, *flags: str, **params: object) -> str:
    """Format a ServerQuery command.

    Args:
        command: Command name, e.g. "clientlist".
        *flags: Option flags such as "-uid" (sent as-is).
        **params: Parameters, values are converted to str and escaped.

    Returns:
        Formatted command string (without newline).

    Example:
        >>> format_command("channelinfo", cid=5)
        'channelinfo cid=5'
    """
    parts = [command]
    parts.extend(f"{key}={escape(str(value))}" for key, value in params.items())
    parts.extend(flags)
    return " ".join(parts)
