"""
Append-only audit log.

Every document store operation records its outcome here as one
human-readable line:

    [ERROR: ]<message> | <timestamp-ms>

The file starts with a header line that is not an entry. Line breaks and
backslashes inside a message are escaped so that every entry stays on
exactly one line.
"""

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import List, Optional

from docstore.storage import Storage, storage

logger = logging.getLogger(__name__)

ERROR_PREFIX = "ERROR: "

_ENTRY_RE = re.compile(r"^(?P<error>ERROR: )?(?P<message>.*) \| (?P<timestamp>\d+)$")

# Every character str.splitlines() treats as a line boundary
_LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"
_SHORT_ESCAPES = {"\n": "n", "\r": "r"}
_ESCAPE_RE = re.compile(r"\\(\\|n|r|u[0-9a-f]{4})")


@dataclass(frozen=True)
class LogEntry:
    """A single audit log record."""

    message: str
    is_error: bool
    timestamp: int


def now_ms() -> int:
    """Current wall clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


def escape_message(message: str) -> str:
    """
    Make a message safe for a single log line.

    Backslashes are doubled first. Newline and carriage return then become
    backslash-n and backslash-r, and any other character that splitlines()
    breaks on becomes a backslash-u escape with four hex digits.
    """
    escaped = []
    for char in message.replace("\\", "\\\\"):
        if char in _SHORT_ESCAPES:
            escaped.append("\\" + _SHORT_ESCAPES[char])
        elif char in _LINE_BREAKS:
            escaped.append(f"\\u{ord(char):04x}")
        else:
            escaped.append(char)
    return "".join(escaped)


def unescape_message(text: str) -> str:
    """Inverse of escape_message."""
    def replace(match: re.Match) -> str:
        code = match.group(1)
        if code == "\\":
            return "\\"
        if code == "n":
            return "\n"
        if code == "r":
            return "\r"
        return chr(int(code[1:], 16))

    return _ESCAPE_RE.sub(replace, text)


def render_entry(entry: LogEntry) -> str:
    """Render an entry as one log line, newline-terminated."""
    prefix = ERROR_PREFIX if entry.is_error else ""
    return f"{prefix}{escape_message(entry.message)} | {entry.timestamp}\n"


def parse_entry(line: str) -> Optional[LogEntry]:
    """Parse a log line back into an entry. Returns None for non-entry lines."""
    match = _ENTRY_RE.match(line.rstrip("\r\n"))
    if not match:
        return None
    return LogEntry(
        message=unescape_message(match.group("message")),
        is_error=match.group("error") is not None,
        timestamp=int(match.group("timestamp")),
    )


class AuditLog:
    """
    Audit log writer bound to a storage handle.

    Appends within one process are serialized so that entry timestamps are
    non-decreasing in file order. Write failures propagate to the caller.
    """

    def __init__(self, storage: Storage):
        self.storage = storage
        self._lock = asyncio.Lock()
        self._last_timestamp = 0

    async def append(self, message: str, is_error: bool = False) -> LogEntry:
        """
        Durably append one entry.

        Args:
            message: Human-readable description of the outcome
            is_error: Whether the outcome was a failure

        Returns:
            The entry that was written
        """
        async with self._lock:
            timestamp = max(now_ms(), self._last_timestamp)
            entry = LogEntry(message=message, is_error=is_error, timestamp=timestamp)
            await self.storage.append_log(render_entry(entry))
            self._last_timestamp = timestamp

        if is_error:
            logger.error(message)
        else:
            logger.info(message)

        return entry

    async def entries(self) -> List[LogEntry]:
        """Read all entries back in append order, skipping the header."""
        text = await self.storage.read_log()
        entries = []
        for line in text.split("\n"):
            entry = parse_entry(line)
            if entry is not None:
                entries.append(entry)
        return entries

    async def reset(self) -> None:
        """Truncate the log to its header line."""
        async with self._lock:
            await self.storage.truncate_log()
        logger.warning("Audit log reset")


# Global audit log instance
audit_log = AuditLog(storage)
