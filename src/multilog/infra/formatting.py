from __future__ import annotations

"""
Line Formatting Primitive.

Renders a fully built log line with optional prefix, timestamp and caller
location, and writes it to an arbitrary text sink. Built on the standard
`logging` machinery: every LineWriter owns a private, non-propagating
Logger with a single StreamHandler, so caller resolution comes from
`findCaller` and the handler lock serializes physical writes.
"""

import enum
import itertools
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Optional, TextIO


class LineFlag(enum.IntFlag):
    """Metadata prefixed to every line."""
    NONE = 0
    DATE = 0x1            # 2009/01/23
    TIME = 0x2            # 01:23:23
    MICROSECONDS = 0x4    # 01:23:23.123123, implies TIME
    LONGFILE = 0x8        # /a/b/c/d.py:23
    SHORTFILE = 0x10      # d.py:23, overrides LONGFILE
    UTC = 0x20            # render date and time in UTC
    MSGPREFIX = 0x40      # move the prefix after the header
    STD_FLAGS = DATE | TIME


_FLAG_NAMES: Dict[str, LineFlag] = {
    "date": LineFlag.DATE,
    "time": LineFlag.TIME,
    "microseconds": LineFlag.MICROSECONDS,
    "longfile": LineFlag.LONGFILE,
    "shortfile": LineFlag.SHORTFILE,
    "utc": LineFlag.UTC,
    "msgprefix": LineFlag.MSGPREFIX,
    "std": LineFlag.STD_FLAGS,
    "none": LineFlag.NONE,
}

# LineWriter.output itself, as counted by findCaller
_OWN_FRAMES: int = 1

_sink_ids = itertools.count(1)


def parse_flags(spec: str) -> LineFlag:
    """
    Parse a comma-separated list of flag names ("date,time,shortfile").

    Args:
        spec: Flag names, case-insensitive. Empty means no metadata.

    Returns:
        LineFlag: The combined flags.

    Raises:
        ValueError: If a name is not a known flag.
    """
    flags = LineFlag.NONE
    for raw in spec.split(","):
        name = raw.strip().lower()
        if not name:
            continue
        if name not in _FLAG_NAMES:
            raise ValueError(f"Unknown line flag: {raw.strip()!r}")
        flags |= _FLAG_NAMES[name]
    return flags


# -----------------------------------------------------------------------------
# FORMATTER
# -----------------------------------------------------------------------------

class LineFormatter(logging.Formatter):
    """Render `<prefix><date> <time> <file>:<line>: <message>` from a record."""

    def __init__(self, prefix: str = "", flags: LineFlag = LineFlag.STD_FLAGS) -> None:
        super().__init__()
        self.prefix = prefix
        self.flags = LineFlag(flags)

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.endswith("\n"):
            message = message[:-1]

        header = self._header(record)
        if self.flags & LineFlag.MSGPREFIX:
            return header + self.prefix + message
        return self.prefix + header + message

    def _header(self, record: logging.LogRecord) -> str:
        flags = self.flags
        parts = []

        if flags & (LineFlag.DATE | LineFlag.TIME | LineFlag.MICROSECONDS):
            if flags & LineFlag.UTC:
                stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
            else:
                stamp = datetime.fromtimestamp(record.created)
            if flags & LineFlag.DATE:
                parts.append(stamp.strftime("%Y/%m/%d "))
            if flags & (LineFlag.TIME | LineFlag.MICROSECONDS):
                clock = stamp.strftime("%H:%M:%S")
                if flags & LineFlag.MICROSECONDS:
                    clock += f".{stamp.microsecond:06d}"
                parts.append(clock + " ")

        if flags & (LineFlag.SHORTFILE | LineFlag.LONGFILE):
            path = record.pathname
            if flags & LineFlag.SHORTFILE:
                path = os.path.basename(path)
            parts.append(f"{path}:{record.lineno}: ")

        return "".join(parts)


# -----------------------------------------------------------------------------
# WRITER
# -----------------------------------------------------------------------------

class LineWriter:
    """
    Caller-location-aware line sink over an arbitrary text stream.

    Args:
        out: Any object with `write` (and optionally `flush`).
        prefix: Text placed before every line (or after the header with
            MSGPREFIX).
        flags: Metadata to render.
    """

    def __init__(
            self,
            out: TextIO,
            prefix: str = "",
            flags: LineFlag = LineFlag.STD_FLAGS,
    ) -> None:
        self._formatter = LineFormatter(prefix, flags)
        self._handler = logging.StreamHandler(out)
        self._handler.setFormatter(self._formatter)

        # Constructed directly so it stays out of the global logger tree
        self._logger = logging.Logger(f"multilog.sink.{next(_sink_ids)}", logging.DEBUG)
        self._logger.propagate = False
        self._logger.addHandler(self._handler)

    @property
    def prefix(self) -> str:
        return self._formatter.prefix

    @property
    def flags(self) -> LineFlag:
        return self._formatter.flags

    @property
    def stream(self) -> TextIO:
        return self._handler.stream

    def set_prefix(self, prefix: str) -> None:
        self._formatter.prefix = prefix

    def set_flags(self, flags: LineFlag) -> None:
        self._formatter.flags = LineFlag(flags)

    def set_output(self, out: TextIO) -> Optional[TextIO]:
        """Swap the underlying stream, returning the previous one."""
        previous = self._handler.stream
        if getattr(previous, "closed", False):
            # setStream would flush the closed stream and fail
            self._handler.acquire()
            try:
                self._handler.stream = out
            finally:
                self._handler.release()
            return previous
        return self._handler.setStream(out)

    def output(self, calldepth: int, line: str, level: int = logging.INFO) -> None:
        """
        Write one line.

        Args:
            calldepth: Frames to skip when resolving the caller location;
                1 reports the caller of `output` itself.
            line: Fully rendered message body.
            level: Standard logging level stamped on the record.
        """
        # Bypass Logger.log so logging.disable() and logger levels never filter
        fn, lno, func, sinfo = self._logger.findCaller(False, calldepth + _OWN_FRAMES)
        record = self._logger.makeRecord(
            self._logger.name, level, fn, lno, line, None, None, func, None, sinfo
        )
        self._handler.handle(record)
