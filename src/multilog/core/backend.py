from __future__ import annotations

"""
Rotation-Aware Logging Backend.

A Backend is one independently configured output target: a sink (an open
log file or any text stream), a cumulative level mask, a color flag and a
rotation policy. Every leveled write runs the same path:

1. Level gate, lock-free. Filtered lines cost one mask test.
2. Under the backend lock: rotation check, rename + reopen if due,
   render, write. No writer can observe a half-rotated file.

Rotation failures never escape a leveled call. They are reported on the
diagnostic channel (stderr) and the in-flight line is dropped.
"""

import logging
import os
import sys
import threading
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, TextIO

from multilog.core.rotation import RotationPolicy
from multilog.domain.constants import COLOR_RESET, FATAL_EXIT_CODE
from multilog.domain.levels import LogLevel, LogType, describe_type, string_to_level
from multilog.infra.formatting import LineFlag, LineWriter
from multilog.infra.fs import file_size, open_append

logger = logging.getLogger(__name__)

# Frames from LineWriter.output's caller (emit) up to the user call site
DEFAULT_CALLDEPTH: int = 3

_STDLIB_LEVELS = {
    LogType.FATAL: logging.CRITICAL,
    LogType.ERROR: logging.ERROR,
    LogType.WARNING: logging.WARNING,
    LogType.INFO: logging.INFO,
    LogType.DEBUG: logging.DEBUG,
}


def terminate() -> None:
    """Default fatal hook: leave the process with FATAL_EXIT_CODE."""
    raise SystemExit(FATAL_EXIT_CODE)


def _report(message: str) -> None:
    """Write a diagnostic line for failures that cannot reach the caller."""
    sys.stderr.write(f"multilog: {message}\n")


class Backend:
    """
    Leveled writer with optional file rotation.

    Args:
        out: Initial sink.
        prefix: Text placed in front of every line.
        level: Cumulative level mask.
        colored: Wrap the severity tag and message in ANSI colors.
        flags: Metadata rendered by the line formatter.
        fatal_hook: Called after a fatal-severity line. The default raises
            SystemExit(FATAL_EXIT_CODE).
        exit_on_open_error: If True, a failure to open a file in
            `set_output_by_name` invokes `fatal_hook` before the error is
            raised.
        clock: Source of the local time used for rotation decisions.
    """

    def __init__(
            self,
            out: TextIO,
            prefix: str = "",
            level: LogLevel = LogLevel.ALL,
            colored: bool = True,
            flags: LineFlag = LineFlag.STD_FLAGS,
            *,
            fatal_hook: Callable[[], None] = terminate,
            exit_on_open_error: bool = False,
            clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._writer = LineWriter(out, prefix, flags)
        self.level: LogLevel = LogLevel(level)
        self.colored: bool = colored
        self.rotation = RotationPolicy()
        self.file_name: str = ""
        self._fd: Optional[TextIO] = None
        self._lock = threading.Lock()

        self.fatal_hook = fatal_hook
        self.exit_on_open_error = exit_on_open_error
        self._clock = clock

    def __repr__(self) -> str:
        return (
            f"Backend(level={self.level!r}, colored={self.colored}, "
            f"file_name={self.file_name!r}, rotation={self.rotation!r})"
        )

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    @property
    def handle(self) -> Optional[TextIO]:
        """The owned log file handle, or None for a non-file sink."""
        return self._fd

    @property
    def flags(self) -> LineFlag:
        return self._writer.flags

    @property
    def prefix(self) -> str:
        return self._writer.prefix

    def set_level(self, level: LogLevel) -> None:
        self.level = LogLevel(level)

    def set_level_by_string(self, level: str) -> None:
        self.level = string_to_level(level)

    def set_colored(self, colored: bool) -> None:
        self.colored = bool(colored)

    def set_flags(self, flags: LineFlag) -> None:
        self._writer.set_flags(flags)

    def set_prefix(self, prefix: str) -> None:
        self._writer.set_prefix(prefix)

    def set_output(self, out: TextIO) -> None:
        """Write to `out` from now on. The backend stops being file-backed."""
        with self._lock:
            self._swap_sink(out, "", None)

    def set_output_by_name(self, path: str) -> None:
        """
        Open (or create) `path` for appending and make it the sink.

        Raises:
            OSError: If the file cannot be opened. The previous sink stays
                in place.
        """
        with self._lock:
            self._open_output(path)

    def set_rotate_by_day(self) -> None:
        with self._lock:
            self.rotation.set_daily(self._clock())

    def set_rotate_by_hour(self) -> None:
        with self._lock:
            self.rotation.set_hourly(self._clock())

    def set_rotate_by_size(self, size: int) -> None:
        with self._lock:
            self.rotation.set_size(size)

    def close(self) -> None:
        """
        Release the owned log file and silence the backend.

        Safe to call more than once. Later leveled calls are filtered.
        """
        with self._lock:
            self.level = LogLevel.NONE
            fd, self._fd = self._fd, None
            self.file_name = ""
            if fd is not None and not fd.closed:
                fd.close()

    # -------------------------------------------------------------------------
    # LEVELED WRITES
    # -------------------------------------------------------------------------

    def fatal(self, *args: Any) -> None:
        self.emit_fatal(args, None, DEFAULT_CALLDEPTH)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self.emit_fatal(args, fmt, DEFAULT_CALLDEPTH)

    def error(self, *args: Any) -> None:
        self.emit(LogType.ERROR, args, None, DEFAULT_CALLDEPTH)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.emit(LogType.ERROR, args, fmt, DEFAULT_CALLDEPTH)

    def warning(self, *args: Any) -> None:
        self.emit(LogType.WARNING, args, None, DEFAULT_CALLDEPTH)

    def warningf(self, fmt: str, *args: Any) -> None:
        self.emit(LogType.WARNING, args, fmt, DEFAULT_CALLDEPTH)

    def info(self, *args: Any) -> None:
        self.emit(LogType.INFO, args, None, DEFAULT_CALLDEPTH)

    def infof(self, fmt: str, *args: Any) -> None:
        self.emit(LogType.INFO, args, fmt, DEFAULT_CALLDEPTH)

    def debug(self, *args: Any) -> None:
        self.emit(LogType.DEBUG, args, None, DEFAULT_CALLDEPTH)

    def debugf(self, fmt: str, *args: Any) -> None:
        self.emit(LogType.DEBUG, args, fmt, DEFAULT_CALLDEPTH)

    def emit_fatal(
            self,
            args: Sequence[Any],
            fmt: Optional[str] = None,
            calldepth: int = DEFAULT_CALLDEPTH,
    ) -> None:
        """Emit a fatal line, then hand control to the fatal hook."""
        self.emit(LogType.FATAL, args, fmt, calldepth + 1)
        self.fatal_hook()

    def emit(
            self,
            log_type: LogType,
            args: Sequence[Any],
            fmt: Optional[str] = None,
            calldepth: int = DEFAULT_CALLDEPTH,
    ) -> bool:
        """
        Core write path shared by every severity.

        Args:
            log_type: Severity of the line.
            args: Message arguments. Joined with spaces when `fmt` is None,
                otherwise interpolated into `fmt` with the % operator.
            fmt: Optional format string.
            calldepth: Frames to walk up from `emit` (which counts as 1)
                to reach the call site reported as the caller location.

        Returns:
            bool: True when `log_type` is fatal. The line itself may have
            been filtered or dropped.
        """
        is_fatal = log_type == LogType.FATAL
        if not self.level.enables(log_type):
            return is_fatal

        with self._lock:
            try:
                self._rotate()
            except OSError as e:
                _report(f"rotating '{self.file_name}' failed: {e}")
                return is_fatal

            line = self._render(log_type, args, fmt)
            self._writer.output(calldepth, line, _STDLIB_LEVELS.get(log_type, logging.INFO))

        return is_fatal

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS (caller holds self._lock)
    # -------------------------------------------------------------------------

    def _render(self, log_type: LogType, args: Sequence[Any], fmt: Optional[str]) -> str:
        if fmt is None:
            message = " ".join(str(a) for a in args)
        elif args:
            try:
                message = fmt % tuple(args)
            except (TypeError, ValueError, KeyError) as e:
                message = f"{fmt!r} % {tuple(args)!r} (bad format: {e})"
        else:
            message = fmt

        name, color = describe_type(log_type)
        if self.colored:
            return f"{color}[{name}] {message}{COLOR_RESET}"
        return f"[{name}] {message}"

    def _rotate(self) -> None:
        if self.file_name and (self._fd is None or self._fd.closed):
            # Lost handle: a failed reopen after rename, or closed underneath us
            self._open_output(self.file_name)

        if not self.rotation.active or self._fd is None:
            return

        fd = self._fd
        due, suffix = self.rotation.should_rotate(self._clock(), lambda: file_size(fd))
        if due:
            self._do_rotate(suffix)

    def _do_rotate(self, suffix: str) -> None:
        last_file_name = f"{self.file_name}.{self.rotation.suffix}"
        os.rename(self.file_name, last_file_name)

        fd, self._fd = self._fd, None
        try:
            fd.close()
        except OSError as e:
            # Rotation continues; the old descriptor may leak
            _report(f"closing '{last_file_name}' failed: {e}")

        try:
            self._open_output(self.file_name)
        finally:
            # The old suffix is spent once the rename has happened
            self.rotation.adopt(suffix)
        logger.debug(f"Rotated {last_file_name}, new suffix {suffix}")

    def _open_output(self, path: str) -> None:
        try:
            handle = open_append(path)
        except OSError as e:
            if self.exit_on_open_error:
                _report(f"opening '{path}' failed: {e}")
                self.fatal_hook()
            raise
        self._swap_sink(handle, path, handle)

    def _swap_sink(self, out: TextIO, path: str, handle: Optional[TextIO]) -> None:
        previous = self._fd
        self._writer.set_output(out)
        self.file_name = path
        self._fd = handle
        if previous is not None and previous is not handle and not previous.closed:
            previous.close()


# -----------------------------------------------------------------------------
# FACTORIES
# -----------------------------------------------------------------------------

def new_backend(
        out: TextIO,
        prefix: str = "",
        level: LogLevel = LogLevel.ALL,
        colored: bool = True,
) -> Backend:
    """Create a backend with the standard date and time metadata."""
    return Backend(out, prefix, level, colored, LineFlag.STD_FLAGS)


def new_simple_backend() -> Backend:
    """Create a colored, all-levels backend writing to standard output."""
    return new_backend(sys.stdout, "", LogLevel.ALL, True)
