from __future__ import annotations

"""
Severity Types and Cumulative Levels.

A LogType is a single severity bit. A LogLevel is the bitwise union of
every type at or above a chosen severity, so the "is this severity
enabled" test is a single mask operation.
"""

import enum
from typing import Dict, Tuple

from multilog.domain.constants import (
    COLOR_CYAN,
    COLOR_RED,
    COLOR_WHITE,
    COLOR_YELLOW,
)


class LogType(enum.IntFlag):
    """Disjoint severity bits, most severe first."""
    FATAL = 0x1
    ERROR = 0x2
    WARNING = 0x4
    INFO = 0x8
    DEBUG = 0x10


class LogLevel(enum.IntFlag):
    """Cumulative severity thresholds."""
    NONE = 0x0
    FATAL = 0x1
    ERROR = 0x1 | 0x2
    WARN = 0x1 | 0x2 | 0x4
    INFO = 0x1 | 0x2 | 0x4 | 0x8
    DEBUG = 0x1 | 0x2 | 0x4 | 0x8 | 0x10
    ALL = DEBUG

    def enables(self, log_type: LogType) -> bool:
        """Return True if every bit of `log_type` is contained in this level."""
        bits = int(log_type)
        return int(self) & bits == bits


# -----------------------------------------------------------------------------
# LOOKUP TABLES
# -----------------------------------------------------------------------------

_LEVEL_MAP: Dict[str, LogLevel] = {
    "fatal": LogLevel.FATAL,
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
}

_TYPE_DISPLAY: Dict[LogType, Tuple[str, str]] = {
    LogType.FATAL: ("fatal", COLOR_RED),
    LogType.ERROR: ("error", COLOR_RED),
    LogType.WARNING: ("warning", COLOR_YELLOW),
    LogType.DEBUG: ("debug", COLOR_CYAN),
    LogType.INFO: ("info", COLOR_WHITE),
}

_UNKNOWN_DISPLAY: Tuple[str, str] = ("unknown", COLOR_WHITE)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def string_to_level(level: str) -> LogLevel:
    """
    Map a textual level name to its cumulative LogLevel.

    Matching is exact ("fatal", "error", "warn", "warning", "debug",
    "info"). Anything else enables every severity.

    Args:
        level: Level name as found in configuration or CLI input.

    Returns:
        LogLevel: The corresponding cumulative level.
    """
    return _LEVEL_MAP.get(level, LogLevel.ALL)


def describe_type(log_type: LogType) -> Tuple[str, str]:
    """
    Resolve the display name and ANSI color of a severity.

    Args:
        log_type: Severity bit. Values that are not a single known
            severity resolve to ("unknown", white).

    Returns:
        Tuple[str, str]: (name, color escape sequence).
    """
    return _TYPE_DISPLAY.get(log_type, _UNKNOWN_DISPLAY)

