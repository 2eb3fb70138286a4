from __future__ import annotations

"""
Domain Constants.

Shared identifiers and formats used by the rotation policy, the backend
registry and the command-line tool.
"""

# -----------------------------------------------------------------------------
# ROTATION SUFFIX FORMATS
# -----------------------------------------------------------------------------

FORMAT_TIME_DAY: str = "%Y%m%d"
FORMAT_TIME_HOUR: str = "%Y%m%d%H"

# -----------------------------------------------------------------------------
# REGISTRY & PROCESS
# -----------------------------------------------------------------------------

DEFAULT_BACKEND_NAME: str = "console"

# Status used when a fatal-severity line terminates the process
FATAL_EXIT_CODE: int = 255

# -----------------------------------------------------------------------------
# ANSI COLORS
# -----------------------------------------------------------------------------

COLOR_RED: str = "\033[0;31m"
COLOR_YELLOW: str = "\033[0;33m"
COLOR_CYAN: str = "\033[0;36m"
COLOR_WHITE: str = "\033[0;37m"
COLOR_RESET: str = "\033[0m"
