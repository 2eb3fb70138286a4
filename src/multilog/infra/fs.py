from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Low-level file operations used by backends: opening log files in append
mode, reading sizes of open handles, and redirecting the process
diagnostic stream to a crash log.
"""

import faulthandler
import logging
import os
from typing import TextIO

logger = logging.getLogger(__name__)

STDERR_FILENO: int = 2

# -----------------------------------------------------------------------------
# LOG FILE HANDLING
# -----------------------------------------------------------------------------

def open_append(path: str) -> TextIO:
    """
    Open (creating if missing) a log file for appending text.

    Missing parent directories are created first.

    Args:
        path: Target log file path.

    Returns:
        TextIO: Line-oriented handle positioned at the end of the file.

    Raises:
        OSError: If the directory or file cannot be created or opened.
    """
    ensure_parent_dir(path)
    return open(path, "a", encoding="utf-8")


def file_size(handle: TextIO) -> int:
    """Return the on-disk size of an open file handle in bytes."""
    handle.flush()
    return os.fstat(handle.fileno()).st_size


def ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy for a target file.

    Args:
        path: Path to the target file.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)


# -----------------------------------------------------------------------------
# CRASH LOG REDIRECTION
# -----------------------------------------------------------------------------

def redirect_crash_log(path: str) -> bool:
    """
    Send the process diagnostic stream (fd 2) to `path`.

    The file descriptor of `path` is duplicated onto descriptor 2, so
    interpreter tracebacks, faulthandler dumps and anything written by
    native code to stderr land in the file. Failures are logged and
    reported through the return value, never raised.

    Args:
        path: Crash log file, opened for append and created if missing.

    Returns:
        bool: True if the redirection is in place.
    """
    try:
        ensure_parent_dir(path)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o666)
    except OSError as e:
        logger.error(f"Unable to open crash log '{path}': {e}")
        return False

    try:
        os.dup2(fd, STDERR_FILENO)
    except OSError as e:
        logger.error(f"Unable to redirect diagnostic stream to '{path}': {e}")
        return False
    finally:
        os.close(fd)

    try:
        faulthandler.enable(file=STDERR_FILENO)
    except (OSError, ValueError, RuntimeError) as e:
        logger.warning(f"Crash log active but faulthandler unavailable: {e}")

    logger.debug(f"Diagnostic stream redirected to {path}")
    return True
