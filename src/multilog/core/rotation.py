from __future__ import annotations

"""
Log Rotation Policy.

Tracks the active rotation mode of a backend and the suffix of the file
currently being written. Decides, for a given instant, whether the live
file must be renamed away and which suffix the fresh file adopts.

The policy never touches the filesystem. For size-based rotation the
caller supplies a callable returning the live file size, which is only
consulted once the sequence suffix is known to differ.
"""

import enum
from datetime import datetime
from typing import Callable, Optional, Tuple

from multilog.domain.constants import FORMAT_TIME_DAY, FORMAT_TIME_HOUR


class RotateMode(enum.Enum):
    """Mutually exclusive rotation strategies."""
    NONE = "none"
    DAILY = "day"
    HOURLY = "hour"
    SIZE = "size"


# -----------------------------------------------------------------------------
# SUFFIX GENERATORS
# -----------------------------------------------------------------------------

def gen_day_time(now: datetime) -> str:
    """Format `now` as a daily suffix (YYYYMMDD)."""
    return now.strftime(FORMAT_TIME_DAY)


def gen_hour_time(now: datetime) -> str:
    """Format `now` as an hourly suffix (YYYYMMDDHH)."""
    return now.strftime(FORMAT_TIME_HOUR)


def gen_next_seq(suffix: str) -> str:
    """
    Advance a size-rotation sequence suffix by one.

    An empty suffix starts the sequence at "0". Any other value that does
    not parse as a decimal integer counts as 0 before incrementing.

    Args:
        suffix: The current sequence suffix.

    Returns:
        str: The next sequence suffix.
    """
    if suffix == "":
        return "0"
    try:
        seq = int(suffix)
    except ValueError:
        seq = 0
    return str(seq + 1)


# -----------------------------------------------------------------------------
# POLICY
# -----------------------------------------------------------------------------

class RotationPolicy:
    """
    Rotation mode plus the suffix of the live file.

    Attributes:
        mode: Active rotation strategy. Setting a new one replaces the old.
        suffix: Tag that will be appended to the live file when it rotates.
        threshold: Size in bytes that triggers rotation in SIZE mode.
    """

    def __init__(self) -> None:
        self.mode: RotateMode = RotateMode.NONE
        self.suffix: str = ""
        self.threshold: int = 0

    def __repr__(self) -> str:
        return (
            f"RotationPolicy(mode={self.mode.value!r}, suffix={self.suffix!r}, "
            f"threshold={self.threshold})"
        )

    @property
    def active(self) -> bool:
        return self.mode is not RotateMode.NONE

    # --- Activation -----------------------------------------------------------

    def set_daily(self, now: datetime) -> None:
        """Rotate on calendar day change, stamping the suffix with today."""
        self.mode = RotateMode.DAILY
        self.suffix = gen_day_time(now)

    def set_hourly(self, now: datetime) -> None:
        """Rotate on calendar hour change, stamping the suffix with this hour."""
        self.mode = RotateMode.HOURLY
        self.suffix = gen_hour_time(now)

    def set_size(self, threshold: int) -> None:
        """
        Rotate once the live file reaches `threshold` bytes.

        Activation advances the sequence once, so a fresh policy starts at
        "0" and a policy that already carried a suffix moves past it.
        """
        self.mode = RotateMode.SIZE
        self.threshold = int(threshold)
        self.suffix = gen_next_seq(self.suffix)

    # --- Decision -------------------------------------------------------------

    def next_suffix(self, now: datetime) -> str:
        """Return the suffix the live file would carry under the active mode."""
        if self.mode is RotateMode.DAILY:
            return gen_day_time(now)
        if self.mode is RotateMode.HOURLY:
            return gen_hour_time(now)
        if self.mode is RotateMode.SIZE:
            return gen_next_seq(self.suffix)
        return self.suffix

    def should_rotate(
            self,
            now: datetime,
            file_size: Optional[Callable[[], int]] = None,
    ) -> Tuple[bool, str]:
        """
        Decide whether the live file is due for rotation.

        Args:
            now: Instant of the pending write, in local time.
            file_size: Returns the current size of the live file. Required
                for SIZE mode; without it a size rotation is never due.

        Returns:
            Tuple[bool, str]: (due, suffix to adopt after rotating). When not
            due, the second element is the unchanged current suffix.

        Raises:
            OSError: Propagated from `file_size`.
        """
        if self.mode is RotateMode.NONE:
            return False, self.suffix

        candidate = self.next_suffix(now)
        if candidate == self.suffix:
            return False, self.suffix

        if self.mode is RotateMode.SIZE:
            if file_size is None or file_size() < self.threshold:
                return False, self.suffix

        return True, candidate

    def adopt(self, suffix: str) -> None:
        """Record the suffix of the freshly opened live file."""
        self.suffix = suffix
