from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for backends writing to memory or temporary files.
"""

import io
import os
import sys
from datetime import datetime
from typing import Callable, Generator, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from multilog import reset_default_registry  # noqa: E402
from multilog.core.backend import Backend  # noqa: E402
from multilog.domain.levels import LogLevel  # noqa: E402
from multilog.infra.formatting import LineFlag  # noqa: E402


class FakeClock:
    """Settable replacement for datetime.now."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def clock() -> FakeClock:
    """A clock frozen at 2024-03-15 10:30 local time."""
    return FakeClock(datetime(2024, 3, 15, 10, 30, 0))


@pytest.fixture
def fatal_calls() -> List[int]:
    """Collects one entry per fatal hook invocation."""
    return []


@pytest.fixture
def make_backend(clock: FakeClock, fatal_calls: List[int]) -> Callable[..., Backend]:
    """
    Factory for uncolored, metadata-free backends over a StringIO sink.

    The fatal hook records the call instead of exiting, and rotation
    decisions use the shared fake clock.
    """
    def _make(
            level: LogLevel = LogLevel.ALL,
            colored: bool = False,
            flags: LineFlag = LineFlag.NONE,
            **kwargs,
    ) -> Backend:
        kwargs.setdefault("fatal_hook", lambda: fatal_calls.append(1))
        kwargs.setdefault("clock", clock)
        return Backend(io.StringIO(), "", level, colored, flags, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def reset_default() -> Generator[None, None, None]:
    """Drop the process-wide registry between tests."""
    reset_default_registry()
    yield
    reset_default_registry()

