from __future__ import annotations

"""
Diagnostics Configuration Model.

Settings for the process's own diagnostic logging (the `multilog`
command and library debug traces), as opposed to the leveled backends
the package provides.
"""

import logging
from dataclasses import dataclass
from typing import Dict

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class DiagnosticsConfig:
    """
    Immutable specification for diagnostic logging.

    Attributes:
        level: Minimum severity to capture.
        console_fmt: Structural format for stderr output.
    """
    level: str = "WARNING"
    console_fmt: str = "%(levelname)s | %(name)s | %(message)s"
