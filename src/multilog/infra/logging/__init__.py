from __future__ import annotations

from .config import DiagnosticsConfig
from .core import configure_logging, get_logger

__all__ = [
    "DiagnosticsConfig",
    "configure_logging",
    "get_logger",
]
