from __future__ import annotations

"""
multilog: leveled, multi-backend logging with file rotation.

Backends and registries are plain values and can be built locally. For
convenience the module also exposes a process-wide default registry,
created on first use with a single colored console backend named
DEFAULT_BACKEND_NAME, and module-level functions that act on it.
"""

import threading
from typing import Any, Optional, TextIO, Tuple

from multilog.core.backend import (
    DEFAULT_CALLDEPTH,
    Backend,
    new_backend,
    new_simple_backend,
    terminate,
)
from multilog.core.registry import Registry, new_simple_registry
from multilog.core.rotation import RotateMode, RotationPolicy
from multilog.domain.constants import DEFAULT_BACKEND_NAME, FATAL_EXIT_CODE
from multilog.domain.errors import BackendNotFoundError, ConfigError, MultilogError
from multilog.domain.levels import LogLevel, LogType, string_to_level
from multilog.infra.formatting import LineFlag
from multilog.infra.fs import redirect_crash_log

__version__ = "1.0.0"

__all__ = [
    "Backend",
    "BackendNotFoundError",
    "ConfigError",
    "DEFAULT_BACKEND_NAME",
    "FATAL_EXIT_CODE",
    "LineFlag",
    "LogLevel",
    "LogType",
    "MultilogError",
    "Registry",
    "RotateMode",
    "RotationPolicy",
    "get_default_registry",
    "new_backend",
    "new_simple_backend",
    "new_simple_registry",
    "redirect_crash_log",
    "reset_default_registry",
    "string_to_level",
    "terminate",
    # process-wide convenience API
    "add_backend",
    "delete_backend",
    "set_level",
    "get_level",
    "find_level",
    "set_output",
    "set_output_by_name",
    "set_flags",
    "set_colored",
    "set_rotate_by_day",
    "set_rotate_by_hour",
    "set_rotate_by_size",
    "fatal",
    "fatalf",
    "error",
    "errorf",
    "warning",
    "warningf",
    "info",
    "infof",
    "debug",
    "debugf",
]

# -----------------------------------------------------------------------------
# PROCESS-WIDE DEFAULT REGISTRY
# -----------------------------------------------------------------------------

_default_registry: Optional[Registry] = None
_default_lock = threading.Lock()


def get_default_registry() -> Registry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = new_simple_registry()
        return _default_registry


def reset_default_registry(registry: Optional[Registry] = None) -> None:
    """Replace the process-wide registry (None recreates it lazily)."""
    global _default_registry
    with _default_lock:
        _default_registry = registry


# -----------------------------------------------------------------------------
# MODULE-LEVEL CONVENIENCE API
# -----------------------------------------------------------------------------

def add_backend(name: str, backend: Backend) -> None:
    get_default_registry().add_backend(name, backend)


def delete_backend(name: str) -> None:
    get_default_registry().delete_backend(name)


def set_level(name: str, level: LogLevel) -> None:
    get_default_registry().set_level(name, level)


def get_level(name: str) -> LogLevel:
    return get_default_registry().get_level(name)


def find_level(name: str) -> Tuple[LogLevel, bool]:
    return get_default_registry().find_level(name)


def set_output(name: str, out: TextIO) -> None:
    get_default_registry().set_output(name, out)


def set_output_by_name(name: str, path: str) -> None:
    get_default_registry().set_output_by_name(name, path)


def set_flags(name: str, flags: LineFlag) -> None:
    get_default_registry().set_flags(name, flags)


def set_colored(name: str, colored: bool) -> None:
    get_default_registry().set_colored(name, colored)


def set_rotate_by_day(name: str) -> None:
    get_default_registry().set_rotate_by_day(name)


def set_rotate_by_hour(name: str) -> None:
    get_default_registry().set_rotate_by_hour(name)


def set_rotate_by_size(name: str, size: int) -> None:
    get_default_registry().set_rotate_by_size(name, size)


def fatal(*args: Any) -> None:
    get_default_registry().emit_fatal(args, None, DEFAULT_CALLDEPTH)


def fatalf(fmt: str, *args: Any) -> None:
    get_default_registry().emit_fatal(args, fmt, DEFAULT_CALLDEPTH)


def error(*args: Any) -> None:
    get_default_registry().emit(LogType.ERROR, args, None, DEFAULT_CALLDEPTH)


def errorf(fmt: str, *args: Any) -> None:
    get_default_registry().emit(LogType.ERROR, args, fmt, DEFAULT_CALLDEPTH)


def warning(*args: Any) -> None:
    get_default_registry().emit(LogType.WARNING, args, None, DEFAULT_CALLDEPTH)


def warningf(fmt: str, *args: Any) -> None:
    get_default_registry().emit(LogType.WARNING, args, fmt, DEFAULT_CALLDEPTH)


def info(*args: Any) -> None:
    get_default_registry().emit(LogType.INFO, args, None, DEFAULT_CALLDEPTH)


def infof(fmt: str, *args: Any) -> None:
    get_default_registry().emit(LogType.INFO, args, fmt, DEFAULT_CALLDEPTH)


def debug(*args: Any) -> None:
    get_default_registry().emit(LogType.DEBUG, args, None, DEFAULT_CALLDEPTH)


def debugf(fmt: str, *args: Any) -> None:
    get_default_registry().emit(LogType.DEBUG, args, fmt, DEFAULT_CALLDEPTH)
