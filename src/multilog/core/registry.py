from __future__ import annotations

"""
Backend Registry and Dispatcher.

Maps backend names to Backend instances and fans every leveled call out
to all of them. The registry holds no lock of its own; each backend
serializes its own rotate-and-write sequence. Per-name setters silently
ignore unknown names, while level queries report them.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, TextIO, Tuple

from multilog.core.backend import DEFAULT_CALLDEPTH, Backend, new_simple_backend
from multilog.domain.constants import DEFAULT_BACKEND_NAME
from multilog.domain.errors import BackendNotFoundError
from multilog.domain.levels import LogLevel, LogType
from multilog.infra.formatting import LineFlag

logger = logging.getLogger(__name__)


class Registry:
    """
    Named collection of backends.

    Args:
        backends: Optional initial name -> backend mapping. An empty
            registry is valid; see `new_simple_registry` for the default
            console setup.
    """

    def __init__(self, backends: Optional[Dict[str, Backend]] = None) -> None:
        self._backends: Dict[str, Backend] = dict(backends or {})

    def __repr__(self) -> str:
        return f"Registry({sorted(self._backends)!r})"

    def __len__(self) -> int:
        return len(self._backends)

    def __contains__(self, name: object) -> bool:
        return name in self._backends

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._backends))

    # -------------------------------------------------------------------------
    # MEMBERSHIP
    # -------------------------------------------------------------------------

    def add_backend(self, name: str, backend: Backend) -> None:
        """Register `backend` under `name`, replacing any previous entry."""
        self._backends[name] = backend
        logger.debug(f"Backend '{name}' registered")

    def delete_backend(self, name: str) -> None:
        """Forget `name`. Calls already dispatched to it still complete."""
        self._backends.pop(name, None)

    def get_backend(self, name: str) -> Backend:
        """
        Raises:
            BackendNotFoundError: If `name` is not registered.
        """
        try:
            return self._backends[name]
        except KeyError:
            raise BackendNotFoundError(name) from None

    def names(self) -> List[str]:
        return list(self._backends)

    # -------------------------------------------------------------------------
    # PER-NAME CONFIGURATION
    # -------------------------------------------------------------------------

    def set_level(self, name: str, level: LogLevel) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_level(level)

    def get_level(self, name: str) -> LogLevel:
        """
        Return the level mask of backend `name`.

        Raises:
            BackendNotFoundError: If `name` is not registered.
        """
        return self.get_backend(name).level

    def find_level(self, name: str) -> Tuple[LogLevel, bool]:
        """Return (level, True), or (LogLevel.NONE, False) for an unknown name."""
        b = self._backends.get(name)
        if b is None:
            return LogLevel.NONE, False
        return b.level, True

    def set_output(self, name: str, out: TextIO) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_output(out)

    def set_output_by_name(self, name: str, path: str) -> None:
        """
        Point backend `name` at the file `path`.

        Raises:
            OSError: If the backend exists and the file cannot be opened.
        """
        b = self._backends.get(name)
        if b is not None:
            b.set_output_by_name(path)

    def set_flags(self, name: str, flags: LineFlag) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_flags(flags)

    def set_colored(self, name: str, colored: bool) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_colored(colored)

    def set_rotate_by_day(self, name: str) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_rotate_by_day()

    def set_rotate_by_hour(self, name: str) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_rotate_by_hour()

    def set_rotate_by_size(self, name: str, size: int) -> None:
        b = self._backends.get(name)
        if b is not None:
            b.set_rotate_by_size(size)

    # -------------------------------------------------------------------------
    # BROADCAST
    # -------------------------------------------------------------------------

    def emit(
            self,
            log_type: LogType,
            args: Sequence[Any],
            fmt: Optional[str] = None,
            calldepth: int = DEFAULT_CALLDEPTH,
    ) -> bool:
        """
        Send one line to every registered backend.

        Returns:
            bool: True when `log_type` is fatal, leaving termination to
            the caller.
        """
        for b in list(self._backends.values()):
            b.emit(log_type, args, fmt, calldepth + 1)
        return log_type == LogType.FATAL

    def emit_fatal(
            self,
            args: Sequence[Any],
            fmt: Optional[str] = None,
            calldepth: int = DEFAULT_CALLDEPTH,
    ) -> None:
        """
        Send a fatal line to every backend, each followed by its fatal hook.

        With the default hook the first backend reached ends the process,
        so later backends may never see the line.
        """
        for b in list(self._backends.values()):
            b.emit_fatal(args, fmt, calldepth + 1)

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


# -----------------------------------------------------------------------------
# FACTORIES
# -----------------------------------------------------------------------------

def new_simple_registry() -> Registry:
    """
    Create a registry holding the default console backend.

    The backend is registered under DEFAULT_BACKEND_NAME and renders date,
    time and the caller's file:line.
    """
    backend = new_simple_backend()
    backend.set_flags(LineFlag.DATE | LineFlag.TIME | LineFlag.SHORTFILE)
    return Registry({DEFAULT_BACKEND_NAME: backend})
