from __future__ import annotations

"""
Diagnostic Logging Setup.

Idempotent configuration of the root logger with a single tagged stderr
handler. Re-running the configuration replaces our handler instead of
stacking a new one.
"""

import logging
import sys

from multilog.infra.logging.config import _LEVEL_MAP, DiagnosticsConfig

# Internal attributes used for idempotency and handler ownership
_CONFIGURED_FLAG_ATTR: str = "_multilog_configured"
_HANDLER_TAG_ATTR: str = "_multilog_handler"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: DiagnosticsConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger for diagnostics.

    Args:
        cfg: Diagnostic logging settings.
        force: Replace an existing configuration.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level_int = _parse_level(cfg.level)
    root.setLevel(level_int)
    _remove_our_handlers(root)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(logging.Formatter(cfg.console_fmt))
    setattr(sh, _HANDLER_TAG_ATTR, True)
    root.addHandler(sh)

    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


def get_logger(name: str) -> logging.Logger:
    """Acquire a named logger (usually `__name__`)."""
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _remove_our_handlers(root: logging.Logger) -> None:
    """Detach every handler previously installed by this module."""
    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG_ATTR, False):
            root.removeHandler(h)
            h.close()
