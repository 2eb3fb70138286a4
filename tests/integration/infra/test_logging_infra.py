from __future__ import annotations

"""
Integration tests for diagnostic logging setup.

Verifies idempotency of configuration and handler replacement on force.
"""

import logging
from typing import Generator

import pytest

from multilog.infra.logging import DiagnosticsConfig, configure_logging
from multilog.infra.logging.core import _CONFIGURED_FLAG_ATTR, _HANDLER_TAG_ATTR


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Remove our handlers from the root logger before and after each test."""
    def _clean() -> None:
        root = logging.getLogger()
        for h in list(root.handlers):
            if getattr(h, _HANDLER_TAG_ATTR, False):
                root.removeHandler(h)
                h.close()
        if hasattr(root, _CONFIGURED_FLAG_ATTR):
            delattr(root, _CONFIGURED_FLAG_ATTR)

    _clean()
    yield
    _clean()


def _our_handlers() -> list:
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """Multiple config calls do not duplicate handlers."""
    configure_logging(DiagnosticsConfig(level="INFO"))
    configure_logging(DiagnosticsConfig(level="INFO"))
    assert len(_our_handlers()) == 1


def test_force_replaces_handler() -> None:
    configure_logging(DiagnosticsConfig(level="INFO"))
    first = _our_handlers()[0]

    root = configure_logging(DiagnosticsConfig(level="DEBUG"), force=True)
    handlers = _our_handlers()
    assert len(handlers) == 1
    assert handlers[0] is not first
    assert root.level == logging.DEBUG


def test_unknown_level_falls_back_to_warning() -> None:
    root = configure_logging(DiagnosticsConfig(level="chatty"))
    assert root.level == logging.WARNING
