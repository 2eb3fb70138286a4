from __future__ import annotations

"""
Domain Exceptions.

Error taxonomy surfaced by configuration and query operations. Leveled
write calls never raise these.
"""


class MultilogError(Exception):
    """Base class for every error raised by the package."""


class BackendNotFoundError(MultilogError, KeyError):
    """Raised when a registry query names a backend that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Backend not found: {self.name!r}"


class ConfigError(MultilogError, ValueError):
    """Raised when a backend configuration document is malformed."""
