# tests/test_imports_smoke.py
# -----------------------------------------------------------------------------
# Smoke tests for imports and the public "contract" of the multilog package.
#
# Goals:
# - Ensure every module is importable in any environment.
# - Validate the package exposes the module-level API callers rely on.
# -----------------------------------------------------------------------------

from __future__ import annotations

import importlib

import pytest

import multilog


@pytest.mark.parametrize(
    "module",
    [
        "multilog.config",
        "multilog.core.backend",
        "multilog.core.registry",
        "multilog.core.rotation",
        "multilog.domain.constants",
        "multilog.domain.errors",
        "multilog.domain.levels",
        "multilog.infra.formatting",
        "multilog.infra.fs",
        "multilog.infra.logging",
        "multilog.interface.cli.app",
        "multilog.interface.cli.args",
    ],
)
def test_module_importable(module):
    assert importlib.import_module(module) is not None


def test_public_api_contract():
    for name in multilog.__all__:
        assert hasattr(multilog, name), f"multilog missing: {name}"
