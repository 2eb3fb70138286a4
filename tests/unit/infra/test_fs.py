from __future__ import annotations

"""
Unit tests for FileSystem infrastructure.

Verifies:
1. Append-mode opening with parent directory creation.
2. Size reporting of open handles.
3. Crash log redirection success and non-fatal failures.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from multilog.infra.fs import STDERR_FILENO, file_size, open_append, redirect_crash_log


def test_open_append_creates_parents_and_appends(tmp_path: Path) -> None:
    path = tmp_path / "a" / "b" / "x.log"
    with open_append(str(path)) as f:
        f.write("one\n")
    with open_append(str(path)) as f:
        f.write("two\n")
    assert path.read_text(encoding="utf-8") == "one\ntwo\n"


def test_file_size_counts_unflushed_writes(tmp_path: Path) -> None:
    with open_append(str(tmp_path / "s.log")) as f:
        f.write("12345")
        assert file_size(f) == 5


def test_redirect_crash_log_duplicates_onto_stderr(tmp_path: Path) -> None:
    target = tmp_path / "crash" / "crash.log"
    with patch("multilog.infra.fs.os.dup2") as dup2, \
            patch("multilog.infra.fs.faulthandler.enable") as enable:
        assert redirect_crash_log(str(target)) is True

    assert target.exists()
    assert dup2.call_args.args[1] == STDERR_FILENO
    enable.assert_called_once_with(file=STDERR_FILENO)


def test_redirect_crash_log_open_failure_is_not_fatal(
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR, logger="multilog.infra.fs"):
        assert redirect_crash_log(str(tmp_path)) is False
    assert "Unable to open crash log" in caplog.text


def test_redirect_crash_log_dup_failure_is_not_fatal(
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
) -> None:
    with patch("multilog.infra.fs.os.dup2", side_effect=OSError("EBADF")), \
            caplog.at_level(logging.ERROR, logger="multilog.infra.fs"):
        assert redirect_crash_log(str(tmp_path / "c.log")) is False
    assert "Unable to redirect" in caplog.text


@pytest.mark.skipif(os.name != "posix", reason="descriptor juggling is POSIX-only here")
def test_redirect_crash_log_really_moves_fd2(tmp_path: Path) -> None:
    target = tmp_path / "real.log"
    saved = os.dup(STDERR_FILENO)
    try:
        with patch("multilog.infra.fs.faulthandler.enable"):
            assert redirect_crash_log(str(target))
        os.write(STDERR_FILENO, b"native crash output\n")
    finally:
        os.dup2(saved, STDERR_FILENO)
        os.close(saved)
    assert target.read_text(encoding="utf-8") == "native crash output\n"
