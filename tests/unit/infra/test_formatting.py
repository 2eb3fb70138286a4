from __future__ import annotations

"""
Unit tests for the line formatting primitive.

Verifies:
1. Header rendering for each metadata flag.
2. Prefix placement (leading vs. MSGPREFIX).
3. Stream swapping, including away from a closed stream.
"""

import io
import logging
import os
import re
from datetime import datetime, timezone

import pytest

from multilog.infra.formatting import LineFlag, LineFormatter, LineWriter, parse_flags

CREATED = datetime(2024, 3, 15, 10, 30, 5, 123456).timestamp()


def make_record(msg: str = "hello") -> logging.LogRecord:
    record = logging.LogRecord(
        "test", logging.INFO, "/srv/app/module.py", 42, msg, None, None
    )
    record.created = CREATED
    return record


@pytest.mark.parametrize(
    "flags, expected",
    [
        (LineFlag.NONE, "hello"),
        (LineFlag.DATE, "2024/03/15 hello"),
        (LineFlag.TIME, "10:30:05 hello"),
        (LineFlag.STD_FLAGS, "2024/03/15 10:30:05 hello"),
        (LineFlag.MICROSECONDS, "10:30:05.123456 hello"),
        (LineFlag.LONGFILE, "/srv/app/module.py:42: hello"),
        (LineFlag.SHORTFILE, "module.py:42: hello"),
        (LineFlag.LONGFILE | LineFlag.SHORTFILE, "module.py:42: hello"),
    ],
)
def test_header_flags(flags: LineFlag, expected: str) -> None:
    assert LineFormatter("", flags).format(make_record()) == expected


def test_utc_flag_renders_utc_time() -> None:
    expected = datetime.fromtimestamp(CREATED, tz=timezone.utc).strftime("%H:%M:%S")
    line = LineFormatter("", LineFlag.TIME | LineFlag.UTC).format(make_record())
    assert line == f"{expected} hello"


def test_prefix_placement() -> None:
    record = make_record()
    assert LineFormatter("[svc] ", LineFlag.DATE).format(record) == "[svc] 2024/03/15 hello"
    assert (
        LineFormatter("[svc] ", LineFlag.DATE | LineFlag.MSGPREFIX).format(record)
        == "2024/03/15 [svc] hello"
    )


def test_single_trailing_newline_is_dropped() -> None:
    assert LineFormatter("", LineFlag.NONE).format(make_record("x\n")) == "x"


def test_parse_flags() -> None:
    assert parse_flags("date, time,SHORTFILE") == (
        LineFlag.DATE | LineFlag.TIME | LineFlag.SHORTFILE
    )
    assert parse_flags("") == LineFlag.NONE
    assert parse_flags("std") == LineFlag.STD_FLAGS
    with pytest.raises(ValueError, match="Unknown line flag"):
        parse_flags("date,colour")


def test_writer_output_and_caller() -> None:
    sink = io.StringIO()
    writer = LineWriter(sink, "> ", LineFlag.SHORTFILE)
    writer.output(1, "[info] hi")

    line = sink.getvalue()
    assert re.fullmatch(rf"> {re.escape(os.path.basename(__file__))}:\d+: \[info\] hi\n", line)


def test_writer_std_flags_shape() -> None:
    sink = io.StringIO()
    LineWriter(sink).output(1, "msg")
    assert re.fullmatch(r"\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2} msg\n", sink.getvalue())


def test_writer_setters() -> None:
    writer = LineWriter(io.StringIO())
    writer.set_prefix("p")
    writer.set_flags(LineFlag.NONE)
    assert writer.prefix == "p"
    assert writer.flags == LineFlag.NONE


def test_set_output_returns_previous_stream() -> None:
    first, second = io.StringIO(), io.StringIO()
    writer = LineWriter(first, flags=LineFlag.NONE)
    assert writer.set_output(second) is first
    writer.output(1, "x")
    assert second.getvalue() == "x\n"


def test_set_output_from_closed_stream(tmp_path) -> None:
    handle = open(tmp_path / "f.log", "a", encoding="utf-8")
    writer = LineWriter(handle, flags=LineFlag.NONE)
    handle.close()

    replacement = io.StringIO()
    assert writer.set_output(replacement) is handle
    writer.output(1, "after")
    assert replacement.getvalue() == "after\n"


def test_writer_does_not_propagate(caplog: pytest.LogCaptureFixture) -> None:
    """Lines stay out of the global logging tree."""
    with caplog.at_level(logging.DEBUG):
        LineWriter(io.StringIO()).output(1, "private")
    assert "private" not in caplog.text


def test_writer_ignores_global_disable() -> None:
    sink = io.StringIO()
    writer = LineWriter(sink, flags=LineFlag.NONE)
    logging.disable(logging.CRITICAL)
    try:
        writer.output(1, "still here", logging.DEBUG)
    finally:
        logging.disable(logging.NOTSET)
    assert sink.getvalue() == "still here\n"
