from __future__ import annotations

import pytest

from logscry.watch.assembler import EntryAssembler, assemble_entries
from logscry.watch.entry import LogEntry, is_primary_line

PRIMARY_A = "2024/12/14 18:01:02 1000 abc [INFO Client 12] first"
PRIMARY_B = "2024/12/14 18:01:03 1001 abd [INFO Client 12] second"


def test_primary_line_shape() -> None:
    assert is_primary_line(PRIMARY_A)
    assert is_primary_line("2024/12/14 18:01:02")
    assert not is_primary_line("2024-12-14 18:01:02 dashes")
    assert not is_primary_line("    at Foo.bar()")
    assert not is_primary_line("2024/12/14")


def test_date_is_not_validated() -> None:
    assert is_primary_line("abcd/ef/gh ijklmnop rest")


def test_continuation_lines_join_open_entry() -> None:
    asm = EntryAssembler()
    assert asm.feed(PRIMARY_A) is None
    assert asm.feed("  detail one  ") is None
    assert asm.feed("detail two") is None

    entry = asm.feed(PRIMARY_B)
    assert entry == LogEntry((PRIMARY_A, "detail one", "detail two"))
    assert entry.raw_text == f"{PRIMARY_A}\ndetail one\ndetail two"
    assert asm.has_open_entry


def test_blank_lines_are_ignored() -> None:
    asm = EntryAssembler()
    asm.feed(PRIMARY_A)
    asm.feed("")
    asm.feed("   ")
    entry = asm.flush()
    assert entry is not None
    assert entry.lines == (PRIMARY_A,)
    assert asm.total_lines_received == 3


def test_orphan_continuation_is_dropped() -> None:
    asm = EntryAssembler()
    assert asm.feed("stray line") is None
    assert not asm.has_open_entry
    assert asm.total_lines_dropped == 1


def test_flush_without_open_entry_returns_none() -> None:
    asm = EntryAssembler()
    assert asm.flush() is None
    asm.feed(PRIMARY_A)
    assert asm.flush() is not None
    assert asm.flush() is None


def test_timestamp_is_first_nineteen_characters() -> None:
    entry = LogEntry((PRIMARY_A, "more"))
    assert entry.timestamp == "2024/12/14 18:01:02"


def test_empty_entry_rejected() -> None:
    with pytest.raises(ValueError):
        LogEntry(())


def test_assemble_entries_flushes_last() -> None:
    lines = ["orphan", PRIMARY_A, "cont", "", PRIMARY_B]
    entries = list(assemble_entries(lines))
    assert [e.lines for e in entries] == [(PRIMARY_A, "cont"), (PRIMARY_B,)]


def test_clear_discards_open_entry() -> None:
    asm = EntryAssembler()
    asm.feed(PRIMARY_A)
    asm.clear()
    assert not asm.has_open_entry
    assert asm.flush() is None
    assert asm.total_entries_emitted == 0
