from __future__ import annotations

from logscry.watch.dedup import DedupFilter, fingerprint
from logscry.watch.entry import LogEntry

LINE = "2024/12/14 18:01:02 1000 abc [INFO Client 12] hello"


def test_first_occurrence_admitted_repeat_rejected() -> None:
    seen = DedupFilter()
    entry = LogEntry((LINE,))
    assert seen.admit(entry)
    assert not seen.admit(entry)
    assert not seen.admit(LogEntry((LINE,)))
    assert len(seen) == 1


def test_continuation_lines_are_part_of_identity() -> None:
    seen = DedupFilter()
    assert seen.admit(LogEntry((LINE,)))
    assert seen.admit(LogEntry((LINE, "extra")))


def test_reset_forgets_everything() -> None:
    seen = DedupFilter()
    entry = LogEntry((LINE,))
    seen.admit(entry)
    assert entry in seen
    seen.reset()
    assert entry not in seen
    assert seen.admit(entry)


def test_fingerprint_is_stable_64_bit() -> None:
    value = fingerprint(LINE)
    assert value == fingerprint(LINE)
    assert 0 <= value < 2**64
    assert value != fingerprint(LINE + " ")


def test_contains_ignores_other_types() -> None:
    seen = DedupFilter()
    assert LINE not in seen
