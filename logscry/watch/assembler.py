from __future__ import annotations

from typing import Iterable, Iterator

from .entry import LogEntry, is_primary_line


class EntryAssembler:
    def __init__(self) -> None:
        self._lines: list[str] = []
        self.total_lines_received: int = 0
        self.total_lines_dropped: int = 0
        self.total_entries_emitted: int = 0

    @property
    def has_open_entry(self) -> bool:
        return bool(self._lines)

    def feed(self, line: str) -> LogEntry | None:
        """Add one physical line; return the entry it closed, if any."""
        self.total_lines_received += 1
        stripped = line.strip()
        if not stripped:
            return None

        if is_primary_line(stripped):
            closed = self._close()
            self._lines = [stripped]
            return closed

        if self._lines:
            self._lines.append(stripped)
        else:
            # Continuation with nothing open to attach to.
            self.total_lines_dropped += 1
        return None

    def flush(self) -> LogEntry | None:
        """Close and return the open entry (end of input)."""
        return self._close()

    def clear(self) -> None:
        self._lines = []
        self.total_lines_received = 0
        self.total_lines_dropped = 0
        self.total_entries_emitted = 0

    def _close(self) -> LogEntry | None:
        if not self._lines:
            return None
        entry = LogEntry(tuple(self._lines))
        self._lines = []
        self.total_entries_emitted += 1
        return entry


def assemble_entries(lines: Iterable[str]) -> Iterator[LogEntry]:
    """Group a finite sequence of lines into entries, flushing at the end."""
    assembler = EntryAssembler()
    for line in lines:
        entry = assembler.feed(line)
        if entry is not None:
            yield entry
    last = assembler.flush()
    if last is not None:
        yield last
