from __future__ import annotations

from dataclasses import dataclass

# "YYYY/MM/DD HH:MM:SS"
TIMESTAMP_LENGTH = 19


def is_primary_line(line: str) -> bool:
    """Return True if *line* starts a new log entry.

    Only the shape of the head is checked (``NNNN/NN/NN ``); the date itself
    is never parsed.
    """
    return (
        len(line) >= TIMESTAMP_LENGTH
        and line[4] == "/"
        and line[7] == "/"
        and line[10] == " "
    )


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One logical log entry: a primary line plus its continuation lines."""

    lines: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("LogEntry requires at least one line")

    @property
    def timestamp(self) -> str:
        first = self.lines[0]
        if len(first) < TIMESTAMP_LENGTH:
            return ""
        return first[:TIMESTAMP_LENGTH]

    @property
    def raw_text(self) -> str:
        return "\n".join(self.lines)
