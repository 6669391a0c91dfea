from __future__ import annotations

from .entry import LogEntry, is_primary_line
from .assembler import EntryAssembler, assemble_entries
from .dedup import DedupFilter, fingerprint
from .tailer import FileTailer, read_backlog
from .state import WatchState
from .manager import WatchCancelled, WatchError, WatchManager, iter_file_events

__all__ = [
    "LogEntry",
    "is_primary_line",
    "EntryAssembler",
    "assemble_entries",
    "DedupFilter",
    "fingerprint",
    "FileTailer",
    "read_backlog",
    "WatchState",
    "WatchCancelled",
    "WatchError",
    "WatchManager",
    "iter_file_events",
]
