from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path

from .dedup import DedupFilter


@dataclass
class WatchState:
    """Shared state of the current watch session.

    Every field is read and written under ``lock``.  ``generation`` changes
    each time a session begins so a tail task left over from an earlier
    session can tell it has been superseded.
    """

    current_path: Path | None = None
    watching: bool = False
    generation: int = 0
    seen: DedupFilter = field(default_factory=DedupFilter)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def begin(self, path: Path) -> int:
        self.current_path = path
        self.watching = True
        self.seen.reset()
        self.generation += 1
        return self.generation

    def end(self) -> None:
        self.current_path = None
        self.watching = False
        self.seen.reset()

    def is_current(self, generation: int) -> bool:
        return self.watching and self.generation == generation
