from __future__ import annotations

import hashlib

from .entry import LogEntry


def fingerprint(text: str) -> int:
    """64-bit digest of *text* used as the dedup key."""
    digest = hashlib.blake2b(text.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


class DedupFilter:
    """Session-scoped record of entries already delivered.

    Grows for the lifetime of a watch session and only shrinks on ``reset``.
    Two different texts sharing a fingerprint will suppress the second one.
    """

    def __init__(self) -> None:
        self._seen: set[int] = set()

    def admit(self, entry: LogEntry) -> bool:
        key = fingerprint(entry.raw_text)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def reset(self) -> None:
        self._seen.clear()

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, LogEntry):
            return False
        return fingerprint(entry.raw_text) in self._seen

    def __len__(self) -> int:
        return len(self._seen)
