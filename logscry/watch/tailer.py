"""Line sources: a one-shot backlog reader and an incremental file tailer."""
from __future__ import annotations

import codecs
import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def read_backlog(path: str | os.PathLike[str]) -> Iterator[str]:
    """Yield every trimmed line currently in *path*, blank lines included."""
    # Split on "\n" only, exactly as FileTailer does.
    with open(path, "r", encoding="utf-8", errors="replace", newline="\n") as f:
        for line in f:
            yield line.strip()


class FileTailer:
    """Reads lines appended to a file after a given byte offset.

    Partial trailing lines (and UTF-8 sequences split across reads) are held
    back until the rest arrives.
    """

    def __init__(self, path: str | os.PathLike[str], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._path = Path(path)
        self._chunk_size = chunk_size
        self._file: BinaryIO | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._partial: str = ""
        self.total_bytes_read: int = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self, offset: int | None = None) -> int:
        """Open the file at *offset* (end of file when None); return the position."""
        self.close()
        f = open(self._path, "rb")
        try:
            if offset is None:
                position = f.seek(0, os.SEEK_END)
            else:
                position = f.seek(offset)
        except OSError:
            f.close()
            raise
        self._file = f
        log.debug("Opened %s at offset %d", self._path, position)
        return position

    def read_lines(self) -> list[str] | None:
        """Read the next chunk and return its complete lines.

        Returns None when no new bytes were available.
        """
        if self._file is None:
            raise RuntimeError(f"Tailer for {self._path} is not open")
        data = self._file.read(self._chunk_size)
        if not data:
            return None
        self.total_bytes_read += len(data)

        combined = self._partial + self._decoder.decode(data)
        parts = combined.split("\n")
        # The last element is a partial line (empty if data ended with \n).
        self._partial = parts[-1]
        return [line.strip() for line in parts[:-1]]

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        self._decoder.reset()
        self._partial = ""

    def __enter__(self) -> FileTailer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
