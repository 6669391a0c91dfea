from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from logscry.categorize.engine import Categorizer
from logscry.categorize.event import CategorizedEvent

from .assembler import EntryAssembler, assemble_entries
from .dedup import DedupFilter
from .entry import LogEntry
from .state import WatchState
from .tailer import FileTailer, read_backlog

log = logging.getLogger(__name__)

EventCallback = Callable[[CategorizedEvent], None]
ErrorCallback = Callable[[str], None]

DEFAULT_POLL_INTERVAL = 0.2


class WatchError(RuntimeError):
    """A log file could not be watched; the message is meant for the user."""


class WatchCancelled(WatchError):
    """The session was stopped or replaced before ``start`` finished."""


def iter_file_events(
    path: str | os.PathLike[str], categorizer: Categorizer
) -> Iterator[CategorizedEvent]:
    """Run one file through the whole pipeline without tailing it."""
    seen = DedupFilter()
    for entry in assemble_entries(read_backlog(path)):
        if seen.admit(entry):
            yield categorizer.categorize(entry)


class WatchManager:
    def __init__(
        self,
        on_event: EventCallback | None = None,
        categorizer: Categorizer | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        on_tail_error: ErrorCallback | None = None,
    ) -> None:
        self._state = WatchState()
        self._on_event = on_event
        self._on_tail_error = on_tail_error
        self._categorizer = categorizer or Categorizer.from_config()
        self._poll_interval = poll_interval
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tail: asyncio.Task | concurrent.futures.Future | None = None
        self._tails: set[asyncio.Task | concurrent.futures.Future] = set()
        self.total_events_emitted: int = 0

    @property
    def categorizer(self) -> Categorizer:
        return self._categorizer

    @property
    def is_watching(self) -> bool:
        with self._state.lock:
            return self._state.watching

    @property
    def current_path(self) -> Path | None:
        with self._state.lock:
            return self._state.current_path

    # ------------------------------------------------------------------
    # Event loop integration
    # ------------------------------------------------------------------

    def attach_to_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Loop used for the tail task when ``start`` runs off the loop thread."""
        self._loop = loop

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start(self, path: str | os.PathLike[str]) -> int:
        """Begin a new watch session on *path*.

        Emits every entry already in the file before returning, then hands
        off to a live tail task.  Returns the number of backlog events
        emitted.  Raises WatchError if the file cannot be read.
        """
        log_path = Path(path).expanduser()
        log.info("Attempting to watch file: %s", log_path)
        if not log_path.exists():
            raise WatchError(f"Log file does not exist: {log_path}")
        if not log_path.is_file():
            raise WatchError(f"Not a regular file: {log_path}")

        loop, on_loop_thread = self._tail_loop_target()

        with self._state.lock:
            generation = self._state.begin(log_path)

        # The tail resumes from end-of-file as it was *before* the backlog
        # scan; anything the scan also saw is dropped by the dedup filter.
        tailer = FileTailer(log_path)
        try:
            tailer.open()
            emitted = self._scan_backlog(log_path, generation)
        except OSError as exc:
            tailer.close()
            self._end_if_current(generation)
            raise WatchError(f"Failed to read log file: {exc}") from exc

        if not self._is_current(generation):
            tailer.close()
            raise WatchCancelled(f"Watching {log_path} was stopped during the backlog scan")

        log.info("Found %d existing log entries in %s", emitted, log_path)
        self._spawn_tail(loop, on_loop_thread, tailer, generation)
        return emitted

    def stop(self) -> bool:
        """End the current session; return False if nothing was being watched."""
        with self._state.lock:
            was_watching = self._state.watching
            path = self._state.current_path
            self._state.end()
        if was_watching:
            log.info("Stopped watching log file %s", path)
        return was_watching

    def close(self) -> None:
        self.stop()
        for tail in list(self._tails):
            tail.cancel()
        self._tail = None

    async def join(self) -> None:
        """Wait for the current tail task to finish."""
        tail = self._tail
        if tail is None:
            return
        if isinstance(tail, concurrent.futures.Future):
            tail = asyncio.wrap_future(tail)
        with contextlib.suppress(asyncio.CancelledError):
            await tail

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _scan_backlog(self, path: Path, generation: int) -> int:
        emitted = 0
        for entry in assemble_entries(read_backlog(path)):
            if not self._is_current(generation):
                log.info("Backlog scan of %s abandoned; session ended", path)
                break
            if self._dispatch(entry, generation):
                emitted += 1
        return emitted

    def _tail_loop_target(self) -> tuple[asyncio.AbstractEventLoop, bool]:
        """Loop the tail task will run on, and whether we are on its thread."""
        try:
            return asyncio.get_running_loop(), True
        except RuntimeError:
            pass
        if self._loop is not None and self._loop.is_running():
            return self._loop, False
        raise WatchError("No running event loop available for live tailing")

    def _spawn_tail(
        self,
        loop: asyncio.AbstractEventLoop,
        on_loop_thread: bool,
        tailer: FileTailer,
        generation: int,
    ) -> None:
        coro = self._tail_loop(tailer, generation)
        tail: asyncio.Task | concurrent.futures.Future
        if on_loop_thread:
            tail = loop.create_task(coro)
        else:
            tail = asyncio.run_coroutine_threadsafe(coro, loop)
        # Superseded tails keep running until their next generation check.
        self._tails.add(tail)
        tail.add_done_callback(self._tails.discard)
        self._tail = tail

    async def _tail_loop(self, tailer: FileTailer, generation: int) -> None:
        assembler = EntryAssembler()
        log.info("Started watching for new log entries in %s", tailer.path)
        try:
            while self._is_current(generation):
                try:
                    lines = tailer.read_lines()
                except OSError as exc:
                    log.error("Error reading log file %s: %s", tailer.path, exc)
                    self._end_if_current(generation)
                    self._report_tail_error(f"Failed to read log file: {exc}")
                    break

                if lines is None:
                    await asyncio.sleep(self._poll_interval)
                    continue

                for line in lines:
                    entry = assembler.feed(line)
                    if entry is not None:
                        self._dispatch(entry, generation)
                # Yield between chunks of a fast-growing file.
                await asyncio.sleep(0)
        finally:
            tailer.close()
            log.debug("Tail task for %s finished", tailer.path)

    def _dispatch(self, entry: LogEntry, generation: int) -> bool:
        with self._state.lock:
            if not self._state.is_current(generation):
                return False
            if not self._state.seen.admit(entry):
                return False

        event = self._categorizer.categorize(entry)
        self.total_events_emitted += 1
        if self._on_event is not None:
            try:
                self._on_event(event)
            except Exception:
                log.exception("Failed to emit log event")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        with self._state.lock:
            return self._state.is_current(generation)

    def _end_if_current(self, generation: int) -> None:
        with self._state.lock:
            if self._state.generation == generation:
                self._state.end()

    def _report_tail_error(self, message: str) -> None:
        if self._on_tail_error is None:
            return
        try:
            self._on_tail_error(message)
        except Exception:
            log.exception("Tail error callback failed")
