from __future__ import annotations

import asyncio
import logging

import pytest

from logscry.categorize.engine import Categorizer
from logscry.categorize.event import CategorizedEvent
from logscry.watch.manager import WatchCancelled, WatchError, WatchManager, iter_file_events
from logscry.watch.tailer import FileTailer

L1 = "2024/12/14 18:01:02 1 2 [INFO Client 1] [SHADER] warmup"
L2 = "2024/12/14 18:01:03 1 2 [INFO Client 1] : Exile has been slain."
L3 = "2024/12/14 18:01:04 1 2 [INFO Client 1] $Alice: hello"
L4 = "2024/12/14 18:01:05 1 2 [INFO Client 1] [SOUND] Device opened"


async def _wait_for(predicate, timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


def _append(path, text: str) -> None:
    with open(path, "a") as f:
        f.write(text)


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "Client.txt"
    path.write_text(f"{L1}\ncontinued\n{L2}\n")
    return path


@pytest.mark.asyncio
async def test_backlog_delivered_before_start_returns(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append, poll_interval=0.01)

    assert manager.start(log_file) == 2
    assert [e.message for e in events] == [f"{L1}\ncontinued", L2]
    assert [e.category for e in events] == ["Graphics", "Death"]
    assert events[1].player_name == "Exile"
    assert manager.is_watching
    assert manager.current_path == log_file

    manager.close()
    await manager.join()


@pytest.mark.asyncio
async def test_tail_picks_up_appended_entries(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append, poll_interval=0.01)
    manager.start(log_file)

    _append(log_file, f"{L3}\n{L4}\n")
    await _wait_for(lambda: len(events) == 3)
    assert events[2].message == L3
    assert events[2].chat_sender == "Alice"

    # L4 stays open until another primary line arrives.
    await asyncio.sleep(0.05)
    assert len(events) == 3

    manager.close()
    await manager.join()


@pytest.mark.asyncio
async def test_duplicates_suppressed_across_backlog_and_tail(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_text(f"{L1}\n{L1}\n{L2}\n")
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append, poll_interval=0.01)

    assert manager.start(log_file) == 2

    _append(log_file, f"{L2}\n{L3}\n{L4}\n")
    await _wait_for(lambda: len(events) == 3)
    assert [e.message for e in events] == [L1, L2, L3]

    manager.close()
    await manager.join()


@pytest.mark.asyncio
async def test_restart_resets_dedup(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append, poll_interval=0.01)

    assert manager.start(log_file) == 2
    assert manager.stop()
    await manager.join()
    assert manager.start(log_file) == 2
    assert len(events) == 4

    manager.close()
    await manager.join()


@pytest.mark.asyncio
async def test_stop_ends_tail(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append, poll_interval=0.01)
    manager.start(log_file)

    assert manager.stop()
    assert not manager.stop()
    assert not manager.is_watching
    assert manager.current_path is None
    await asyncio.wait_for(manager.join(), timeout=2.0)

    _append(log_file, f"{L3}\n{L4}\n")
    await asyncio.sleep(0.05)
    assert len(events) == 2


@pytest.mark.asyncio
async def test_missing_file_raises(tmp_path) -> None:
    manager = WatchManager()
    with pytest.raises(WatchError, match="does not exist"):
        manager.start(tmp_path / "nope.txt")
    assert not manager.is_watching


@pytest.mark.asyncio
async def test_directory_raises(tmp_path) -> None:
    manager = WatchManager()
    with pytest.raises(WatchError, match="Not a regular file"):
        manager.start(tmp_path)
    assert not manager.is_watching


def test_start_without_event_loop_raises(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append)
    with pytest.raises(WatchError, match="event loop"):
        manager.start(log_file)
    assert events == []
    assert not manager.is_watching
    assert manager.current_path is None


@pytest.mark.asyncio
async def test_start_from_worker_thread(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(on_event=events.append, poll_interval=0.01)
    loop = asyncio.get_running_loop()
    manager.attach_to_loop(loop)

    emitted = await loop.run_in_executor(None, manager.start, log_file)
    assert emitted == 2

    _append(log_file, f"{L3}\n{L4}\n")
    await _wait_for(lambda: len(events) == 3)

    manager.stop()
    await asyncio.wait_for(manager.join(), timeout=2.0)


@pytest.mark.asyncio
async def test_sink_failure_is_logged(log_file, caplog) -> None:
    calls: list[CategorizedEvent] = []

    def sink(event: CategorizedEvent) -> None:
        calls.append(event)
        raise RuntimeError("display went away")

    manager = WatchManager(on_event=sink, poll_interval=0.01)
    with caplog.at_level(logging.ERROR, logger="logscry.watch.manager"):
        assert manager.start(log_file) == 2

    assert len(calls) == 2
    assert manager.total_events_emitted == 2
    assert "Failed to emit log event" in caplog.text

    manager.close()
    await manager.join()


@pytest.mark.asyncio
async def test_tail_read_error_ends_session(log_file, monkeypatch) -> None:
    errors: list[str] = []
    manager = WatchManager(poll_interval=0.01, on_tail_error=errors.append)
    manager.start(log_file)

    def broken(self):
        raise OSError("disk gone")

    monkeypatch.setattr(FileTailer, "read_lines", broken)
    await asyncio.wait_for(manager.join(), timeout=2.0)

    assert errors == ["Failed to read log file: disk gone"]
    assert not manager.is_watching


def test_iter_file_events(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_text(f"orphan\n{L1}\n{L1}\n{L3}\n")
    events = list(iter_file_events(log_file, Categorizer.from_config()))
    assert [e.category for e in events] == ["Graphics", "Trade"]


@pytest.mark.asyncio
async def test_stop_during_backlog_scan_cancels_start(log_file) -> None:
    events: list[CategorizedEvent] = []
    manager = WatchManager(poll_interval=0.01)

    def sink(event: CategorizedEvent) -> None:
        events.append(event)
        manager.stop()

    manager._on_event = sink
    loop = asyncio.get_running_loop()
    manager.attach_to_loop(loop)

    with pytest.raises(WatchCancelled):
        await loop.run_in_executor(None, manager.start, log_file)
    assert len(events) == 1
    assert not manager.is_watching
    assert manager._tails == set()


@pytest.mark.asyncio
async def test_superseded_tail_is_kept_until_it_exits(log_file) -> None:
    manager = WatchManager(poll_interval=0.01)
    manager.start(log_file)
    first = manager._tail
    manager.start(log_file)
    second = manager._tail

    assert first is not second
    assert first in manager._tails
    await asyncio.wait_for(first, timeout=2.0)
    await asyncio.sleep(0)
    assert manager._tails == {second}

    manager.close()
    await asyncio.gather(second, return_exceptions=True)
    await asyncio.sleep(0)
    assert second.cancelled()
    assert manager._tails == set()
