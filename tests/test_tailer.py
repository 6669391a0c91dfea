from __future__ import annotations

import pytest

from logscry.watch.tailer import FileTailer, read_backlog


def test_read_backlog_strips_lines(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_text("one  \r\n\n  two\n")
    assert list(read_backlog(log_file)) == ["one", "", "two"]


def test_read_backlog_replaces_invalid_utf8(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_bytes(b"ok \xff line\n")
    assert list(read_backlog(log_file)) == ["ok � line"]


def test_tailer_starts_at_end_of_file(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_text("old line\n")
    with FileTailer(log_file) as tailer:
        position = tailer.open()
        assert position == len("old line\n")
        assert tailer.read_lines() is None

        with open(log_file, "a") as f:
            f.write("new line\n")
        assert tailer.read_lines() == ["new line"]


def test_tailer_holds_partial_line(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_text("")
    with FileTailer(log_file) as tailer:
        tailer.open()
        with open(log_file, "a") as f:
            f.write("half")
        assert tailer.read_lines() == []
        with open(log_file, "a") as f:
            f.write(" done\nnext")
        assert tailer.read_lines() == ["half done"]


def test_tailer_joins_split_utf8_sequence(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    encoded = "héllo\n".encode("utf-8")
    log_file.write_bytes(b"")
    with FileTailer(log_file) as tailer:
        tailer.open()
        with open(log_file, "ab") as f:
            f.write(encoded[:2])
        assert tailer.read_lines() == []
        with open(log_file, "ab") as f:
            f.write(encoded[2:])
        assert tailer.read_lines() == ["héllo"]
        assert tailer.total_bytes_read == len(encoded)


def test_tailer_open_at_offset(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    log_file.write_text("aaa\nbbb\n")
    with FileTailer(log_file) as tailer:
        tailer.open(offset=4)
        assert tailer.read_lines() == ["bbb"]


def test_read_before_open_raises(tmp_path) -> None:
    tailer = FileTailer(tmp_path / "missing.txt")
    assert not tailer.is_open
    with pytest.raises(RuntimeError):
        tailer.read_lines()


def test_open_missing_file_raises_oserror(tmp_path) -> None:
    tailer = FileTailer(tmp_path / "missing.txt")
    with pytest.raises(OSError):
        tailer.open()


def test_backlog_and_tailer_split_lines_alike(tmp_path) -> None:
    log_file = tmp_path / "Client.txt"
    data = b"first\rstill first\r\nsecond\n"
    log_file.write_bytes(data)
    backlog = list(read_backlog(log_file))

    with FileTailer(log_file) as tailer:
        tailer.open(offset=0)
        assert tailer.read_lines() == backlog
    assert backlog == ["first\rstill first", "second"]
