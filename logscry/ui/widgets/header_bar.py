from __future__ import annotations

from pathlib import Path

from textual.widgets import Static


class HeaderBar(Static):
    """Single-line top bar: app title, watched file, watch state and event count."""

    DEFAULT_CSS = """
    HeaderBar {
        height: 1;
        dock: top;
        padding: 0 1;
        background: $primary-background;
        color: $text;
        content-align: left middle;
    }
    """

    def __init__(self) -> None:
        super().__init__("logscry", id="header-bar")
        self._path: str = ""
        self._watching: bool = False
        self._event_count: int = 0
        self._refresh_content()

    @property
    def watching(self) -> bool:
        return self._watching

    def set_watch_state(self, watching: bool, path: str | None = None) -> None:
        self._watching = watching
        if path is not None:
            self._path = path
        self._refresh_content()

    def set_event_count(self, count: int) -> None:
        self._event_count = count
        self._refresh_content()

    def _refresh_content(self) -> None:
        parts = ["logscry"]
        if self._path:
            parts.append(short_path(self._path))
        parts.append("● WATCHING" if self._watching else "○ STOPPED")
        parts.append(f"{self._event_count:,} events")
        self.update(" | ".join(parts))


def short_path(path: str) -> str:
    """Last two components of *path*, e.g. ``logs/Client.txt``."""
    parts = Path(path).parts
    if len(parts) <= 2:
        return path
    return str(Path(*parts[-2:]))
