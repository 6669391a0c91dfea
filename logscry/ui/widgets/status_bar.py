from __future__ import annotations

from textual.widgets import Static

from logscry.ui.keys import KeybindManager


class StatusBar(Static):
    """Bottom status bar showing event counts, the last error and key hints."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        dock: bottom;
        background: $primary-background;
        color: $text;
        padding: 0 1;
        content-align: center middle;
    }
    """

    def __init__(self, keybindings: KeybindManager | None = None) -> None:
        super().__init__("", id="status-bar")
        self._keybindings = keybindings or KeybindManager()
        self._shown: int = 0
        self._total: int = 0
        self._error: str = ""
        self._refresh_display()

    @property
    def error(self) -> str:
        return self._error

    def update_counts(self, shown: int, total: int) -> None:
        self._shown = shown
        self._total = total
        self._refresh_display()

    def set_error(self, message: str) -> None:
        """Show *message* until cleared. Empty string hides it."""
        self._error = message
        self._refresh_display()

    def _refresh_display(self) -> None:
        parts = [f"Showing {self._shown:,} of {self._total:,}"]
        if self._error:
            parts.append(f"Error: {self._error}")
        hints = [
            ("open_file", "Open"),
            ("toggle_watch", "Start/Stop"),
            ("clear_view", "Clear"),
            ("focus_search", "Search"),
            ("quit", "Quit"),
        ]
        parts.append(
            " | ".join(
                f"{self._keybindings.get_key(action)} {label}"
                for action, label in hints
                if self._keybindings.get_key(action)
            )
        )
        self.update("  ".join(parts))
