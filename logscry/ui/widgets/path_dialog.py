from __future__ import annotations

from pathlib import Path

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label

# Result: the chosen path, or None on cancel
PathDialogResult = str | None


class PathDialog(ModalScreen[PathDialogResult]):
    """Modal dialog that asks for the log file to watch."""

    DEFAULT_CSS = """
    PathDialog {
        align: center middle;
    }

    PathDialog #dialog-box {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    PathDialog #path-input {
        margin-top: 1;
    }

    PathDialog #path-error {
        margin-top: 1;
        color: $error;
        display: none;
    }

    PathDialog #hint-label {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, default_path: str = "") -> None:
        super().__init__()
        self._default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog-box"):
            yield Label("Log file to watch:")
            yield Input(
                value=self._default_path,
                placeholder="e.g. ~/Games/Path of Exile 2/logs/Client.txt",
                id="path-input",
            )
            yield Label("", id="path-error")
            yield Label("Enter to watch, Escape to cancel", id="hint-label")

    def on_mount(self) -> None:
        self.query_one("#path-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        value = event.value.strip()
        if not value:
            self._show_error("Enter a file path")
            return
        if not Path(value).expanduser().is_file():
            self._show_error(f"No such file: {value}")
            return
        self.dismiss(value)

    def _show_error(self, message: str) -> None:
        label = self.query_one("#path-error", Label)
        label.update(message)
        label.display = True

    def key_escape(self) -> None:
        self.dismiss(None)
