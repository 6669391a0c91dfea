from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, SelectionList
from textual.widgets.selection_list import Selection

from logscry.ui.events import FiltersChanged


class CategorySidebar(Vertical):
    """Left sidebar with the search box, category checklist and filter presets."""

    DEFAULT_CSS = """
    CategorySidebar {
        width: 30;
        dock: left;
        background: $surface;
        border-right: solid $primary;
    }

    CategorySidebar #event-search {
        margin: 1 1 0 1;
    }

    CategorySidebar #category-title {
        margin: 1 1 0 1;
        color: $text-muted;
    }

    CategorySidebar #category-list {
        height: 1fr;
        margin: 0 1;
    }

    CategorySidebar .preset-row {
        height: auto;
        margin: 0 1;
    }

    CategorySidebar .preset-row Button {
        width: 1fr;
        min-width: 6;
    }
    """

    def __init__(
        self,
        categories: list[str],
        presets: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(id="category-sidebar")
        self._categories = list(categories)
        self._presets = dict(presets or {})

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Search events...", id="event-search")
        yield Label("Categories", id="category-title")
        yield SelectionList[str](
            *(Selection(name, name, False) for name in self._categories),
            id="category-list",
        )
        buttons = [
            Button(name.title(), id=f"preset-{name}", classes="preset")
            for name in self._presets
        ]
        buttons.append(Button("All", id="select-all", classes="preset"))
        buttons.append(Button("Clear", id="select-none", classes="preset"))
        for start in range(0, len(buttons), 2):
            yield Horizontal(*buttons[start:start + 2], classes="preset-row")

    @property
    def selected_categories(self) -> frozenset[str]:
        return frozenset(self.query_one("#category-list", SelectionList).selected)

    @property
    def search_text(self) -> str:
        return self.query_one("#event-search", Input).value.strip()

    def focus_search(self) -> None:
        self.query_one("#event-search", Input).focus()

    def apply_preset(self, name: str) -> None:
        """Select exactly the categories of preset *name*."""
        wanted = self._presets.get(name)
        if wanted is None:
            return
        selection = self.query_one("#category-list", SelectionList)
        selection.deselect_all()
        for category in wanted:
            if category in self._categories:
                selection.select(category)
        self._post_filters()

    def select_all(self) -> None:
        self.query_one("#category-list", SelectionList).select_all()
        self._post_filters()

    def select_none(self) -> None:
        self.query_one("#category-list", SelectionList).deselect_all()
        self._post_filters()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        event.stop()
        if button_id == "select-all":
            self.select_all()
        elif button_id == "select-none":
            self.select_none()
        elif button_id.startswith("preset-"):
            self.apply_preset(button_id.removeprefix("preset-"))

    def on_selection_list_selected_changed(
        self, event: SelectionList.SelectedChanged
    ) -> None:
        event.stop()
        self._post_filters()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "event-search":
            return
        event.stop()
        self._post_filters()

    def _post_filters(self) -> None:
        self.post_message(FiltersChanged(self.selected_categories, self.search_text))
