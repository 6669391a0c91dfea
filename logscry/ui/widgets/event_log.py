from __future__ import annotations

import re
from collections import deque
from typing import Iterable

from rich.text import Text
from textual.widgets import RichLog

from logscry.categorize.event import CategorizedEvent

CATEGORY_STYLES: dict[str, str] = {
    "Death": "bold red",
    "Level Up": "bold green",
    "Skill": "magenta",
    "Dialogue": "yellow",
    "Guild": "green",
    "Item Filter": "hot_pink",
    "Trade": "bold cyan",
    "Gameplay": "orange1",
    "Network": "dark_orange",
    "Graphics": "blue",
    "Engine": "grey50",
    "Audio": "slate_blue1",
    "Warnings": "bold indian_red",
}
DEFAULT_STYLE = "grey62"

CATEGORY_ICONS: dict[str, str] = {
    "Death": "💀",
    "Level Up": "🎉",
    "Skill": "⭐",
    "Trade": "💰",
    "Dialogue": "💬",
    "Guild": "🏛",
    "Item Filter": "🔍",
    "Gameplay": "🎮",
    "Network": "🌐",
    "Graphics": "🎨",
    "Engine": "⚙",
    "Audio": "🔊",
    "Warnings": "⚠",
}
DEFAULT_ICON = "📝"

SHORT_NAMES: dict[str, str] = {
    "Item Filter": "Filter",
    "Level Up": "LvlUp",
    "Dialogue": "Dialog",
    "Graphics": "GFX",
    "Warnings": "Warn",
}

_WHISPER_RE = re.compile(r"@From ([^:]+): (.+)", re.DOTALL)
_SKILL_RE = re.compile(r"have received ([^.]+)")
_LEVEL_UP_RE = re.compile(r"(\w+) \([^)]+\) is now level (\d+)")


def category_style(category: str) -> str:
    return CATEGORY_STYLES.get(category, DEFAULT_STYLE)


def category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, DEFAULT_ICON)


def short_category(category: str) -> str:
    return SHORT_NAMES.get(category, category)


def format_timestamp(timestamp: str) -> str:
    """``YYYY/MM/DD HH:MM:SS`` -> ``HH:MM:SS``; ``??:??:??`` when missing."""
    if not timestamp:
        return "??:??:??"
    _, _, time_part = timestamp.partition(" ")
    return time_part or timestamp


def format_message(event: CategorizedEvent) -> str:
    """Display text for *event*: timestamp stripped, common lines reworded."""
    message = event.message
    if event.timestamp and message.startswith(event.timestamp):
        message = message[len(event.timestamp):].strip()

    if event.category == "Trade" and "@From" in message:
        match = _WHISPER_RE.search(message)
        if match:
            return f"{match.group(1)}: {match.group(2)}"

    if event.category == "Skill" and "have received" in message:
        message = _SKILL_RE.sub(r"gained \1", message, count=1)
    elif event.category == "Level Up" and "is now level" in message:
        message = _LEVEL_UP_RE.sub(r"\1 reached level \2!", message, count=1)
    elif event.category == "Death" and "has been slain" in message:
        message = message.replace("has been slain", "was slain", 1)

    return message


def event_matches(
    event: CategorizedEvent, categories: Iterable[str], search: str = ""
) -> bool:
    """True if *event* passes the category selection and search text.

    An empty category selection lets every category through.  The search is
    a case-insensitive substring match on the message or the category name.
    """
    categories = frozenset(categories)
    if categories and event.category not in categories:
        return False
    if not search:
        return True
    needle = search.lower()
    return needle in event.message.lower() or needle in event.category.lower()


def render_event(event: CategorizedEvent, search: str = "") -> Text:
    style = category_style(event.category)
    text = Text()
    text.append(format_timestamp(event.timestamp), style="dim")
    text.append(" ")
    text.append(
        f"{category_icon(event.category)} {short_category(event.category):<8}",
        style=style,
    )
    text.append(" ")
    text.append(format_message(event), style=style)
    if search:
        text.highlight_words([search], style="black on yellow", case_sensitive=False)
    return text


class EventLog(RichLog):
    """Scrolling view of categorized events with category and search filters.

    Keeps the last ``max_events`` events so the view can be rebuilt when the
    filters change.
    """

    DEFAULT_CSS = """
    EventLog {
        height: 1fr;
        background: $background;
        scrollbar-size-vertical: 1;
    }
    """

    def __init__(self, max_events: int = 20000) -> None:
        super().__init__(
            id="event-log",
            max_lines=max_events,
            wrap=True,
            markup=False,
            highlight=False,
            auto_scroll=True,
        )
        self._history: deque[CategorizedEvent] = deque(maxlen=max_events)
        self._categories: frozenset[str] = frozenset()
        self._search_text: str = ""
        self._shown: int = 0

    @property
    def total_count(self) -> int:
        return len(self._history)

    @property
    def shown_count(self) -> int:
        return self._shown

    @property
    def categories(self) -> frozenset[str]:
        return self._categories

    @property
    def search(self) -> str:
        return self._search_text

    def add_event(self, event: CategorizedEvent) -> bool:
        """Record *event*; return True if it passed the filters and was written."""
        if len(self._history) == self._history.maxlen:
            evicted = self._history[0]
            if self._matches(evicted):
                self._shown -= 1
        self._history.append(event)
        if not self._matches(event):
            return False
        self.write(render_event(event, self._search_text))
        self._shown += 1
        return True

    def set_filters(self, categories: Iterable[str], search: str = "") -> None:
        self._categories = frozenset(categories)
        self._search_text = search.strip()
        self._rebuild()

    def clear_events(self) -> None:
        self._history.clear()
        self._shown = 0
        self.clear()

    def visible_events(self) -> list[CategorizedEvent]:
        return [event for event in self._history if self._matches(event)]

    def _matches(self, event: CategorizedEvent) -> bool:
        return event_matches(event, self._categories, self._search_text)

    def _rebuild(self) -> None:
        self.clear()
        self._shown = 0
        for event in self._history:
            if self._matches(event):
                self.write(render_event(event, self._search_text))
                self._shown += 1
