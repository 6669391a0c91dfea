from __future__ import annotations

from textual.message import Message

from logscry.categorize.event import CategorizedEvent


class LogEventReceived(Message):
    """A categorized event came out of the watch pipeline."""

    def __init__(self, event: CategorizedEvent, session: int = 0) -> None:
        super().__init__()
        self.event = event
        self.session = session


class WatchStateChanged(Message):
    """Watching started or stopped."""

    def __init__(self, watching: bool, path: str | None = None) -> None:
        super().__init__()
        self.watching = watching
        self.path = path


class WatchFailed(Message):
    """Watching could not start, or the live tail gave up."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message


class FiltersChanged(Message):
    """The category selection or search text in the sidebar changed."""

    def __init__(self, categories: frozenset[str], search: str) -> None:
        super().__init__()
        self.categories = categories
        self.search = search
