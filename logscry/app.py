from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Input

from logscry.categorize.engine import Categorizer
from logscry.categorize.event import CategorizedEvent
from logscry.config.defaults import get_filter_presets
from logscry.config.manager import ConfigManager
from logscry.ui.events import (
    FiltersChanged,
    LogEventReceived,
    WatchFailed,
    WatchStateChanged,
)
from logscry.ui.keys.manager import KeybindManager
from logscry.ui.widgets import (
    CategorySidebar,
    EventLog,
    HeaderBar,
    PathDialog,
    StatusBar,
)
from logscry.utils.logger import setup_logging
from logscry.watch.manager import (
    DEFAULT_POLL_INTERVAL,
    WatchCancelled,
    WatchError,
    WatchManager,
)

log = logging.getLogger("logscry.app")


class LogscryApp(App):
    CSS = """
    Screen {
        background: #111418;
        color: #d4d4d4;
    }

    #main-content {
        height: 1fr;
        width: 1fr;
    }

    #event-log {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(
        self,
        config_path: str | None = None,
        log_path: str | None = None,
        verbose: bool = False,
    ) -> None:
        self._config_manager = ConfigManager(config_path)
        cfg = self._config_manager.config

        super().__init__()

        general_cfg = cfg.get("general", {})
        log_level = "DEBUG" if verbose else str(general_cfg.get("log_level", "INFO"))
        log_file = str(general_cfg.get("log_file", ""))
        setup_logging(log_file=log_file, log_level=log_level)

        self._keybind_manager = KeybindManager(cfg.get("keybindings"))
        self._max_events = max(int(general_cfg.get("max_events", 20000)), 1)

        watch_cfg = cfg.get("watch", {})
        poll_ms = watch_cfg.get("poll_interval_ms")
        poll_interval = max(int(poll_ms), 10) / 1000 if poll_ms else DEFAULT_POLL_INTERVAL
        self._remember_last_file = bool(watch_cfg.get("remember_last_file", True))
        last_file = str(watch_cfg.get("last_file", "")).strip()
        if log_path:
            self._initial_path: str | None = log_path
        elif last_file and bool(watch_cfg.get("auto_start", True)):
            self._initial_path = last_file
        else:
            self._initial_path = None
        self._last_path: str | None = log_path or last_file or None

        self._categorizer = Categorizer.from_config(cfg)
        self._presets = get_filter_presets(cfg)
        self._watch_manager = WatchManager(
            on_event=self._handle_log_event,
            categorizer=self._categorizer,
            poll_interval=poll_interval,
            on_tail_error=self._handle_tail_error,
        )
        self._start_pending = False
        self._watch_session = 0

    @property
    def watcher(self) -> WatchManager:
        return self._watch_manager

    def compose(self) -> ComposeResult:
        yield HeaderBar()
        with Horizontal(id="main-content"):
            yield CategorySidebar(self._categorizer.category_names, self._presets)
            yield EventLog(max_events=self._max_events)
        yield StatusBar(self._keybind_manager)

    def on_mount(self) -> None:
        self._watch_manager.attach_to_loop(asyncio.get_running_loop())
        self.query_one(EventLog).focus()
        if self._initial_path:
            self.call_later(self.start_watching, self._initial_path)
        log.info("logscry started")

    def on_unmount(self) -> None:
        self._watch_manager.close()
        log.info("logscry stopped")

    # ------------------------------------------------------------------
    # Watch manager callbacks (backlog events arrive from a worker thread)
    # ------------------------------------------------------------------

    def _handle_log_event(self, event: CategorizedEvent) -> None:
        self.post_message(LogEventReceived(event, self._watch_session))

    def _handle_tail_error(self, message: str) -> None:
        self.post_message(WatchFailed(message))
        self.post_message(WatchStateChanged(False))

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_log_event_received(self, message: LogEventReceived) -> None:
        if message.session != self._watch_session:
            return
        event_log = self.query_one(EventLog)
        event_log.add_event(message.event)
        self._update_counts()

    def on_watch_state_changed(self, message: WatchStateChanged) -> None:
        self.query_one(HeaderBar).set_watch_state(message.watching, message.path)

    def on_watch_failed(self, message: WatchFailed) -> None:
        self.query_one(StatusBar).set_error(message.message)
        self.notify(message.message, title="Watch failed", severity="error")

    def on_filters_changed(self, message: FiltersChanged) -> None:
        self.query_one(EventLog).set_filters(message.categories, message.search)
        self._update_counts()

    def on_key(self, event: events.Key) -> None:
        if isinstance(self.screen, PathDialog):
            return
        if isinstance(self.focused, Input):
            if event.key == "escape":
                self.query_one(EventLog).focus()
                event.stop()
            return

        action = self._keybind_manager.get_action(event.key)
        if action is None:
            return
        method = getattr(self, f"action_{action}", None)
        if method is None:
            return
        event.stop()
        if asyncio.iscoroutinefunction(method):
            self.call_later(method)
        else:
            method()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_open_file(self) -> None:
        self.push_screen(PathDialog(self._last_path or ""), callback=self._handle_path_chosen)

    def _handle_path_chosen(self, path: str | None) -> None:
        if path is None:
            return
        self.call_later(self.start_watching, path)

    async def action_toggle_watch(self) -> None:
        if self._watch_manager.is_watching:
            self.stop_watching()
        elif self._last_path:
            await self.start_watching(self._last_path)
        else:
            self.action_open_file()

    def action_clear_view(self) -> None:
        self.query_one(EventLog).clear_events()
        self._update_counts()

    def action_focus_search(self) -> None:
        self.query_one(CategorySidebar).focus_search()

    # ------------------------------------------------------------------
    # Watch control
    # ------------------------------------------------------------------

    async def start_watching(self, path: str) -> bool:
        """Start watching *path*, replacing any current session.

        The backlog scan runs in the default executor so a large file does
        not freeze the screen.  Returns False if the file could not be read
        or the session was stopped before the scan finished.
        """
        if self._start_pending:
            log.debug("Ignoring start request for %s; a start is in progress", path)
            return False
        self._start_pending = True
        try:
            self._watch_manager.stop()
            # Events still queued from the previous session are dropped.
            self._watch_session += 1
            self.query_one(EventLog).clear_events()
            self.query_one(StatusBar).set_error("")
            self._update_counts()

            loop = asyncio.get_running_loop()
            try:
                emitted = await loop.run_in_executor(None, self._watch_manager.start, path)
            except WatchCancelled as exc:
                log.info("%s", exc)
                self.post_message(WatchStateChanged(False))
                return False
            except WatchError as exc:
                log.warning("Could not watch %s: %s", path, exc)
                self.post_message(WatchFailed(str(exc)))
                self.post_message(WatchStateChanged(False))
                return False
        finally:
            self._start_pending = False

        if not self._watch_manager.is_watching:
            self.post_message(WatchStateChanged(False))
            return False

        resolved = str(Path(path).expanduser())
        self._last_path = resolved
        log.info("Watching %s (%d existing entries)", resolved, emitted)
        self.post_message(WatchStateChanged(True, resolved))
        self._remember_path(resolved)
        return True

    def stop_watching(self) -> None:
        if self._watch_manager.stop():
            self.post_message(WatchStateChanged(False))

    def _remember_path(self, path: str) -> None:
        if not self._remember_last_file:
            return
        if self._config_manager.get("watch.last_file") == path:
            return
        self._config_manager.set("watch.last_file", path)
        try:
            self._config_manager.save()
        except OSError:
            log.exception("Failed to save last watched file to config")

    def _update_counts(self) -> None:
        event_log = self.query_one(EventLog)
        self.query_one(StatusBar).update_counts(event_log.shown_count, event_log.total_count)
        self.query_one(HeaderBar).set_event_count(event_log.total_count)
