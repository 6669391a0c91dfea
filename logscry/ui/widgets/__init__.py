from __future__ import annotations

from .category_sidebar import CategorySidebar
from .event_log import EventLog
from .header_bar import HeaderBar
from .path_dialog import PathDialog
from .status_bar import StatusBar

__all__ = [
    "CategorySidebar",
    "EventLog",
    "HeaderBar",
    "PathDialog",
    "StatusBar",
]
