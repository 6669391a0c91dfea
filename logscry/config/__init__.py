from __future__ import annotations

from .defaults import DEFAULT_CONFIG, FALLBACK_CATEGORY, get_default_rules, get_filter_presets
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG",
    "FALLBACK_CATEGORY",
    "get_default_rules",
    "get_filter_presets",
]
