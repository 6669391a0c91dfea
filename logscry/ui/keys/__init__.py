from __future__ import annotations

from .manager import DEFAULT_KEYBINDINGS, KeybindManager

__all__ = ["DEFAULT_KEYBINDINGS", "KeybindManager"]
