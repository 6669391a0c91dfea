from __future__ import annotations

import logging
from collections import defaultdict

from logscry.config.defaults import DEFAULT_CONFIG

log = logging.getLogger("logscry.keys")

DEFAULT_KEYBINDINGS: dict[str, str] = dict(DEFAULT_CONFIG["keybindings"])


class KeybindManager:
    def __init__(self, user_bindings: dict[str, str] | None = None) -> None:
        self._bindings: dict[str, str] = dict(DEFAULT_KEYBINDINGS)
        self._conflicts: list[str] = []

        if user_bindings:
            for action, key in user_bindings.items():
                if action in self._bindings:
                    self._bindings[action] = key
                else:
                    log.warning("Ignoring binding for unknown action %r", action)

        self._detect_conflicts()

    def _detect_conflicts(self) -> None:
        key_to_actions: dict[str, list[str]] = defaultdict(list)
        for action, key in self._bindings.items():
            key_to_actions[key].append(action)

        self._conflicts = []
        for key, actions in key_to_actions.items():
            if len(actions) > 1:
                msg = f"Key '{key}' bound to multiple actions: {', '.join(actions)}"
                self._conflicts.append(msg)
                log.warning(msg)

    @property
    def conflicts(self) -> list[str]:
        return list(self._conflicts)

    def get_key(self, action: str) -> str | None:
        return self._bindings.get(action)

    def get_action(self, key: str) -> str | None:
        for action, bound_key in self._bindings.items():
            if bound_key == key:
                return action
        return None

    def get_all(self) -> dict[str, str]:
        return dict(self._bindings)
