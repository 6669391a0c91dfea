from __future__ import annotations

import copy
import logging
import os
import tomllib
from pathlib import Path

from logscry.config.defaults import DEFAULT_CONFIG

log = logging.getLogger(__name__)


class ConfigManager:
    def __init__(self, config_path: str | None = None) -> None:
        if config_path is not None:
            self._config_path = Path(config_path).expanduser()
        else:
            xdg = os.environ.get("XDG_CONFIG_HOME", "~/.config")
            self._config_path = Path(xdg).expanduser() / "logscry" / "config.toml"
        self._config: dict = {}

    @property
    def path(self) -> Path:
        return self._config_path

    @property
    def config(self) -> dict:
        if not self._config:
            self._config = self.load()
        return self._config

    def load(self) -> dict:
        defaults = copy.deepcopy(DEFAULT_CONFIG)
        if not self._config_path.exists():
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            self.save(defaults)
            log.info("Wrote default config to %s", self._config_path)
            self._config = defaults
            return defaults

        with open(self._config_path, "rb") as f:
            user_config = tomllib.load(f)

        merged = self._deep_merge(defaults, user_config)
        self._config = merged
        return merged

    def _deep_merge(self, base: dict, override: dict) -> dict:
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self, config: dict | None = None) -> None:
        if config is None:
            config = self.config
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        toml_str = self._dict_to_toml(config)
        with open(self._config_path, "w") as f:
            f.write(toml_str)

    def get(self, key_path: str, default: object = None) -> object:
        keys = key_path.split(".")
        current: object = self.config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def set(self, key_path: str, value: object) -> None:
        """Set a dotted key in memory; call ``save()`` to persist it."""
        keys = key_path.split(".")
        current = self.config
        for key in keys[:-1]:
            nested = current.get(key)
            if not isinstance(nested, dict):
                nested = {}
                current[key] = nested
            current = nested
        current[keys[-1]] = value

    # ------------------------------------------------------------------
    # Minimal TOML serializer (no tomli_w dependency)
    # ------------------------------------------------------------------

    def _dict_to_toml(self, d: dict, prefix: str = "") -> str:
        lines: list[str] = []
        tables: list[tuple[str, dict]] = []
        table_arrays: list[tuple[str, list[dict]]] = []

        for key, value in d.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if value is None:
                # TOML has no null; leave the key out.
                continue
            if isinstance(value, dict):
                tables.append((full_key, value))
            elif _is_table_array(value):
                table_arrays.append((full_key, value))
            else:
                lines.append(f"{_toml_key(key)} = {self._toml_value(value)}")

        result = "\n".join(lines)
        for full_key, items in table_arrays:
            for item in items:
                section = self._dict_to_toml(item, prefix=full_key)
                result += f"\n\n[[{full_key}]]\n" + section
        for full_key, table in tables:
            section = self._dict_to_toml(table, prefix=full_key)
            header = f"\n\n[{full_key}]\n"
            result += header + section

        return result.lstrip("\n") + ("\n" if not prefix else "")

    @staticmethod
    def _toml_value(value: object) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return str(value)
        if isinstance(value, str):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        if isinstance(value, (list, tuple)):
            items = ", ".join(ConfigManager._toml_value(item) for item in value)
            return f"[{items}]"
        return str(value)


def _is_table_array(value: object) -> bool:
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(item, dict) for item in value)
    )


def _toml_key(key: str) -> str:
    if key.replace("_", "").replace("-", "").isalnum():
        return key
    return ConfigManager._toml_value(key)
