from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from logscry.config.defaults import DEFAULT_DIALOGUE, FALLBACK_CATEGORY, get_default_rules

from .event import CategorizedEvent
from .extract import build_event
from .rules import CategoryRule, build_validators, rules_from_config

if TYPE_CHECKING:
    from logscry.watch.entry import LogEntry

log = logging.getLogger(__name__)


class Categorizer:
    def __init__(self, rules: Iterable[CategoryRule], fallback: str = FALLBACK_CATEGORY) -> None:
        # sorted() is stable: equal priorities keep declaration order.
        self._rules: tuple[CategoryRule, ...] = tuple(
            sorted(rules, key=lambda rule: rule.priority)
        )
        self._fallback = fallback

    @classmethod
    def from_config(cls, cfg: dict[str, Any] | None = None) -> Categorizer:
        """Build from a full config dict (``categories`` + ``dialogue`` sections)."""
        cfg = cfg or {}
        categories_cfg = cfg.get("categories", {})
        raw_rules = categories_cfg.get("rules")
        if raw_rules is None:
            raw_rules = get_default_rules()
        fallback = str(categories_cfg.get("fallback", FALLBACK_CATEGORY))
        validators = build_validators(cfg.get("dialogue", DEFAULT_DIALOGUE))
        rules = rules_from_config(raw_rules, validators)
        log.debug("Loaded %d category rules (fallback %r)", len(rules), fallback)
        return cls(rules, fallback=fallback)

    @property
    def rules(self) -> tuple[CategoryRule, ...]:
        return self._rules

    @property
    def fallback(self) -> str:
        return self._fallback

    @property
    def category_names(self) -> list[str]:
        """Every category this categorizer can emit, in evaluation order."""
        names: list[str] = []
        for rule in self._rules:
            if rule.name not in names:
                names.append(rule.name)
        if self._fallback not in names:
            names.append(self._fallback)
        return names

    def classify(self, text: str) -> str:
        for rule in self._rules:
            if rule.matches(text):
                return rule.name
        return self._fallback

    def categorize(self, entry: LogEntry) -> CategorizedEvent:
        text = entry.raw_text
        return build_event(entry.timestamp, self.classify(text), text)
