from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from .chat import is_chat_message
from .dialogue import DialogueHeuristic

Validator = Callable[[str], bool]

_LIST_KEYS: tuple[str, ...] = ("required", "any_of", "exclude")
_KNOWN_KEYS = frozenset({"name", "priority", "validator", *_LIST_KEYS})


@dataclass(frozen=True, slots=True)
class CategoryRule:
    name: str
    priority: int
    required: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()
    validator: Validator | None = None

    def matches(self, text: str) -> bool:
        # Stages run cheapest-first and short-circuit.
        if any(s in text for s in self.excluded):
            return False
        if not all(s in text for s in self.required):
            return False
        if self.any_of and not any(s in text for s in self.any_of):
            return False
        if self.validator is not None and not self.validator(text):
            return False
        return True


def build_validators(dialogue_cfg: Mapping[str, Any] | None = None) -> dict[str, Validator]:
    """Named validators a rule may reference via its ``validator`` key."""
    return {
        "chat": is_chat_message,
        "npc_dialogue": DialogueHeuristic.from_config(dict(dialogue_cfg or {})),
    }


def rule_from_config(raw: Mapping[str, Any], validators: Mapping[str, Validator]) -> CategoryRule:
    """Build one rule from a config table, raising ValueError on bad input."""
    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown keys in category rule: {', '.join(sorted(unknown))}")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Category rule needs a non-empty name: {dict(raw)!r}")

    priority = raw.get("priority")
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ValueError(f"Category rule {name!r} needs an integer priority")

    lists: dict[str, tuple[str, ...]] = {}
    for key in _LIST_KEYS:
        values = raw.get(key, [])
        if not isinstance(values, (list, tuple)) or not all(isinstance(v, str) for v in values):
            raise ValueError(f"Category rule {name!r}: {key} must be a list of strings")
        lists[key] = tuple(values)

    validator: Validator | None = None
    validator_name = raw.get("validator")
    if validator_name:
        try:
            validator = validators[validator_name]
        except KeyError:
            raise ValueError(
                f"Category rule {name!r} references unknown validator {validator_name!r}"
            ) from None

    return CategoryRule(
        name=name,
        priority=priority,
        required=lists["required"],
        any_of=lists["any_of"],
        excluded=lists["exclude"],
        validator=validator,
    )


def rules_from_config(
    raw_rules: Iterable[Mapping[str, Any]],
    validators: Mapping[str, Validator],
) -> list[CategoryRule]:
    return [rule_from_config(raw, validators) for raw in raw_rules]
