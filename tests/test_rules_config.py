from __future__ import annotations

import pytest

from logscry.categorize.rules import build_validators, rule_from_config, rules_from_config
from logscry.config.defaults import get_default_rules


@pytest.fixture
def validators():
    return build_validators()


def test_default_rules_all_load(validators) -> None:
    rules = rules_from_config(get_default_rules(), validators)
    assert [r.name for r in rules][:2] == ["Warnings", "Trade"]
    assert rules[1].validator is validators["chat"]


def test_get_default_rules_returns_copy() -> None:
    rules = get_default_rules()
    rules[0]["name"] = "Changed"
    assert get_default_rules()[0]["name"] == "Warnings"


def test_exclude_key_maps_to_excluded(validators) -> None:
    rule = rule_from_config({"name": "X", "priority": 2, "exclude": ["no"]}, validators)
    assert rule.excluded == ("no",)
    assert rule.required == ()


@pytest.mark.parametrize(
    "raw",
    [
        {"priority": 1},
        {"name": "", "priority": 1},
        {"name": "X"},
        {"name": "X", "priority": "1"},
        {"name": "X", "priority": True},
        {"name": "X", "priority": 1, "any_of": "abc"},
        {"name": "X", "priority": 1, "required": [1, 2]},
        {"name": "X", "priority": 1, "validator": "missing"},
        {"name": "X", "priority": 1, "colour": "red"},
    ],
)
def test_invalid_rules_raise(validators, raw) -> None:
    with pytest.raises(ValueError):
        rule_from_config(raw, validators)
