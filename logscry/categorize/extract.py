"""Best-effort extraction of structured fields from categorized entries.

Every extractor returns None when the text does not have the expected shape;
nothing here raises on odd input.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .chat import extract_chat_info, message_body
from .event import CategorizedEvent

DEATH = "Death"
LEVEL_UP = "Level Up"
TRADE = "Trade"
GUILD = "Guild"

# ": PlayerName has been slain."
_DEATH_RE = re.compile(r"^(?:: )?(\w+) has been slain")
# ": CharName (Class) is now level 12"
_LEVEL_UP_RE = re.compile(r"^(?:: )?(.+?) \((.+?)\) is now level ([0-9]+)")


@dataclass(frozen=True, slots=True)
class LevelUpInfo:
    name: str
    character_class: str
    level: int


def extract_death_info(text: str) -> str | None:
    m = _DEATH_RE.match(message_body(text))
    if m is None:
        return None
    return m.group(1)


def extract_level_up_info(text: str) -> LevelUpInfo | None:
    m = _LEVEL_UP_RE.match(message_body(text))
    if m is None:
        return None
    name, character_class, digits = m.groups()
    if not name.strip() or not character_class.strip():
        return None
    return LevelUpInfo(name=name, character_class=character_class, level=int(digits))


def build_event(timestamp: str, category: str, text: str) -> CategorizedEvent:
    """Create the event for *text*, filling the fields its category carries."""
    if category == DEATH:
        return CategorizedEvent(
            timestamp, category, text, player_name=extract_death_info(text)
        )

    if category == LEVEL_UP:
        info = extract_level_up_info(text)
        if info is None:
            return CategorizedEvent(timestamp, category, text)
        return CategorizedEvent(
            timestamp,
            category,
            text,
            player_name=info.name,
            character_class=info.character_class,
            level=info.level,
        )

    if category in (TRADE, GUILD):
        chat = extract_chat_info(text)
        if chat is None:
            return CategorizedEvent(timestamp, category, text)
        return CategorizedEvent(
            timestamp,
            category,
            text,
            chat_sender=chat.sender,
            chat_channel=chat.channel.value,
        )

    return CategorizedEvent(timestamp, category, text)
