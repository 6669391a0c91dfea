from __future__ import annotations

from dataclasses import dataclass
from typing import Any

OPTIONAL_FIELDS: tuple[str, ...] = (
    "player_name",
    "character_class",
    "level",
    "chat_sender",
    "chat_channel",
)


@dataclass(frozen=True, slots=True)
class CategorizedEvent:
    """One categorized log entry as delivered to the display layer."""

    timestamp: str
    category: str
    message: str
    player_name: str | None = None
    character_class: str | None = None
    level: int | None = None
    chat_sender: str | None = None
    chat_channel: str | None = None

    @property
    def raw(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting optional fields that were never set."""
        data: dict[str, Any] = {
            "timestamp": self.timestamp,
            "category": self.category,
            "message": self.message,
            "raw": self.message,
        }
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data
