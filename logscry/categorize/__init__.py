from __future__ import annotations

from .chat import ChatChannel, ChatInfo, detect_chat_channel, extract_chat_info, is_chat_message
from .dialogue import DialogueHeuristic
from .engine import Categorizer
from .event import CategorizedEvent
from .rules import CategoryRule

__all__ = [
    "CategorizedEvent",
    "Categorizer",
    "CategoryRule",
    "ChatChannel",
    "ChatInfo",
    "DialogueHeuristic",
    "detect_chat_channel",
    "extract_chat_info",
    "is_chat_message",
]
