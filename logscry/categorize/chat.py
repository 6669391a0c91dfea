from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

WHISPER_MARKER = "@From "
TRADE_MARKERS: tuple[str, ...] = ("Trade accepted", "Trade cancelled")
GUILD_SYSTEM_PREFIX = "&: "


class ChatChannel(Enum):
    GLOBAL = "global"  # $Sender: text
    LOCAL = "local"  # #Sender: text
    GUILD = "guild"  # &Sender: text
    GUILD_SYSTEM = "guild_system"  # &: ANNOUNCEMENT
    WHISPER = "whisper"  # @From Sender: text
    TRADE = "trade"  # Trade accepted / cancelled


@dataclass(frozen=True, slots=True)
class ChatInfo:
    channel: ChatChannel
    sender: str | None = None


def message_body(text: str) -> str:
    """Strip the log-level prefix: everything up to the last ``"] "``."""
    pos = text.rfind("] ")
    if pos == -1:
        return text
    return text[pos + 2:]


def detect_chat_channel(text: str) -> ChatChannel | None:
    if WHISPER_MARKER in text:
        return ChatChannel.WHISPER
    if any(marker in text for marker in TRADE_MARKERS):
        return ChatChannel.TRADE

    body = message_body(text)
    if body.startswith(GUILD_SYSTEM_PREFIX):
        return ChatChannel.GUILD_SYSTEM
    if ": " not in body:
        return None
    if body.startswith("$"):
        return ChatChannel.GLOBAL
    if body.startswith("#"):
        return ChatChannel.LOCAL
    if body.startswith("&"):
        return ChatChannel.GUILD
    return None


def is_chat_message(text: str) -> bool:
    return detect_chat_channel(text) is not None


def extract_chat_info(text: str) -> ChatInfo | None:
    """Return the channel and, where the line names one, the sender."""
    channel = detect_chat_channel(text)
    if channel is None:
        return None

    if channel is ChatChannel.WHISPER:
        after = text[text.find(WHISPER_MARKER) + len(WHISPER_MARKER):]
        colon = after.find(":")
        sender = after[:colon] if colon != -1 else ""
        return ChatInfo(channel, sender or None)

    if channel in (ChatChannel.TRADE, ChatChannel.GUILD_SYSTEM):
        return ChatInfo(channel)

    body = message_body(text)
    sender = body[1:body.find(": ")]
    if not sender:
        # "$: text" is still chat-shaped, but names nobody.
        return None
    return ChatInfo(channel, sender)
