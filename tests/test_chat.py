from __future__ import annotations

from logscry.categorize.chat import (
    ChatChannel,
    ChatInfo,
    detect_chat_channel,
    extract_chat_info,
    is_chat_message,
    message_body,
)

PREFIX = "2024/12/14 18:01:02 1 2 [INFO Client 1] "


def test_message_body_strips_through_last_bracket() -> None:
    assert message_body(PREFIX + "$Alice: hi") == "$Alice: hi"
    assert message_body("no brackets here") == "no brackets here"
    assert message_body("[A] [B] tail") == "tail"


def test_channels() -> None:
    assert detect_chat_channel(PREFIX + "$Alice: hi") is ChatChannel.GLOBAL
    assert detect_chat_channel(PREFIX + "#Bob: hi") is ChatChannel.LOCAL
    assert detect_chat_channel(PREFIX + "&Carol: hi") is ChatChannel.GUILD
    assert detect_chat_channel(PREFIX + "&: GUILD UPDATE: new member") is ChatChannel.GUILD_SYSTEM
    assert detect_chat_channel(PREFIX + "@From Dave: wtb") is ChatChannel.WHISPER
    assert detect_chat_channel(PREFIX + "Trade cancelled.") is ChatChannel.TRADE


def test_sigil_without_separator_is_not_chat() -> None:
    assert not is_chat_message(PREFIX + "$Alice")
    assert not is_chat_message(PREFIX + "#hashtag")
    assert not is_chat_message(PREFIX + "Wounded Man: Spare some coin?")


def test_whisper_detected_anywhere() -> None:
    assert is_chat_message("garbage @From Eve: hello")


def test_extract_sender() -> None:
    assert extract_chat_info(PREFIX + "$Alice: hello") == ChatInfo(ChatChannel.GLOBAL, "Alice")
    assert extract_chat_info(PREFIX + "&Guildie: gg") == ChatInfo(ChatChannel.GUILD, "Guildie")
    assert extract_chat_info(PREFIX + "@From <TAG> Eve: hi") == ChatInfo(
        ChatChannel.WHISPER, "<TAG> Eve"
    )


def test_extract_without_sender() -> None:
    assert extract_chat_info(PREFIX + "Trade accepted.") == ChatInfo(ChatChannel.TRADE)
    assert extract_chat_info(PREFIX + "&: GUILD UPDATE: x") == ChatInfo(ChatChannel.GUILD_SYSTEM)
    assert extract_chat_info(PREFIX + "@From nobody") == ChatInfo(ChatChannel.WHISPER)


def test_extract_empty_sender_returns_none() -> None:
    assert extract_chat_info(PREFIX + "$: hello") is None
    assert extract_chat_info(PREFIX + "plain text") is None
