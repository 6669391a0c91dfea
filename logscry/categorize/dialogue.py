from __future__ import annotations

from typing import Any, Iterable

from logscry.config.defaults import DEFAULT_DIALOGUE

from .chat import message_body

# Bodies starting with these belong to chat, never to dialogue.
CHAT_SIGILS: tuple[str, ...] = ("$", "#", "&", "@", ":")

_SPEAKER_PUNCTUATION = frozenset("'-,")


class DialogueHeuristic:
    """Detects ``Speaker: speech`` lines spoken by NPCs.

    No character names are hardcoded.  A line counts as dialogue when the
    text before the first ``": "`` looks like a proper name and the text
    after it looks like prose rather than a key/value dump or a
    diagnostic message.  The deny-lists come from the ``dialogue``
    config section.
    """

    def __init__(
        self,
        forbidden_speaker_prefixes: Iterable[str] = (),
        forbidden_speaker_substrings: Iterable[str] = (),
        forbidden_speech_substrings: Iterable[str] = (),
        max_speaker_length: int = 100,
        min_speech_length: int = 3,
    ) -> None:
        self._speaker_prefixes = tuple(forbidden_speaker_prefixes)
        self._speaker_substrings = tuple(forbidden_speaker_substrings)
        self._speech_substrings = tuple(forbidden_speech_substrings)
        self._max_speaker_length = max_speaker_length
        self._min_speech_length = min_speech_length

    @classmethod
    def from_config(cls, cfg: dict[str, Any] | None = None) -> DialogueHeuristic:
        merged = {**DEFAULT_DIALOGUE, **(cfg or {})}
        return cls(
            forbidden_speaker_prefixes=merged["forbidden_speaker_prefixes"],
            forbidden_speaker_substrings=merged["forbidden_speaker_substrings"],
            forbidden_speech_substrings=merged["forbidden_speech_substrings"],
            max_speaker_length=int(merged["max_speaker_length"]),
            min_speech_length=int(merged["min_speech_length"]),
        )

    def __call__(self, text: str) -> bool:
        parts = self.split(text)
        if parts is None:
            return False
        speaker, speech = parts
        return self.is_valid_speaker(speaker) and self.is_valid_speech(speech)

    def split(self, text: str) -> tuple[str, str] | None:
        """Return ``(speaker, speech)`` or None if the body is not shaped like dialogue."""
        body = message_body(text)
        if body.startswith(CHAT_SIGILS):
            return None
        speaker, sep, speech = body.partition(": ")
        if not sep:
            return None
        return speaker, speech

    def is_valid_speaker(self, name: str) -> bool:
        name = name.strip()
        if not name or len(name) > self._max_speaker_length:
            return False
        if not name[0].isupper():
            return False
        if name.startswith(self._speaker_prefixes):
            return False
        if any(kw in name for kw in self._speaker_substrings):
            return False
        # "The Bloated Miller", "Siora, Blade of the Mists", "O'Brien"
        return all(
            c.isalnum() or c.isspace() or c in _SPEAKER_PUNCTUATION for c in name
        )

    def is_valid_speech(self, text: str) -> bool:
        text = text.strip()
        if len(text) < self._min_speech_length:
            return False
        if text.startswith(("[", "{")):
            return False
        if sum(1 for c in text if c.isalpha()) < 2:
            return False
        return not any(kw in text for kw in self._speech_substrings)
