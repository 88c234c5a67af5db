"""Rule-based whereabout extraction from chat messages.

Recognises people saying where they are or where they are going, in
English and (colloquial) Malay. Rules are tried in order and the first
one that captures an acceptable place wins.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping

from .models import WhereaboutFact

# Captured places that are really connective words
STOP_WORDS = frozenset({"the", "a", "an", "to", "ke", "di"})

MIN_PLACE_LENGTH = 3

_PLACE = r"(?P<place>[a-z0-9\s]+)"
_SUBJECT = r"(?:i am|i'm|im|i will be|i'll be|aku|saya)"


@dataclass(frozen=True)
class WhereaboutRule:
    """A single extraction rule.

    Attributes:
        name: Short identifier, handy in tests and logs.
        language: "en" or "ms".
        pattern: Compiled regex with a named group `place`.
    """

    name: str
    language: str
    pattern: re.Pattern[str]

    def capture(self, text: str) -> str | None:
        """Return the trimmed place captured from lower-cased text."""
        match = self.pattern.search(text)
        if match is None:
            return None
        return match.group("place").strip()


def _rule(name: str, language: str, pattern: str) -> WhereaboutRule:
    return WhereaboutRule(name=name, language=language, pattern=re.compile(pattern))


WHEREABOUT_RULES: tuple[WhereaboutRule, ...] = (
    _rule(
        "going_to",
        "en",
        rf"\b{_SUBJECT} (?:going|headed|heading|on my way) to (?:the )?{_PLACE}",
    ),
    _rule(
        "being_at",
        "en",
        rf"\b{_SUBJECT} (?:at|in|visiting) (?:the )?{_PLACE}",
    ),
    _rule(
        "want_to_go",
        "en",
        rf"\b(?:i want to|i wanna|i will|i'll|aku nak|saya mahu) (?:go|visit|head) to (?:the )?{_PLACE}",
    ),
    # "aku da kat umah": da/dah = sudah, kat = dekat
    _rule(
        "sudah_kat",
        "ms",
        rf"\b(?:aku|saya) (?:(?:da|dah|sudah) )?(?:kat|dekat) (?!mana\b){_PLACE}",
    ),
    _rule(
        "pergi_ke",
        "ms",
        rf"\b(?:pergi ke|ke|gi|pegi) (?!mana\b){_PLACE}",
    ),
    _rule(
        "nak_pergi",
        "ms",
        rf"\b(?:nak|mahu|hendak) (?:pergi|ke|gi) (?!mana\b){_PLACE}",
    ),
)


def message_field(message: Any, name: str) -> Any:
    if isinstance(message, Mapping):
        return message.get(name)
    return getattr(message, name, None)


def is_acceptable_place(place: str) -> bool:
    """Check a captured place is not too short or a stop word."""
    return len(place) >= MIN_PLACE_LENGTH and place not in STOP_WORDS


def extract_whereabout(
    message: Any,
    rules: tuple[WhereaboutRule, ...] = WHEREABOUT_RULES,
) -> WhereaboutFact | None:
    """Extract a whereabout fact from a message.

    Args:
        message: A ChatMessage, or any object or mapping with `text`,
            `user_id` and `user_name`.
        rules: Ordered rules to try.

    Returns:
        An unsaved WhereaboutFact, or None if nothing was found.
    """
    if message is None:
        return None

    raw_text = message_field(message, "text")
    if not raw_text or not isinstance(raw_text, str):
        return None

    text = raw_text.lower()
    for rule in rules:
        place = rule.capture(text)
        if place is not None and is_acceptable_place(place):
            return WhereaboutFact(
                user_id=message_field(message, "user_id"),
                user_name=message_field(message, "user_name") or "User",
                whereabout=place,
                raw_message=raw_text,
            )

    return None
