"""Detection of "where is X?" questions."""

import re
from typing import Any

from .extractor import message_field
from .models import WhereaboutQuery

WHEREABOUTS_ASSISTANT_ID = "whereabouts-assistant"
AI_ASSISTANT_ID = "gemini-assistant"
AI_QUERY_ID = "user-query"

# Messages from these senders never trigger a lookup
ASSISTANT_IDS = frozenset({WHEREABOUTS_ASSISTANT_ID, AI_ASSISTANT_ID, AI_QUERY_ID})

QUERY_PATTERN = re.compile(
    r"(?:where is|where's|dimana|di mana|mana|kemana|ke mana) (?P<name>[a-z0-9\s]+)\??",
    re.IGNORECASE,
)


def detect_query(message: Any) -> WhereaboutQuery | None:
    """Detect whether a message asks where someone is.

    The name is not checked against known users; callers resolve it
    through the fact store.

    Args:
        message: A ChatMessage, or any object or mapping with `text`
            and `user_id`.

    Returns:
        The query, or None.
    """
    if message is None:
        return None

    text = message_field(message, "text")
    if not text or not isinstance(text, str):
        return None

    user_id = message_field(message, "user_id")
    if user_id in ASSISTANT_IDS:
        return None

    match = QUERY_PATTERN.search(text)
    if match is None:
        return None

    target = match.group("name").strip()
    if not target:
        return None

    return WhereaboutQuery(target_user=target, questioner_id=user_id)
