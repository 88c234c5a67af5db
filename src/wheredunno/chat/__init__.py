"""Chat room message log and identities."""

from .channel import MessageChannel, MessageSubscription
from .models import ANONYMOUS_ID, ChatMessage, Identity

__all__ = [
    "ANONYMOUS_ID",
    "ChatMessage",
    "Identity",
    "MessageChannel",
    "MessageSubscription",
]
