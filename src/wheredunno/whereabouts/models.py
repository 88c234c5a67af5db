"""Data models for whereabouts tracking."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class WhereaboutFact:
    """Last known self-reported whereabout of a user.

    Attributes:
        user_name: Display name, used as the lookup key for queries.
        whereabout: Place or activity taken from the message.
        raw_message: The message the whereabout was taken from.
        user_id: Sender id, None for name-only facts.
        updated_at: Epoch seconds of the last write, None before saving.
    """

    user_name: str
    whereabout: str
    raw_message: str
    user_id: str | None = None
    updated_at: float | None = None


@dataclass(frozen=True)
class WhereaboutQuery:
    """Someone asking where another user is."""

    target_user: str
    questioner_id: str | None = None


@dataclass(frozen=True)
class PendingQuestion:
    """A whereabouts question waiting for its delayed answer.

    Attributes:
        target_user: Name the question is about.
        response_text: Answer rendered when the question was asked.
        asked_at: Epoch seconds the question was queued.
        questioner_id: Who asked.
    """

    target_user: str
    response_text: str
    asked_at: float
    questioner_id: str | None = None

    def due_at(self, delay: float) -> float:
        """Time at which the answer may be delivered."""
        return self.asked_at + delay


class QuestionOutcome(Enum):
    """State of a pending question."""

    QUEUED = "queued"
    DELIVERED = "delivered"
    SUPPRESSED = "suppressed"
    # Dropped after a channel error
    FAILED = "failed"
