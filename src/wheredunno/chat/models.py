"""Data models for the chat room."""

from dataclasses import dataclass
from datetime import datetime

ANONYMOUS_ID = "anonymous"


@dataclass(frozen=True)
class Identity:
    """Who is posting a message.

    Attributes:
        user_id: Stable identifier of the sender.
        user_name: Display name shown next to the message.
    """

    user_id: str
    user_name: str

    @classmethod
    def anonymous(cls) -> "Identity":
        """Identity used when nobody is signed in."""
        return cls(user_id=ANONYMOUS_ID, user_name="Anonymous")

    @classmethod
    def from_profile(
        cls,
        uid: str | None,
        display_name: str | None = None,
        email: str | None = None,
    ) -> "Identity":
        """Build an identity from a user profile.

        The display name wins, then the local part of the email,
        then "Anonymous".
        """
        if not uid:
            return cls.anonymous()
        if display_name:
            name = display_name
        elif email:
            name = email.split("@")[0]
        else:
            name = "Anonymous"
        return cls(user_id=str(uid), user_name=name)


@dataclass(frozen=True)
class ChatMessage:
    """A message in the room.

    Attributes:
        text: Message body.
        user_id: Sender identifier.
        user_name: Sender display name.
        created_at: Epoch seconds assigned by the channel on append.
        id: Channel-assigned id, None before the message is stored.
    """

    text: str
    user_id: str
    user_name: str
    created_at: float
    id: int | None = None

    @property
    def time(self) -> str:
        """Local HH:MM the message was posted."""
        return datetime.fromtimestamp(self.created_at).strftime("%H:%M")
