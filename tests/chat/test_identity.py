"""Tests for chat models."""

from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from wheredunno.chat import ANONYMOUS_ID, ChatMessage, Identity


class TestIdentity:
    def test_anonymous(self):
        identity = Identity.anonymous()
        assert identity.user_id == ANONYMOUS_ID == "anonymous"
        assert identity.user_name == "Anonymous"

    def test_display_name_wins(self):
        identity = Identity.from_profile("uid-1", display_name="Aisyah", email="a@x.com")
        assert identity == Identity(user_id="uid-1", user_name="Aisyah")

    def test_email_local_part(self):
        identity = Identity.from_profile("uid-1", email="ben.lee@example.com")
        assert identity.user_name == "ben.lee"

    def test_no_name(self):
        assert Identity.from_profile("uid-1").user_name == "Anonymous"

    def test_no_uid_is_anonymous(self):
        assert Identity.from_profile(None, display_name="Aisyah") == Identity.anonymous()


class TestChatMessage:
    def test_time_display(self):
        created = datetime(2024, 5, 1, 14, 7).timestamp()
        message = ChatMessage(text="hi", user_id="u", user_name="U", created_at=created)
        assert message.time == "14:07"

    def test_frozen(self):
        message = ChatMessage(text="hi", user_id="u", user_name="U", created_at=0.0)
        with pytest.raises(FrozenInstanceError):
            message.text = "changed"  # type: ignore[misc]
