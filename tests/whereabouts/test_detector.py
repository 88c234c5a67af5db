"""Tests for whereabouts query detection."""

import pytest

from wheredunno.chat import ChatMessage
from wheredunno.whereabouts import ASSISTANT_IDS, detect_query


def make_message(text, user_id="u-1") -> ChatMessage:
    return ChatMessage(text=text, user_id=user_id, user_name="Ben", created_at=0.0)


class TestDetectQuery:
    @pytest.mark.parametrize(
        "text, target",
        [
            ("where is Aisyah?", "Aisyah"),
            ("Where's ali", "ali"),
            ("dimana Siti?", "Siti"),
            ("di mana abu", "abu"),
            ("mana Farid?", "Farid"),
            ("kemana Aisyah", "Aisyah"),
            ("ke mana Aisyah?", "Aisyah"),
            ("hey guys, where is A?", "A"),
        ],
    )
    def test_extracts_target(self, text: str, target: str):
        query = detect_query(make_message(text))
        assert query is not None
        assert query.target_user == target

    def test_keeps_questioner(self):
        query = detect_query(make_message("where is Ali?", user_id="u-9"))
        assert query is not None
        assert query.questioner_id == "u-9"

    def test_name_is_trimmed(self):
        query = detect_query(make_message("where is   Ali   ?"))
        assert query is not None
        assert query.target_user == "Ali"

    def test_no_question(self):
        assert detect_query(make_message("I'm going to the library")) is None

    def test_blank_name_is_no_match(self):
        assert detect_query(make_message("where is ?")) is None

    @pytest.mark.parametrize("user_id", sorted(ASSISTANT_IDS))
    def test_ignores_assistant_messages(self, user_id: str):
        assert detect_query(make_message("where is Ali?", user_id=user_id)) is None

    @pytest.mark.parametrize("text", [None, "", 3.14])
    def test_bad_text_is_no_match(self, text):
        assert detect_query({"text": text, "user_id": "u-1"}) is None

    def test_none_message(self):
        assert detect_query(None) is None
