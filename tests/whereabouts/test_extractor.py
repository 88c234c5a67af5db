"""Tests for whereabout extraction."""

import pytest

from wheredunno.chat import ChatMessage
from wheredunno.whereabouts import STOP_WORDS, WHEREABOUT_RULES, extract_whereabout


def make_message(text, user_id="u-1", user_name="Aisyah") -> ChatMessage:
    return ChatMessage(text=text, user_id=user_id, user_name=user_name, created_at=0.0)


class TestEnglishPatterns:
    @pytest.mark.parametrize(
        "text, place",
        [
            ("I'm going to the library", "library"),
            ("i am heading to gym", "gym"),
            ("Im on my way to the office now", "office now"),
            ("I'll be at the mall", "mall"),
            ("I am in class", "class"),
            ("I'm visiting grandma tonight", "grandma tonight"),
            ("I want to go to the beach", "beach"),
            ("i wanna head to KLCC", "klcc"),
        ],
    )
    def test_captures_place(self, text: str, place: str):
        fact = extract_whereabout(make_message(text))
        assert fact is not None
        assert fact.whereabout == place

    def test_place_stops_at_punctuation(self):
        fact = extract_whereabout(make_message("I'm going to the library!"))
        assert fact is not None
        assert fact.whereabout == "library"


class TestMalayPatterns:
    @pytest.mark.parametrize(
        "text, place",
        [
            ("saya nak pergi ke pasar malam", "pasar malam"),
            ("aku gi kedai jap", "kedai jap"),
            ("pegi rumah atok", "rumah atok"),
            ("aku da kat umah", "umah"),
            ("saya dekat pejabat", "pejabat"),
            ("aku nak ke sekolah", "sekolah"),
        ],
    )
    def test_captures_place(self, text: str, place: str):
        fact = extract_whereabout(make_message(text))
        assert fact is not None
        assert fact.whereabout == place

    def test_ke_mana_question_is_not_a_place(self):
        assert extract_whereabout(make_message("ke mana ali?")) is None

    @pytest.mark.parametrize(
        "text",
        ["aku kat mana ni?", "eh saya dekat mana sekarang?", "aku dah kat mana ni"],
    )
    def test_where_am_i_question_is_not_a_place(self, text: str):
        assert extract_whereabout(make_message(text)) is None


class TestRejections:
    def test_short_place_rejected(self):
        assert extract_whereabout(make_message("I'm going to KL")) is None

    @pytest.mark.parametrize("word", sorted(STOP_WORDS))
    def test_stop_words_rejected(self, word: str):
        assert extract_whereabout(make_message(f"I'm going to {word}")) is None

    def test_keyword_inside_word_does_not_match(self):
        assert extract_whereabout(make_message("I like pizza")) is None

    def test_no_match(self):
        assert extract_whereabout(make_message("good morning everyone")) is None

    def test_rejected_capture_falls_through_to_next_rule(self):
        # "going to the" leaves nothing useful, the Malay rule still matches
        fact = extract_whereabout(make_message("I'm going to the. pergi ke stesen"))
        assert fact is not None
        assert fact.whereabout == "stesen"


class TestInputHandling:
    @pytest.mark.parametrize("text", [None, "", 42, ["going to the library"]])
    def test_bad_text_is_no_match(self, text):
        assert extract_whereabout({"text": text, "user_id": "u-1"}) is None

    def test_none_message(self):
        assert extract_whereabout(None) is None

    def test_accepts_mapping(self):
        fact = extract_whereabout(
            {"text": "I'm going to the park", "user_id": "u-2", "user_name": "Ben"}
        )
        assert fact is not None
        assert fact.user_id == "u-2"
        assert fact.user_name == "Ben"

    def test_default_user_name(self):
        fact = extract_whereabout({"text": "I'm going to the park"})
        assert fact is not None
        assert fact.user_name == "User"
        assert fact.user_id is None


class TestFactFields:
    def test_keeps_raw_message(self):
        fact = extract_whereabout(make_message("I'm going to the LIBRARY"))
        assert fact is not None
        assert fact.raw_message == "I'm going to the LIBRARY"
        assert fact.whereabout == "library"
        assert fact.updated_at is None

    def test_extraction_is_pure(self):
        message = make_message("I'm going to the library")
        assert extract_whereabout(message) == extract_whereabout(message)


class TestRuleTable:
    def test_covers_both_languages(self):
        languages = {rule.language for rule in WHEREABOUT_RULES}
        assert languages == {"en", "ms"}

    def test_first_rule_wins(self):
        # Matches both "going_to" and "pergi_ke"; the English rule comes first
        fact = extract_whereabout(make_message("I'm going to the museum, pergi ke pasar"))
        assert fact is not None
        assert fact.whereabout == "museum"

    def test_custom_rules(self):
        rules = tuple(r for r in WHEREABOUT_RULES if r.language == "ms")
        assert extract_whereabout(make_message("I'm going to the library"), rules=rules) is None
