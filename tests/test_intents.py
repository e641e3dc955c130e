"""
Tests for rule-based intent classification.
"""
import pytest

from refaq.core.content import RESPONSES, canned_response
from refaq.core.intents import (
    INTENT_TRIGGERS,
    Intent,
    IntentClassifier,
    classify_intent,
    is_english
)


class TestLanguageGate:
    """Test the English-only gate."""

    def test_gibberish_rejected(self):
        assert classify_intent("asdfqwerty") == Intent.ENGLISH_ONLY

    def test_non_english_sentence_rejected(self):
        assert classify_intent("merhaba nasilsin") == Intent.ENGLISH_ONLY

    @pytest.mark.parametrize("text", ["hi", "ok", "xyz", "  ab  "])
    def test_short_inputs_bypass_gate(self, text):
        assert is_english(text) is True
        assert classify_intent(text) != Intent.ENGLISH_ONLY

    def test_domain_terms_match_inside_words(self):
        assert is_english("reUSDe?") is True

    def test_function_words_match_whole_words_only(self):
        # "is" appears inside "crisis" but is not a word there
        assert is_english("crisisxx") is False
        assert is_english("this crisis") is True


class TestIntentClassification:
    """Test table-ordered intent matching."""

    @pytest.mark.parametrize("text,expected", [
        ("what is re protocol", Intent.PROTOCOL_OVERVIEW),
        ("Give me a protocol overview", Intent.PROTOCOL_OVERVIEW),
        ("reUSDe vs reUSD", Intent.TOKEN_COMPARISON),
        ("How much can I earn with $500?", Intent.YIELD_CALCULATION),
        ("what is the apy", Intent.YIELD_CALCULATION),
        ("is it safe?", Intent.RISK_SECURITY),
        ("who can participate", Intent.ELIGIBILITY),
        ("how do I withdraw", Intent.REDEMPTION),
        ("what is the token address", Intent.ADDRESSES),
        ("how to start", Intent.GETTING_STARTED),
        ("when is the nav updated", Intent.PRICE_NAV),
        ("what is the price of reUSD", Intent.PRICE_NAV),
        ("current price of reusde", Intent.PRICE_NAV),
        ("reUSDe token price?", Intent.PRICE_NAV),
        ("tell me about points", Intent.POINTS),
        ("what tokens are accepted", Intent.ACCEPTED_TOKENS),
        ("explain the mechanism", Intent.HOW_IT_WORKS),
        ("what is reinsurance", Intent.REINSURANCE_BASICS),
        ("I need help", Intent.SUPPORT),
        ("bitcoin price today", Intent.OFF_TOPIC),
        ("what is the weather", Intent.OFF_TOPIC),
        ("what is this", Intent.UNRECOGNIZED),
    ])
    def test_classification(self, text, expected):
        assert classify_intent(text) == expected

    def test_case_insensitive(self):
        assert classify_intent("WHAT IS RE PROTOCOL") == Intent.PROTOCOL_OVERVIEW

    def test_earlier_table_entry_wins(self):
        """Yield triggers precede security triggers."""
        assert classify_intent("is the yield safe") == Intent.YIELD_CALCULATION

    def test_business_intent_beats_off_topic(self):
        """A protocol topic wins even when an off-topic word is present."""
        assert classify_intent("is my wallet address safe") == Intent.RISK_SECURITY

    def test_table_order_matches_enum_order(self):
        table_order = [intent for intent, _ in INTENT_TRIGGERS]
        enum_order = list(Intent)[:len(table_order)]
        assert table_order == enum_order

    def test_classification_is_idempotent(self):
        classifier = IntentClassifier()
        for text in ("what is re protocol", "bitcoin price today", "asdfqwerty", "help"):
            assert classifier.classify(text) == classifier.classify(text)


class TestCannedContent:
    """Test the canned answer catalog."""

    def test_every_non_calculated_intent_has_response(self):
        for intent in Intent:
            if intent is Intent.YIELD_CALCULATION:
                continue
            assert canned_response(intent).strip()

    def test_calculation_has_no_template(self):
        assert Intent.YIELD_CALCULATION not in RESPONSES
        with pytest.raises(KeyError):
            canned_response(Intent.YIELD_CALCULATION)

    def test_menu_lists_topics(self):
        menu = canned_response(Intent.UNRECOGNIZED)
        assert "Yield calculations" in menu
        assert "Eligibility" in menu
