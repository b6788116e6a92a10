"""
Unit tests for prompt_builder.py next-question selection and prompt text.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from leadbot.services.history_miner import HistoryDigest
from leadbot.services.prompt_builder import PromptBuilder, choose_next_step
from leadbot.services.relevance_ranker import SearchHit

FULL_LEAD = {"name": "Rahul", "propertyType": "flat", "budget": "8000000", "preferredLocation": "Baner"}


@pytest.fixture(scope="module")
def builder():
    return PromptBuilder()


class TestChooseNextStep:
    """Test choose_next_step() rule order."""

    def test_ending_first(self):
        assert choose_next_step({}, HistoryDigest(), True) == "ending"

    def test_all_known(self):
        assert choose_next_step(FULL_LEAD, HistoryDigest(), False) == "all_known"

    def test_ask_name(self):
        assert choose_next_step({}, HistoryDigest(), False) == "ask_name"

    def test_ask_property_type_after_name(self):
        assert choose_next_step({"name": "Rahul"}, HistoryDigest(), False) == "ask_property_type"

    def test_name_already_asked(self):
        digest = HistoryDigest(asked_about_name=True)
        assert choose_next_step({}, digest, False) == "ask_property_type"

    def test_ask_budget(self):
        lead = {"name": "Rahul", "propertyType": "villa"}
        assert choose_next_step(lead, HistoryDigest(), False) == "ask_budget"

    def test_ask_location(self):
        lead = {"name": "Rahul", "propertyType": "villa", "budget": "9000000"}
        assert choose_next_step(lead, HistoryDigest(), False) == "ask_location"

    def test_skips_asked_question(self):
        digest = HistoryDigest(asked_about_property_type=True)
        assert choose_next_step({"name": "Rahul"}, digest, False) == "ask_budget"

    def test_everything_asked(self):
        digest = HistoryDigest(asked_about_name=True, asked_about_budget=True,
                               asked_about_location=True, asked_about_property_type=True)
        assert choose_next_step({}, digest, False) == "answer_only"


class TestBuildSystemMessage:
    """Test PromptBuilder.build_system_message()."""

    def test_english_lead_details(self, builder):
        message = builder.build_system_message({"name": "Rahul", "budget": "8000000"}, "en",
                                               HistoryDigest(), [], False)
        assert "### User Information ###" in message
        assert "Client Name: Rahul" in message
        assert "Budget: ₹8000000" in message
        assert "Now only ask about the property type" in message
        assert "Always respond in" not in message

    def test_hindi_instructions(self, builder):
        message = builder.build_system_message({}, "hi", HistoryDigest(), [], False)
        assert "IMPORTANT: Always respond in Hindi language." in message
        assert "### वर्तमान संवाद निर्देश ###" in message
        assert "सबसे पहले, उपयोगकर्ता का नाम पूछें।" in message

    def test_marathi_uses_hindi_instruction_set(self, builder):
        message = builder.build_system_message({}, "mr", HistoryDigest(), [], False)
        assert "### उपयोगकर्ता की जानकारी ###" in message

    def test_search_context_limited(self, builder):
        hits = [
            SearchHit(title=f"Listing {i}", snippet="a" * 300, link=f"https://example.org/listing-{i}")
            for i in range(1, 7)
        ]
        message = builder.build_system_message({}, "en", HistoryDigest(), hits, False)
        assert "Source: https://example.org/listing-5" in message
        assert "listing-6" not in message
        assert "a" * 200 + "..." in message
        assert "a" * 201 not in message

    def test_ending_instruction(self, builder):
        message = builder.build_system_message(FULL_LEAD, "en", HistoryDigest(), [], True)
        assert "The user is ending the conversation." in message


class TestEnhanceUserMessage:
    """Test PromptBuilder.enhance_user_message()."""

    def test_starts_with_message(self, builder):
        text = builder.enhance_user_message("Flats in Baner", {}, HistoryDigest(), [])
        assert text.startswith("Flats in Baner\n\n### Response Instructions ###")

    def test_history_notes(self, builder):
        digest = HistoryDigest(asked_about_budget=True, provided_info={"location": "Baner"})
        text = builder.enhance_user_message("Any update", {}, digest, [])
        assert "You have already asked about the user's budget. Do not ask about it again." in text
        assert "User has provided their preferred location: Baner" in text
        assert "already asked for the user's name" not in text

    def test_topic_note(self, builder):
        text = builder.enhance_user_message("What is the loan EMI?", {}, HistoryDigest(), [])
        assert "### Finance Related Instructions ###" in text
        assert "### Legal Documentation Instructions ###" not in text

    def test_hits_included(self, builder):
        hits = [SearchHit(title="Villa in Baner", snippet="Garden villa", link="https://example.org/v")]
        text = builder.enhance_user_message("villa", {"budget": "9000000"}, HistoryDigest(), hits)
        assert "1. Villa in Baner" in text
        assert "Source: https://example.org/v" in text
        assert "• Budget: ₹9000000" in text
