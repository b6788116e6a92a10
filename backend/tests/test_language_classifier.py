"""
Unit tests for language detection and per-language templates.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from leadbot.services.language_classifier import LanguageClassifier, classify_language
from leadbot.services.language_templates import (
    format_search_results_in_language,
    get_language_name,
    get_language_templates,
)
from leadbot.services.relevance_ranker import SearchHit


@pytest.fixture
def classifier():
    return LanguageClassifier()


class TestClassify:
    """Test LanguageClassifier.classify()."""

    def test_english(self, classifier):
        assert classifier.classify("Show me flats in Pune") == "en"

    def test_hindi(self, classifier):
        assert classifier.classify("मुझे पुणे में फ्लैट चाहिए") == "hi"

    def test_marathi_function_word(self, classifier):
        assert classifier.classify("मला पुण्यात घर पाहिजे") == "mr"

    def test_marathi_word_inside_hindi_token_ignored(self, classifier):
        # "मी" only counts as a standalone token
        assert classifier.classify("मीठा पानी वाला घर चाहिए") == "hi"

    def test_gujarati(self, classifier):
        assert classifier.classify("મને અમદાવાદમાં ઘર જોઈએ છે") == "gu"

    def test_bengali(self, classifier):
        assert classifier.classify("আমি কলকাতায় ফ্ল্যাট চাই") == "bn"

    def test_tamil(self, classifier):
        assert classifier.classify("சென்னையில் வீடு வேண்டும்") == "ta"

    def test_urdu(self, classifier):
        assert classifier.classify("مجھے گھر چاہیے") == "ur"

    def test_mixed_script_detects_indic(self, classifier):
        assert classifier.classify("Budget 50 lakh, मुझे घर चाहिए") == "hi"

    def test_blank_is_english(self, classifier):
        assert classifier.classify("   ") == "en"

    def test_non_string_is_english(self, classifier):
        assert classifier.classify(None) == "en"
        assert classifier.classify(42) == "en"

    def test_custom_tables(self):
        custom = LanguageClassifier({"language_patterns": {"xx": ["zzz"]}})
        assert custom.classify("zzz top") == "xx"
        assert custom.classify("hello") == "en"

    def test_module_level_helper(self):
        assert classify_language("माझे नाव राहुल आहे") == "mr"


class TestLanguageTemplates:
    """Test language names and result formatting."""

    def test_language_name(self):
        assert get_language_name("hi") == "Hindi"
        assert get_language_name("gu") == "Gujarati"

    def test_unknown_language_name(self):
        assert get_language_name("xx") == "Unknown"

    def test_english_system_message_has_no_language_note(self):
        message = get_language_templates().system_message("en")
        assert "Always respond in" not in message

    def test_system_message_language_note(self):
        message = get_language_templates().system_message("mr")
        assert message.endswith("IMPORTANT: Always respond in Marathi language.")

    def test_format_results(self):
        hits = [
            SearchHit(title="2 BHK in Baner", snippet="Ready to move", link="https://a.example/1"),
            SearchHit(title="3 BHK in Wakad", snippet="New launch", link="https://a.example/2"),
        ]
        text = format_search_results_in_language(hits, "en")
        assert text.startswith("Here's what I found online about your real estate query:")
        assert "1. **2 BHK in Baner**" in text
        assert "[Learn more](https://a.example/2)" in text

    def test_format_no_results(self):
        text = format_search_results_in_language([], "en")
        assert text == "I couldn't find any relevant real estate information for your query."

    def test_unknown_language_falls_back_to_english(self):
        text = format_search_results_in_language([], "xx")
        assert text == "I couldn't find any relevant real estate information for your query."
