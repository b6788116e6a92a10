"""
Unit tests for intent_extractor.py slot extraction.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from leadbot.services.intent_extractor import (
    IntentExtractor,
    IntentRecord,
    extract_intent,
)


@pytest.fixture(scope="module")
def extractor():
    return IntentExtractor()


class TestFullQueries:
    """Several slots in one query."""

    def test_buy_query(self, extractor):
        intent = extractor.extract("Looking for a 3 BHK apartment in Koregaon Park under 80 lakh to buy")
        assert intent == IntentRecord(
            location="Koregaon Park",
            budget="80",
            property_type="apartment",
            transaction_type="buy",
            bedroom_count="3",
        )

    def test_rent_query(self, extractor):
        intent = extractor.extract("2 bedroom flat for rent near Whitefield, Bangalore")
        assert intent.location == "Whitefield"
        assert intent.property_type == "flat"
        assert intent.transaction_type == "rent"
        assert intent.bedroom_count == "2"
        assert intent.budget == ""

    def test_nothing_to_extract(self, extractor):
        assert extractor.extract("hello there") == IntentRecord()

    def test_non_string_query(self, extractor):
        assert extractor.extract(None) == IntentRecord()


class TestLocation:
    """Test the location rules."""

    def test_phrase_ends_at_terminator(self, extractor):
        assert extractor.extract("flats in Mumbai for rent").location == "Mumbai"

    def test_phrase_ends_at_descriptor(self, extractor):
        assert extractor.extract("Show me a villa in Baner area").location == "Baner"

    def test_phrase_ends_at_digit(self, extractor):
        assert extractor.extract("plot near Hinjewadi 2 acres").location == "Hinjewadi"

    def test_phrase_at_most_four_words(self, extractor):
        location = extractor.extract("house in One Two Three Four Five").location
        assert location == "One Two Three Four"

    def test_stopword_phrase_skipped(self, extractor):
        intent = extractor.extract("Interested in buying a flat in Wakad")
        assert intent.location == "Wakad"

    def test_descriptor_rule(self, extractor):
        assert extractor.extract("I prefer Baner area").location == "Baner"

    def test_known_city_keeps_case(self, extractor):
        assert extractor.extract("Looking for flats Pune side").location == "Pune"

    def test_longest_city_name_wins(self, extractor):
        assert extractor.extract("Navi Mumbai flats").location == "Navi Mumbai"


class TestBudget:
    """Test budget patterns and their order."""

    def test_keyword(self, extractor):
        assert extractor.extract("my budget is 60 lakh").budget == "60"

    def test_currency_digits_only(self, extractor):
        assert extractor.extract("₹75,00,000 for a flat").budget == "7500000"

    def test_range_takes_lower_bound(self, extractor):
        assert extractor.extract("between 50 and 80 lakh").budget == "50"

    def test_under(self, extractor):
        assert extractor.extract("3 bhk under 90 lakh").budget == "90"

    def test_number_with_unit(self, extractor):
        assert extractor.extract("villa for 45 lakhs").budget == "45"

    def test_bedroom_count_is_not_budget(self, extractor):
        assert extractor.extract("2 bhk flat").budget == ""


class TestVocabulary:
    """Test property type, transaction type and bedrooms."""

    def test_plural_property_types(self, extractor):
        assert extractor.extract("Show me apartments in Pune").property_type == "apartment"
        assert extractor.extract("2 bhk flats for sale in Baner").property_type == "flat"
        assert extractor.extract("looking for villas to rent").property_type == "villa"

    def test_inflected_transaction_terms(self, extractor):
        assert extractor.extract("flats for sale in Baner").transaction_type == "buy"
        assert extractor.extract("rented villas near Wakad").transaction_type == "rent"

    def test_term_must_start_a_token(self, extractor):
        intent = extractor.extract("Koregaon Park new town")
        assert intent.property_type == ""
        assert intent.transaction_type == ""

    def test_property_type_order(self, extractor):
        assert extractor.extract("apartment or house").property_type == "apartment"

    def test_buy_checked_before_rent(self, extractor):
        assert extractor.extract("buy or rent").transaction_type == "buy"

    def test_hindi_rent_term(self, extractor):
        assert extractor.extract("पुणे में किराया पर घर").transaction_type == "rent"

    def test_bedroom_words(self, extractor):
        assert extractor.extract("two bedroom house").bedroom_count == "2"
        assert extractor.extract("single bhk").bedroom_count == "1"

    def test_bedroom_digits(self, extractor):
        assert extractor.extract("4bhk penthouse").bedroom_count == "4"


class TestKnownSlots:
    """Known lead fields are carried over."""

    def test_known_slots_win(self, extractor):
        intent = extractor.extract("3 bhk in Pune", {"preferredLocation": "Baner", "budget": 5000000})
        assert intent.location == "Baner"
        assert intent.budget == "5000000"
        assert intent.bedroom_count == "3"

    def test_snake_case_keys(self, extractor):
        intent = extractor.extract("anything", {"property_type": "villa", "transaction_type": "rent"})
        assert intent.property_type == "villa"
        assert intent.transaction_type == "rent"

    def test_empty_known_value_ignored(self, extractor):
        intent = extractor.extract("flats in Pune", {"preferredLocation": ""})
        assert intent.location == "Pune"

    def test_reextraction_is_stable(self, extractor):
        query = "2 bhk flat for rent in Wakad under 30k"
        first = extractor.extract(query)
        assert extractor.extract(query, first) == first
        assert extractor.extract("2 bhk in Pune", {"location": "Mumbai"}).location == "Mumbai"

    def test_known_intent_record(self, extractor):
        known = IntentRecord(location="Thane")
        assert extractor.extract("flats in Pune", known).location == "Thane"


class TestIntentRecord:
    """Test IntentRecord helpers."""

    def test_to_dict_camel_case(self):
        record = IntentRecord(location="Pune", property_type="flat")
        assert record.to_dict() == {
            "location": "Pune",
            "budget": "",
            "propertyType": "flat",
            "transactionType": "",
            "bedroomCount": "",
        }

    def test_filled_slots(self):
        assert IntentRecord(budget="50").filled_slots() == {"budget": "50"}

    def test_module_level_helper(self):
        assert extract_intent("flat in Pune").location == "Pune"
