"""
Unit tests for relevance_ranker.py scoring and ranking.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from leadbot.services.intent_extractor import IntentRecord
from leadbot.services.relevance_ranker import (
    TOP_RESULTS,
    RelevanceRanker,
    SearchHit,
    rank_results,
)

QUERY = "3 bhk apartment in Baner"


@pytest.fixture(scope="module")
def ranker():
    return RelevanceRanker()


def listing(link="https://example.org/p/1", **kwargs):
    defaults = {
        "title": "Residential towers with lake view",
        "snippet": "Homes close to the highway with good connectivity and schools nearby",
    }
    defaults.update(kwargs)
    return SearchHit(link=link, **defaults)


class TestScore:
    """Test RelevanceRanker.score()."""

    def test_matching_listing_beats_off_topic_page(self, ranker):
        intent = IntentRecord(location="Baner", property_type="apartment",
                              transaction_type="buy", bedroom_count="3")
        good = SearchHit(
            title="3 BHK Apartment for sale in Baner, Pune",
            snippet="Spacious 3 BHK apartment in Baner priced at ₹1.2 Cr with modular kitchen and gym. Ready to move.",
            link="https://www.99acres.com/baner-3bhk",
        )
        off_topic = SearchHit(
            title="Cricket scores today",
            snippet="Live updates from the match",
            link="https://sports.example.com/live",
        )
        assert ranker.score(good, QUERY, intent) > 60
        assert ranker.score(off_topic, QUERY, intent) < 0

    def test_portal_tiers(self, ranker):
        intent = IntentRecord()
        base = ranker.score(listing("https://example.org/p/1"), QUERY, intent)
        assert ranker.score(listing("https://www.99acres.com/p/1"), QUERY, intent) - base == 20
        assert ranker.score(listing("https://www.propertywala.com/p/1"), QUERY, intent) - base == 15
        assert ranker.score(listing("https://www.olx.in/item/1"), QUERY, intent) - base == 5

    def test_opposite_transaction_penalised(self, ranker):
        hit = SearchHit(
            title="2 BHK flat for rent in Baner",
            snippet="Monthly rent 25000, semi furnished",
            link="https://www.nobroker.in/x",
        )
        wants_rent = ranker.score(hit, QUERY, IntentRecord(transaction_type="rent"))
        wants_buy = ranker.score(hit, QUERY, IntentRecord(transaction_type="buy"))
        assert wants_rent - wants_buy == 25

    def test_location_in_title_beats_snippet(self, ranker):
        intent = IntentRecord(location="Baner")
        in_title = listing(title="Residential towers in Baner with views")
        in_snippet = listing(snippet="Homes in Baner close to the highway with good connectivity")
        assert ranker.score(in_title, QUERY, intent) > ranker.score(in_snippet, QUERY, intent)

    def test_bedroom_match(self, ranker):
        intent = IntentRecord(bedroom_count="3")
        with_count = listing(title="Residential towers 3 BHK units")
        without = listing(title="Residential towers with units")
        assert ranker.score(with_count, QUERY, intent) > ranker.score(without, QUERY, intent)

    def test_structured_metadata_bonus(self, ranker):
        plain = listing()
        rich = listing(pagemap={"metatags": [{}], "product": [{}], "offer": [{}], "cse_image": [{}]})
        assert ranker.score(rich, QUERY, IntentRecord()) - ranker.score(plain, QUERY, IntentRecord()) == 23

    def test_recognised_portal_listing_wins(self, ranker):
        intent = IntentRecord(property_type="flat", location="pune", transaction_type="buy", bedroom_count="3")
        portal = SearchHit(title="3 BHK Flat in Pune for Sale", snippet="Priced at ₹75 lakh, east facing",
                           link="https://www.99acres.com/pune-flat")
        unknown = SearchHit(title="Community notice board", snippet="Meeting minutes for this week",
                            link="https://notices.example.net/1")
        assert ranker.score(portal, QUERY, intent) > ranker.score(unknown, QUERY, intent)

    def test_missing_intent(self, ranker):
        assert isinstance(ranker.score(listing(), QUERY, None), int)


class TestRank:
    """Test RelevanceRanker.rank()."""

    def test_keeps_top_five_sorted(self, ranker):
        hits = [listing(f"https://example.org/p/{i}") for i in range(6)]
        hits.append(listing("https://www.99acres.com/p/top"))
        ranked = ranker.rank(hits, QUERY, IntentRecord())
        assert len(ranked) == TOP_RESULTS
        assert ranked[0].link == "https://www.99acres.com/p/top"
        scores = [hit.relevance_score for hit in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_input_order(self, ranker):
        first = listing("https://example.org/a")
        second = listing("https://example.org/b")
        ranked = ranker.rank([first, second], QUERY, IntentRecord())
        assert [h.link for h in ranked] == ["https://example.org/a", "https://example.org/b"]

    def test_inputs_not_mutated(self, ranker):
        hit = listing("https://www.99acres.com/p/1")
        ranked = ranker.rank([hit], QUERY, IntentRecord())
        assert hit.relevance_score == 0
        assert ranked[0].relevance_score > 0

    def test_empty(self, ranker):
        assert ranker.rank([], QUERY, IntentRecord()) == []

    def test_module_level_helper(self):
        assert len(rank_results([listing()], QUERY, IntentRecord())) == 1


class TestSearchHit:
    """Test SearchHit construction from API items."""

    def test_from_search_item_lifts_metadata(self):
        item = {
            "title": "Villa in Lonavala",
            "snippet": "4 bedroom villa",
            "link": "https://www.magicbricks.com/v/1",
            "pagemap": {
                "metatags": [{"og:description": "Hill view villa", "og:image": "https://img/1.jpg"}],
                "product": [{"price": "2.5 Cr", "name": "Lonavala Villa"}],
            },
        }
        hit = SearchHit.from_search_item(item)
        assert hit.description == "Hill view villa"
        assert hit.image == "https://img/1.jpg"
        assert hit.price == "2.5 Cr"
        assert hit.name == "Lonavala Villa"

    def test_from_search_item_without_pagemap(self):
        hit = SearchHit.from_search_item({"title": "t", "snippet": "s", "link": "l"})
        assert hit.structured_metadata == {}
        assert hit.to_dict() == {"title": "t", "snippet": "s", "link": "l", "relevanceScore": 0}
