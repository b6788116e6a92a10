"""
Unit tests for web_search.py using a mocked HTTP transport.
"""
import httpx
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from leadbot.config import search_engine_id_from
from leadbot.services.web_search import WebSearchClient, WebSearchError, needs_web_search

ITEMS = [
    {
        "title": "2 BHK flats in Baner",
        "snippet": "Ready to move",
        "link": "https://www.99acres.com/baner",
        "pagemap": {"metatags": [{"og:image": "https://img/baner.jpg"}]},
    },
    {"title": "Baner rentals", "snippet": "From 25k", "link": "https://www.nobroker.in/baner"},
]


def make_client(handler, **kwargs):
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("search_engine_id", "engine-1")
    return WebSearchClient(transport=httpx.MockTransport(handler), **kwargs)


class TestSearchRealEstateInfo:
    """Test WebSearchClient.search_real_estate_info()."""

    def test_primary_request(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"items": ITEMS})

        hits = make_client(handler).search_real_estate_info("flats in Baner", "flats in Baner (99acres.com)")

        assert len(hits) == 2
        assert hits[0].image == "https://img/baner.jpg"
        params = seen[0].url.params
        assert params["q"] == "flats in Baner (99acres.com)"
        assert params["cx"] == "engine-1"
        assert params["num"] == "10"
        assert params["gl"] == "in"
        assert params["cr"] == "countryIN"
        assert params["dateRestrict"] == "y1"

    def test_fallback_on_error(self):
        seen = []

        def handler(request):
            seen.append(request)
            if len(seen) == 1:
                return httpx.Response(500, text="backend error")
            return httpx.Response(200, json={"items": ITEMS[:1]})

        hits = make_client(handler).search_real_estate_info("2 bhk flats in Baner", "enhanced")

        assert len(hits) == 1
        assert seen[1].url.params["q"] == "2 bhk flats real estate"
        assert seen[1].url.params["num"] == "5"

    def test_both_attempts_fail(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "quota"}})

        assert make_client(handler).search_real_estate_info("flats") == []

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert make_client(handler).search_real_estate_info("flats") == []

    def test_no_items(self):
        def handler(request):
            return httpx.Response(200, json={"searchInformation": {"totalResults": "0"}})

        assert make_client(handler).search_real_estate_info("flats") == []

    def test_html_body_falls_back(self):
        seen = []

        def handler(request):
            seen.append(request)
            if len(seen) == 1:
                return httpx.Response(200, text="<html>captive portal</html>")
            return httpx.Response(200, json={"items": ITEMS})

        hits = make_client(handler).search_real_estate_info("flats in Baner")
        assert len(seen) == 2
        assert [h.title for h in hits] == ["2 BHK flats in Baner", "Baner rentals"]

    def test_non_object_json_body(self):
        def handler(request):
            return httpx.Response(200, json=["unexpected"])

        client = make_client(handler)
        with pytest.raises(WebSearchError):
            client.search("flats")
        assert client.search_real_estate_info("flats") == []

    def test_missing_credentials(self):
        def handler(request):
            raise AssertionError("no request expected")

        client = make_client(handler, api_key="")
        with pytest.raises(WebSearchError):
            client.search("flats")
        assert client.search_real_estate_info("flats") == []


class TestHelpers:
    """Test search helpers."""

    def test_engine_id_from_url(self):
        url = "https://cse.google.com/cse?cx=abc123&hl=en"
        assert search_engine_id_from(url) == "abc123"

    def test_bare_engine_id(self):
        assert search_engine_id_from("abc123") == "abc123"
        assert search_engine_id_from(None) == ""

    def test_needs_web_search(self):
        assert needs_web_search("What are the latest price trends in Pune?") is True
        assert needs_web_search("पुणे में नवीनतम कीमत") is True
        assert needs_web_search("hello") is False
        assert needs_web_search(None) is False
