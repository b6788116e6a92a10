"""
Relevance Ranker - Score web search hits for real-estate relevance.

Additive rubric over title/snippet/link:
- Source portal tier (premium / standard / other)
- Property type, location, bedroom and transaction-type alignment
- Price, property-detail and recency signals
- Structured page metadata and overall completeness
- Penalties for off-topic pages and opposite transaction type
"""
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .intent_extractor import IntentRecord
from .nlu_config import get_default_tables

logger = logging.getLogger(__name__)

TOP_RESULTS = 5


@dataclass
class SearchHit:
    title: str = ""
    snippet: str = ""
    link: str = ""
    pagemap: Dict[str, Any] = field(default_factory=dict, repr=False)
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None
    name: Optional[str] = None
    relevance_score: int = field(default=0, compare=False)

    @classmethod
    def from_search_item(cls, item: Mapping[str, Any]) -> "SearchHit":
        """Build a hit from a raw search API item, lifting og/product data out of its pagemap."""
        pagemap = item.get("pagemap") or {}
        hit = cls(
            title=item.get("title") or "",
            snippet=item.get("snippet") or "",
            link=item.get("link") or "",
            pagemap=dict(pagemap),
        )

        metatags = (pagemap.get("metatags") or [{}])[0]
        hit.description = metatags.get("og:description")
        hit.image = metatags.get("og:image")

        product = (pagemap.get("product") or [{}])[0]
        hit.price = product.get("price")
        hit.name = product.get("name")

        return hit

    @property
    def structured_metadata(self) -> Dict[str, str]:
        fields = {
            "description": self.description,
            "image": self.image,
            "price": self.price,
            "name": self.name,
        }
        return {k: v for k, v in fields.items() if v}

    def to_dict(self) -> dict:
        data = {"title": self.title, "snippet": self.snippet, "link": self.link}
        data.update(self.structured_metadata)
        data["relevanceScore"] = self.relevance_score
        return data


class RelevanceRanker:
    """
    Scores SearchHits against extracted intent.

    Higher score = more useful listing. Scores can go negative when a page
    is off-topic or advertises the opposite transaction type.
    """

    # Point values
    TIER_POINTS = {"premium": 20, "standard": 15, "other": 5}
    TYPE_IN_TITLE = 12
    TYPE_IN_SNIPPET = 8
    RELATED_TYPE = 6
    LOCATION_IN_TITLE = 15
    LOCATION_IN_SNIPPET = 10
    LOCATION_PARTIAL = 5
    PRICE_PRESENT = 8
    BEDROOM_MATCH = 15
    SPACIOUS_HINT = 3
    RECENCY = 5
    TRANSACTION_MATCH = 10
    TRANSACTION_MISMATCH = -15
    OFF_TOPIC = -20
    METATAGS = 5
    PRODUCT = 8
    OFFER = 5
    IMAGE = 5
    COMPLETENESS = 5

    # (minimum matches, points), checked top-down
    DETAIL_PATTERN_BANDS = [(5, 12), (3, 8), (1, 4)]
    DETAIL_TERM_BANDS = [(5, 10), (3, 6), (1, 3)]

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        if tables is None:
            tables = get_default_tables()

        self.portal_tiers = [(tier, list(domains)) for tier, domains in tables["portal_tiers"].items()]
        self.related_types = {k: list(v) for k, v in tables["related_property_types"].items()}
        self.spacious_terms = list(tables["spacious_terms"])
        self.detail_terms = list(tables["detail_terms"])

        def compile_all(patterns: Iterable[str]) -> List[re.Pattern]:
            return [re.compile(p, re.IGNORECASE) for p in patterns]

        self.price_patterns = compile_all(tables["price_patterns"])
        self.detail_patterns = compile_all(tables["property_detail_patterns"])
        self.recency_patterns = compile_all(tables["recency_patterns"])
        self.transaction_patterns = {
            "buy": compile_all(tables["buy_listing_patterns"]),
            "rent": compile_all(tables["rent_listing_patterns"]),
        }
        self.vocabulary = re.compile(tables["real_estate_vocabulary"], re.IGNORECASE)

    def score(self, hit: SearchHit, query: str, intent: IntentRecord) -> int:
        """
        Calculate relevance score for a single hit.

        Args:
            hit: Search hit to score
            query: The query the hit was returned for
            intent: Extracted intent the hit should satisfy

        Returns:
            Signed integer score
        """
        intent = intent or IntentRecord()
        title = hit.title.lower()
        snippet = hit.snippet.lower()
        link = hit.link.lower()

        def in_either(fragment: str) -> bool:
            return fragment in title or fragment in snippet

        def any_pattern(patterns: List[re.Pattern]) -> bool:
            return any(p.search(title) or p.search(snippet) for p in patterns)

        score = 0

        # Portal tier: first matching tier only
        for tier, domains in self.portal_tiers:
            if any(domain in link for domain in domains):
                score += self.TIER_POINTS.get(tier, 0)
                break

        if intent.property_type:
            ptype = intent.property_type.lower()
            if ptype in title:
                score += self.TYPE_IN_TITLE
            elif ptype in snippet:
                score += self.TYPE_IN_SNIPPET
            elif any(in_either(related) for related in self.related_types.get(ptype, [])):
                score += self.RELATED_TYPE

        if intent.location:
            location = intent.location.lower()
            if location in title:
                score += self.LOCATION_IN_TITLE
            elif location in snippet:
                score += self.LOCATION_IN_SNIPPET
            elif any(len(part) > 3 and in_either(part) for part in location.split()):
                score += self.LOCATION_PARTIAL

        if any_pattern(self.price_patterns):
            score += self.PRICE_PRESENT

        if intent.bedroom_count:
            count = intent.bedroom_count
            bedroom_re = re.compile(rf"(?<!\d){re.escape(count)}\s*(?:bhk|bedroom|bed|rk)", re.IGNORECASE)
            if bedroom_re.search(title) or bedroom_re.search(snippet):
                score += self.BEDROOM_MATCH
            elif count.isdigit() and int(count) >= 3 and any(in_either(t) for t in self.spacious_terms):
                score += self.SPACIOUS_HINT

        detail_matches = sum(1 for p in self.detail_patterns if p.search(title) or p.search(snippet))
        score += self._band(detail_matches, self.DETAIL_PATTERN_BANDS)

        if any_pattern(self.recency_patterns):
            score += self.RECENCY

        wanted = intent.transaction_type
        if wanted in self.transaction_patterns:
            opposite = "rent" if wanted == "buy" else "buy"
            if any_pattern(self.transaction_patterns[wanted]):
                score += self.TRANSACTION_MATCH
            if any_pattern(self.transaction_patterns[opposite]):
                score += self.TRANSACTION_MISMATCH

        if not (self.vocabulary.search(title) or self.vocabulary.search(snippet)):
            score += self.OFF_TOPIC

        term_matches = sum(1 for term in self.detail_terms if in_either(term))
        score += self._band(term_matches, self.DETAIL_TERM_BANDS)

        pagemap = hit.pagemap or {}
        if pagemap.get("metatags"):
            score += self.METATAGS
        if pagemap.get("product"):
            score += self.PRODUCT
        if pagemap.get("offer"):
            score += self.OFFER
        if pagemap.get("image") or pagemap.get("cse_image"):
            score += self.IMAGE

        if len(title) > 20 and len(snippet) > 50 and len(link) > 15:
            score += self.COMPLETENESS

        return score

    @staticmethod
    def _band(count: int, bands: List[tuple]) -> int:
        for minimum, points in bands:
            if count >= minimum:
                return points
        return 0

    def rank(self, hits: Iterable[SearchHit], query: str, intent: IntentRecord,
             limit: int = TOP_RESULTS) -> List[SearchHit]:
        """Score, stable-sort descending and keep the top `limit` hits."""
        scored = [replace(hit, relevance_score=self.score(hit, query, intent)) for hit in hits or []]
        scored.sort(key=lambda h: h.relevance_score, reverse=True)

        for hit in scored[:limit]:
            logger.debug(f"[RANK] {hit.relevance_score:>4} {hit.link}")

        return scored[:limit]


_ranker: Optional[RelevanceRanker] = None


def get_relevance_ranker() -> RelevanceRanker:
    global _ranker
    if _ranker is None:
        _ranker = RelevanceRanker()
    return _ranker


def rank_results(hits: Iterable[SearchHit], query: str, intent: IntentRecord) -> List[SearchHit]:
    return get_relevance_ranker().rank(hits, query, intent)
