"""
Turns a raw user query plus extracted intent into a targeted search expression.
"""
import logging
import re
from typing import Any, Mapping, Optional

from .intent_extractor import IntentRecord
from .nlu_config import get_default_tables

logger = logging.getLogger(__name__)


class QueryEnhancer:
    """
    Appends intent terms and a trusted-portal site filter to a query.

    Every append is presence-checked against the running (lower-cased)
    query, so enhancing an already enhanced query changes nothing.
    """

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        if tables is None:
            tables = get_default_tables()
        self.real_estate_keywords = list(tables["real_estate_keywords"])
        self.qualifier = tables["real_estate_qualifier"]
        self.portal_filter = "(" + " OR ".join(tables["trusted_portals"]) + ")"

    def enhance(self, query: str, intent: IntentRecord) -> str:
        enhanced = query if isinstance(query, str) else ""
        intent = intent or IntentRecord()

        def present(fragment: str) -> bool:
            return fragment.lower() in enhanced.lower()

        if not any(present(k) for k in self.real_estate_keywords):
            enhanced += f" {self.qualifier}"

        if intent.location and not present(intent.location):
            enhanced += f" in {intent.location}"

        if intent.property_type and not present(intent.property_type):
            enhanced += f" {intent.property_type}"

        if intent.transaction_type and not present(intent.transaction_type):
            enhanced += f" for {intent.transaction_type}"

        if intent.budget and not present(intent.budget):
            enhanced += f" {intent.budget}"

        if intent.bedroom_count:
            count = intent.bedroom_count
            if not re.search(rf"(?<!\d){re.escape(count)}\s*(?:bhk|bedroom)", enhanced, re.IGNORECASE):
                enhanced += f" {count} bhk"

        if not present(self.portal_filter):
            enhanced += f" {self.portal_filter}"

        enhanced = enhanced.strip()
        logger.debug(f"Enhanced search query: {enhanced}")
        return enhanced


_enhancer: Optional[QueryEnhancer] = None


def build_enhanced_query(query: str, intent: IntentRecord) -> str:
    global _enhancer
    if _enhancer is None:
        _enhancer = QueryEnhancer()
    return _enhancer.enhance(query, intent)
