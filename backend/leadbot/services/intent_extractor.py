"""
Intent Extractor - Pull structured lead intent out of a free-text property query.

Slots: location, budget, property type, transaction type (buy/rent) and
bedroom count. Each slot has an ordered list of extraction rules; the first
rule that produces a value wins. Slots already known for the lead are
carried over verbatim and never re-derived.
"""
import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from .nlu_config import get_default_tables

logger = logging.getLogger(__name__)

_PUNCT_TRIM = " \t\r\n.,;:!?'\"()[]{}-"

# Caller-side field names accepted for each slot
KNOWN_FIELD_ALIASES = {
    "location": ("location", "preferredLocation", "preferred_location"),
    "budget": ("budget",),
    "property_type": ("property_type", "propertyType"),
    "transaction_type": ("transaction_type", "transactionType"),
    "bedroom_count": ("bedroom_count", "bedroomCount", "bedrooms"),
}


def term_pattern(term: str) -> re.Pattern:
    """
    Case-insensitive regex matching term at the start of a token, so
    plurals and inflections match ("flats", "rented") but "park" never
    matches "rk".
    """
    return re.compile(rf"(?<!\w){re.escape(term)}", re.IGNORECASE)


@dataclass(frozen=True)
class IntentRecord:
    location: str = ""
    budget: str = ""
    property_type: str = ""
    transaction_type: str = ""
    bedroom_count: str = ""

    @classmethod
    def from_known(cls, known: Any) -> "IntentRecord":
        """Build a record from a partial lead (mapping or IntentRecord)."""
        if isinstance(known, IntentRecord):
            return known
        if not isinstance(known, Mapping):
            return cls()

        values = {}
        for slot, aliases in KNOWN_FIELD_ALIASES.items():
            for alias in aliases:
                value = known.get(alias)
                if value not in (None, ""):
                    values[slot] = str(value).strip()
                    break
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "budget": self.budget,
            "propertyType": self.property_type,
            "transactionType": self.transaction_type,
            "bedroomCount": self.bedroom_count,
        }

    def filled_slots(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v}


class IntentExtractor:
    """Ordered-rule slot extraction over a single query"""

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        if tables is None:
            tables = get_default_tables()

        prepositions = "|".join(re.escape(p) for p in tables["location_prepositions"])
        self._preposition_re = re.compile(rf"\b(?:{prepositions})\s+", re.IGNORECASE)
        self._terminators = set(tables["location_terminators"])
        self._leading_stopwords = set(tables["location_leading_stopwords"])

        descriptors = "|".join(re.escape(d) for d in tables["location_descriptors"])
        self._descriptor_re = re.compile(
            rf"\b((?:[^\W\d_][\w'-]*\s+){{1,3}})(?:{descriptors})\b", re.IGNORECASE
        )

        cities = sorted(set(tables["known_cities"]), key=len, reverse=True)
        self._city_re = re.compile(
            r"(?<!\w)(" + "|".join(re.escape(c) for c in cities) + r")(?!\w)", re.IGNORECASE
        )

        self._budget_patterns = [re.compile(p, re.IGNORECASE) for p in tables["budget_patterns"]]
        self._property_types = [(t, term_pattern(t)) for t in tables["property_types"]]
        self._buy_terms = [term_pattern(t) for t in tables["buy_terms"]]
        self._rent_terms = [term_pattern(t) for t in tables["rent_terms"]]
        self._bedroom_patterns = [re.compile(p, re.IGNORECASE) for p in tables["bedroom_patterns"]]
        self._bedroom_words = dict(tables["bedroom_words"])

        # slot -> ordered extraction rules
        self._rules: dict[str, List[Callable[[str], str]]] = {
            "location": [self._prepositional_location, self._descriptor_location, self._known_city],
            "budget": [self._budget],
            "property_type": [self._property_type],
            "transaction_type": [self._transaction_type],
            "bedroom_count": [self._bedrooms],
        }

    def extract(self, query: Any, known: Any = None) -> IntentRecord:
        """
        Extract intent from a query, keeping any slot the caller already knows.

        Args:
            query: User text; non-strings extract nothing
            known: Partial lead info (mapping with camelCase or snake_case keys)

        Returns:
            IntentRecord with unmatched slots left as ""
        """
        carried = IntentRecord.from_known(known)
        text = query if isinstance(query, str) else ""

        values = {}
        for slot, rules in self._rules.items():
            current = getattr(carried, slot)
            values[slot] = current if current else self._first_match(rules, text)

        intent = IntentRecord(**values)
        logger.debug(f"Extracted intent: {intent.filled_slots()}")
        return intent

    @staticmethod
    def _first_match(rules: Sequence[Callable[[str], str]], text: str) -> str:
        if not text:
            return ""
        for rule in rules:
            value = rule(text)
            if value:
                return value
        return ""

    # --- location -------------------------------------------------------

    def _prepositional_location(self, text: str) -> str:
        """'in Koregaon Park', 'near Whitefield' - phrase ends at a connector, digit or punctuation."""
        for match in self._preposition_re.finditer(text):
            words = []
            for raw in text[match.end():].split():
                word = raw.strip(_PUNCT_TRIM)
                lowered = word.lower()
                if not word or not word[0].isalpha() or lowered in self._terminators:
                    break
                if not words and lowered in self._leading_stopwords:
                    break
                words.append(word)
                if len(words) == 4 or raw.rstrip(")]}'\"")[-1:] in ".,;:!?":
                    break
            if words:
                return " ".join(words)
        return ""

    def _descriptor_location(self, text: str) -> str:
        """'Baner area', 'Andheri West locality'"""
        match = self._descriptor_re.search(text)
        if not match:
            return ""
        words = match.group(1).split()
        while words and words[0].lower() in self._leading_stopwords:
            words.pop(0)
        return " ".join(words).strip(_PUNCT_TRIM)

    def _known_city(self, text: str) -> str:
        match = self._city_re.search(text)
        return match.group(1) if match else ""

    # --- other slots ----------------------------------------------------

    def _budget(self, text: str) -> str:
        for pattern in self._budget_patterns:
            match = pattern.search(text)
            if match:
                amount = re.sub(r"[^\d]", "", match.group(1))
                if amount:
                    return amount
        return ""

    def _property_type(self, text: str) -> str:
        for term, pattern in self._property_types:
            if pattern.search(text):
                return term
        return ""

    def _transaction_type(self, text: str) -> str:
        if any(p.search(text) for p in self._buy_terms):
            return "buy"
        if any(p.search(text) for p in self._rent_terms):
            return "rent"
        return ""

    def _bedrooms(self, text: str) -> str:
        """'3 bhk', '2 bedroom', 'two bedroom', 'single bhk'"""
        for pattern in self._bedroom_patterns:
            match = pattern.search(text)
            if not match:
                continue
            count = match.group(1).lower()
            if count.isdigit():
                return str(int(count))
            if count in self._bedroom_words:
                return self._bedroom_words[count]
        return ""


_extractor: Optional[IntentExtractor] = None


def get_intent_extractor() -> IntentExtractor:
    global _extractor
    if _extractor is None:
        _extractor = IntentExtractor()
    return _extractor


def extract_intent(query: Any, known: Any = None) -> IntentRecord:
    return get_intent_extractor().extract(query, known)
