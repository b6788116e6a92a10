"""
History Miner - Recover conversational state from recent chat turns.

Scans the last N turns to learn which lead questions the assistant already
asked (so they are not asked again) and which facts the user already gave
(name, budget, location, property type).
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .intent_extractor import term_pattern
from .nlu_config import get_default_tables

logger = logging.getLogger(__name__)

_TRIM = " \t\r\n,.;:!?"


@dataclass(frozen=True)
class ConversationTurn:
    role: str  # "user" | "assistant"
    text: str


@dataclass
class HistoryDigest:
    asked_about_name: bool = False
    asked_about_budget: bool = False
    asked_about_location: bool = False
    asked_about_property_type: bool = False
    provided_info: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        keys = {"name": "name", "budget": "budget", "location": "location", "property_type": "propertyType"}
        return {
            "askedAboutName": self.asked_about_name,
            "askedAboutBudget": self.asked_about_budget,
            "askedAboutLocation": self.asked_about_location,
            "askedAboutPropertyType": self.asked_about_property_type,
            "providedInfo": {keys[k]: v for k, v in self.provided_info.items()},
        }


def format_message_history(records: Optional[Iterable[Any]], window: int = 10) -> List[ConversationTurn]:
    """
    Convert stored chat records into ConversationTurns, keeping the last `window`.

    Records are mappings with `sender` and `message`; sender 'user' maps to
    the user role, anything else to the assistant.
    """
    turns = []
    for record in records or []:
        if isinstance(record, ConversationTurn):
            turns.append(record)
            continue
        if not isinstance(record, Mapping):
            continue
        role = "user" if record.get("sender") == "user" else "assistant"
        turns.append(ConversationTurn(role=role, text=str(record.get("message") or "")))

    if window <= 0:
        return []
    return turns[-window:]


class HistoryMiner:
    """Pattern-driven scan of a bounded turn window"""

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        if tables is None:
            tables = get_default_tables()
        self.window = int(tables.get("history_window", 10))

        def compile_all(patterns):
            return [re.compile(p, re.IGNORECASE) for p in patterns]

        self.asked_patterns = {slot: compile_all(p) for slot, p in tables["asked_patterns"].items()}
        self.provided_patterns = {slot: compile_all(p) for slot, p in tables["provided_patterns"].items()}
        self.property_types = [(t, term_pattern(t)) for t in tables["property_types"]]
        self.name_stopwords = set(tables.get("name_stopwords", ()))

    def mine(self, turns: Iterable[ConversationTurn]) -> HistoryDigest:
        """
        Build a HistoryDigest from turns in chronological order.

        Asked flags only ever go from False to True. For provided facts the
        latest user turn that states a value wins.
        """
        digest = HistoryDigest()
        window = list(turns or [])[-self.window:] if self.window > 0 else []

        for turn in window:
            text = turn.text if isinstance(turn.text, str) else ""
            if not text:
                continue
            if turn.role == "assistant":
                self._scan_assistant_turn(text, digest)
            elif turn.role == "user":
                self._scan_user_turn(text, digest)

        logger.debug(f"History digest: {digest.to_dict()}")
        return digest

    def _scan_assistant_turn(self, text: str, digest: HistoryDigest) -> None:
        for slot, patterns in self.asked_patterns.items():
            attr = f"asked_about_{slot}"
            if hasattr(digest, attr) and any(p.search(text) for p in patterns):
                setattr(digest, attr, True)

    def _scan_user_turn(self, text: str, digest: HistoryDigest) -> None:
        name = self._first_capture(self.provided_patterns.get("name", []), text, self._clean_name)
        if name:
            digest.provided_info["name"] = name

        budget = self._first_capture(
            self.provided_patterns.get("budget", []), text, lambda v: re.sub(r"[^\d]", "", v)
        )
        if budget:
            digest.provided_info["budget"] = budget

        for term, pattern in self.property_types:
            if pattern.search(text):
                digest.provided_info["property_type"] = term
                break

        location = self._first_capture(
            self.provided_patterns.get("location", []), text, lambda v: v.strip(_TRIM)
        )
        if location:
            digest.provided_info["location"] = location

    @staticmethod
    def _first_capture(patterns: List[re.Pattern], text: str, clean) -> str:
        for pattern in patterns:
            match = pattern.search(text)
            if match and match.group(1):
                value = clean(match.group(1))
                if value:
                    return value
        return ""

    def _clean_name(self, raw: str) -> str:
        """Keep up to three name words, stopping at filler ('I am Rahul and ...')."""
        words = []
        for word in raw.split():
            if word.lower() in self.name_stopwords:
                break
            words.append(word)
            if len(words) == 3:
                break
        return " ".join(words).strip(_TRIM)


_miner: Optional[HistoryMiner] = None


def get_history_miner() -> HistoryMiner:
    global _miner
    if _miner is None:
        _miner = HistoryMiner()
    return _miner


def mine_history(turns: Iterable[ConversationTurn]) -> HistoryDigest:
    return get_history_miner().mine(turns)


def merge_lead_info(lead_info: Optional[Mapping[str, Any]], digest: HistoryDigest) -> Dict[str, Any]:
    """
    Fill empty lead fields with facts the user gave earlier in the chat.
    Values already on the lead always win.
    """
    merged = dict(lead_info or {})
    fields = {
        "name": "name",
        "budget": "budget",
        "location": "preferredLocation",
        "property_type": "propertyType",
    }
    for slot, lead_field in fields.items():
        value = digest.provided_info.get(slot)
        if value and not merged.get(lead_field):
            merged[lead_field] = value
    return merged
