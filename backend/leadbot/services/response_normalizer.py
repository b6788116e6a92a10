"""
Response Normalizer - Post-process LLM replies before they reach the user.

The assistant must not end with follow-up questions (the lead flow decides
what to ask next), so residual questions are stripped or flattened into
statements, and a short digest of the top search hits is appended.
"""
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from .nlu_config import get_default_tables

logger = logging.getLogger(__name__)

# Placeholder left where text was removed; fragments around it are dropped later
_CUT = "\x00"

_TRAILING_QUESTIONS = re.compile(r"(?:[^.!?\n]*\?)+\s*$")
_LIST_QUESTION_LINE = re.compile(r"^[ \t]*(?:\d+[.)]|[•*-])[ \t]*[^\n]*\?[ \t]*$", re.MULTILINE)
_MID_TEXT_QUESTION = re.compile(r"(?<=[.!?])([ \t]+)[^.!?\n\x00]+\?(?=\s)")
_CUT_FRAGMENT = re.compile(r"[^.!?\n]*\x00[^.!?\n]*[.!?]?")

MIN_FRAGMENT_LENGTH = 20
DIGEST_SIZE = 3
DIGEST_HEADER = "### Latest Real Estate Information ###"


class ResponseNormalizer:
    """Question stripping and conversation-ending detection"""

    MAX_OFFER_PASSES = 5

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        if tables is None:
            tables = get_default_tables()
        self.offer_patterns = [re.compile(p, re.IGNORECASE) for p in tables["offer_to_help_patterns"]]
        self.closing_present = re.compile(tables["closing_present_pattern"], re.IGNORECASE)
        self.closing_line = tables["closing_line"]
        # whole-token matches only, so "ok" never fires inside "lookup"
        self.short_ending_phrases = [
            (phrase, re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE))
            for phrase in tables["short_ending_phrases"]
        ]
        self.ending_patterns = [re.compile(p, re.IGNORECASE) for p in tables["ending_patterns"]]

    def normalize(self, text: Any, is_ending: bool = False) -> Any:
        """
        Remove follow-up questions from a generated reply.

        Args:
            text: LLM output; anything that isn't a string is returned as-is
            is_ending: User is closing the conversation, so also add a courtesy line

        Returns:
            Cleaned text containing no '?' characters
        """
        if not isinstance(text, str):
            return text

        cleaned = _TRAILING_QUESTIONS.sub(_CUT, text)
        cleaned = _LIST_QUESTION_LINE.sub(_CUT, cleaned)
        cleaned = _MID_TEXT_QUESTION.sub(lambda m: m.group(1) + _CUT, cleaned)
        cleaned = self._strip_offers(cleaned)

        # Whatever questions survived become statements
        cleaned = cleaned.replace("?", ".")

        if is_ending:
            cleaned = self._strip_offers(cleaned)
            if not self.closing_present.search(cleaned):
                cleaned = cleaned.rstrip() + "\n\n" + self.closing_line

        cleaned = self._collapse_whitespace(cleaned)
        cleaned = _CUT_FRAGMENT.sub(self._drop_short_fragment, cleaned)
        cleaned = self._collapse_whitespace(cleaned.replace(_CUT, ""))

        logger.debug(f"Normalized response ({len(text)} -> {len(cleaned)} chars)")
        return cleaned

    def _strip_offers(self, text: str) -> str:
        for _ in range(self.MAX_OFFER_PASSES):
            before = text
            for pattern in self.offer_patterns:
                text = pattern.sub(_CUT, text)
            if text == before:
                break
        return text

    @staticmethod
    def _drop_short_fragment(match: re.Match) -> str:
        fragment = match.group(0)
        if len(fragment.replace(_CUT, "").strip()) < MIN_FRAGMENT_LENGTH:
            return ""
        return fragment.replace(_CUT, "")

    @staticmethod
    def _collapse_whitespace(text: str) -> str:
        text = re.sub(r"[ \t]+\n", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        text = re.sub(r"[ \t]{2,}", " ", text)
        return text.strip()

    def is_conversation_ending(self, message: Any) -> bool:
        """
        Heuristic: does this user message close the conversation?

        Very short messages without a '?' count as endings too, so a bare
        "Pune" reply is treated as one.
        """
        if not isinstance(message, str) or not message.strip():
            return False

        normalized = message.strip().lower()
        is_question = "?" in normalized

        if not is_question and len(normalized.split()) <= 2:
            for phrase, pattern in self.short_ending_phrases:
                if pattern.search(normalized):
                    logger.debug(f"Short ending phrase '{phrase}' in: {normalized}")
                    return True

        if not is_question and any(p.search(normalized) for p in self.ending_patterns):
            return True

        return len(normalized) < 15 and not is_question


_normalizer: Optional[ResponseNormalizer] = None


def get_response_normalizer() -> ResponseNormalizer:
    global _normalizer
    if _normalizer is None:
        _normalizer = ResponseNormalizer()
    return _normalizer


def normalize_response(text: Any, is_ending: bool = False) -> Any:
    return get_response_normalizer().normalize(text, is_ending)


def is_conversation_ending(message: Any) -> bool:
    return get_response_normalizer().is_conversation_ending(message)


def append_results_digest(text: str, hits: Iterable) -> str:
    """Append the top search hits as a markdown digest (top 3 when there are at least 3)."""
    hits: List = list(hits or [])
    if not hits:
        return text

    lines = [f"\n\n{DIGEST_HEADER}"]
    for index, hit in enumerate(hits[:DIGEST_SIZE], 1):
        title = " ".join((hit.title or "").split())
        snippet = " ".join((hit.snippet or "").split())
        lines.append(f"\n**{index}. {title}**\n{snippet}\n[View Source]({hit.link})")
    return text + "\n".join(lines) + "\n"


def finalize_response(text: str, hits: Iterable, is_ending: bool = False) -> str:
    return append_results_digest(normalize_response(text, is_ending), hits)
