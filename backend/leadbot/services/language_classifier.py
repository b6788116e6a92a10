"""
Heuristic language detection for user messages.

No model involved: each language tag owns a list of regexes (Unicode block
runs, plus function words where two languages share a script) and tags are
tried in priority order.
"""
import logging
import re
from typing import Any, List, Mapping, Optional, Tuple

from .nlu_config import get_default_tables

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES = ("en", "hi", "mr", "gu", "bn", "ta", "te", "kn", "ml", "pa", "ur")


class LanguageClassifier:
    """Maps text to a language tag using ordered script/keyword patterns"""

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        if tables is None:
            tables = get_default_tables()
        self._rules: List[Tuple[str, List[re.Pattern]]] = [
            (tag, [re.compile(p, re.IGNORECASE | re.DOTALL) for p in patterns])
            for tag, patterns in tables["language_patterns"].items()
        ]

    def classify(self, text: Any) -> str:
        """
        Detect the language of a text.

        Args:
            text: Raw user text (anything that isn't a non-blank string is
                treated as English)

        Returns:
            Language tag such as 'en', 'hi' or 'mr'
        """
        if not isinstance(text, str) or not text.strip():
            return DEFAULT_LANGUAGE

        for tag, patterns in self._rules:
            for pattern in patterns:
                if pattern.search(text):
                    logger.debug(f"Detected language {tag} for text starting with: {text[:20]}")
                    return tag

        return DEFAULT_LANGUAGE


_classifier: Optional[LanguageClassifier] = None


def classify_language(text: Any) -> str:
    """Classify with the process-wide tables."""
    global _classifier
    if _classifier is None:
        _classifier = LanguageClassifier()
    return _classifier.classify(text)
