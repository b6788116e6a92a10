"""
Chat orchestration: one user message in, one cleaned assistant reply out.

Flow: detect language -> mine history -> extract intent -> enhance query ->
web search -> rank hits -> build prompts -> LLM -> normalize + digest.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..logging_config import language_var
from .history_miner import (
    ConversationTurn,
    HistoryDigest,
    HistoryMiner,
    format_message_history,
    merge_lead_info,
)
from .intent_extractor import IntentExtractor, IntentRecord
from .language_classifier import DEFAULT_LANGUAGE, LanguageClassifier
from .language_templates import LanguageTemplates, get_language_templates
from .llm_client import LLMClient, LLMError
from .nlu_config import get_default_tables
from .prompt_builder import PromptBuilder
from .query_enhancer import QueryEnhancer
from .relevance_ranker import RelevanceRanker, SearchHit
from .response_normalizer import ResponseNormalizer, append_results_digest
from .web_search import WebSearchClient

logger = logging.getLogger(__name__)

INVALID_MESSAGE_REPLY = "Please ask a valid question."
EMPTY_MESSAGE_REPLY = "Please provide your question in detail so I can assist you better."
LLM_UNAVAILABLE_REPLY = "AI response is temporarily unavailable. Please try again later."


@dataclass
class ChatReply:
    text: str
    language: str = DEFAULT_LANGUAGE
    intent: IntentRecord = field(default_factory=IntentRecord)
    results: List[SearchHit] = field(default_factory=list)
    history_digest: HistoryDigest = field(default_factory=HistoryDigest)
    is_ending: bool = False


class ChatService:
    """Runs the lead-qualification pipeline around the search and LLM collaborators"""

    def __init__(self,
                 search_client: Optional[WebSearchClient] = None,
                 llm_client: Optional[LLMClient] = None,
                 tables: Optional[Mapping[str, Any]] = None,
                 templates: Optional[LanguageTemplates] = None) -> None:
        if tables is None:
            tables = get_default_tables()
        self.search_client = search_client or WebSearchClient()
        self.llm_client = llm_client or LLMClient()
        self.templates = templates or get_language_templates()

        self.classifier = LanguageClassifier(tables)
        self.extractor = IntentExtractor(tables)
        self.enhancer = QueryEnhancer(tables)
        self.ranker = RelevanceRanker(tables)
        self.miner = HistoryMiner(tables)
        self.normalizer = ResponseNormalizer(tables)
        self.prompts = PromptBuilder(self.templates)

    def generate_response(self, message: Any, lead_info: Optional[Mapping[str, Any]] = None,
                          history: Optional[Iterable[Any]] = None) -> ChatReply:
        """
        Answer a user message for a lead.

        Args:
            message: The user's text
            lead_info: Stored lead fields (name, budget, preferredLocation, propertyType, ...)
            history: Prior chat records ({sender, message}) in chronological order

        Returns:
            ChatReply; collaborator failures surface as fixed fallback text, never as exceptions
        """
        if not isinstance(message, str):
            logger.warning(f"[CHAT] Invalid user message: {message!r}")
            return ChatReply(text=INVALID_MESSAGE_REPLY)

        cleaned = message.strip()
        if not cleaned:
            return ChatReply(text=EMPTY_MESSAGE_REPLY)

        language = self.classifier.classify(cleaned)
        language_var.set(language)
        logger.info(f"[CHAT] User message language: {self.templates.language_name(language)}")

        turns = format_message_history(history, window=self.miner.window)
        digest = self.miner.mine(turns)
        lead = merge_lead_info(lead_info, digest)

        intent = self.extractor.extract(cleaned, lead)
        enhanced_query = self.enhancer.enhance(cleaned, intent)

        hits = self.search_client.search_real_estate_info(cleaned, enhanced_query)
        ranked = self.ranker.rank(hits, cleaned, intent)
        logger.info(f"[CHAT] {len(ranked)} ranked search results")

        is_ending = self.normalizer.is_conversation_ending(cleaned)

        messages = self._build_messages(cleaned, lead, language, digest, ranked, is_ending, turns)
        try:
            raw = self.llm_client.complete(messages)
        except LLMError as e:
            logger.error(f"[CHAT] LLM call failed: {e}")
            # ranked hits still reach the user, or a localized no-results line
            listing = self.templates.format_search_results(ranked, language)
            return ChatReply(
                text=f"{LLM_UNAVAILABLE_REPLY}\n\n{listing}",
                language=language,
                intent=intent,
                results=ranked,
                history_digest=digest,
                is_ending=is_ending,
            )

        text = append_results_digest(self.normalizer.normalize(raw, is_ending), ranked)
        return ChatReply(
            text=text,
            language=language,
            intent=intent,
            results=ranked,
            history_digest=digest,
            is_ending=is_ending,
        )

    def _build_messages(self, message: str, lead: Mapping[str, Any], language: str, digest: HistoryDigest,
                        hits: List[SearchHit], is_ending: bool,
                        turns: List[ConversationTurn]) -> List[Dict[str, str]]:
        system = self.prompts.build_system_message(lead, language, digest, hits, is_ending)
        user = self.prompts.enhance_user_message(message, lead, digest, hits)

        messages = [{"role": "system", "content": system}]
        messages.extend({"role": turn.role, "content": turn.text} for turn in turns)
        messages.append({"role": "user", "content": user})
        return messages
