from fastapi import APIRouter

from ..models import AnalyzeRequest, AnalyzeResponse, HistoryDigestModel, IntentModel
from ..services.history_miner import format_message_history, merge_lead_info, mine_history
from ..services.intent_extractor import extract_intent
from ..services.language_classifier import classify_language
from ..services.language_templates import get_language_name
from ..services.query_enhancer import build_enhanced_query
from ..services.response_normalizer import is_conversation_ending
from ..services.web_search import needs_web_search

router = APIRouter(prefix="/api/nlu")


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest):
    """Run the NLU pipeline on a message without calling search or the LLM."""
    digest = mine_history(format_message_history([m.model_dump() for m in req.history]))
    lead = merge_lead_info(req.leadInfo.model_dump(exclude_none=True) if req.leadInfo else {}, digest)

    language = classify_language(req.text)
    intent = extract_intent(req.text, lead)

    return AnalyzeResponse(
        language=language,
        languageName=get_language_name(language),
        intent=IntentModel(**intent.to_dict()),
        enhancedQuery=build_enhanced_query(req.text, intent),
        needsWebSearch=needs_web_search(req.text),
        historyDigest=HistoryDigestModel(**digest.to_dict()),
        isConversationEnding=is_conversation_ending(req.text),
    )
