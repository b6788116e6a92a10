import logging
from functools import lru_cache

from fastapi import APIRouter, Depends

from ..logging_config import log_action
from ..models import (
    ChatRequest,
    ChatResponse,
    HistoryDigestModel,
    IntentModel,
    SearchResultModel,
)
from ..services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return ChatService()


@router.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest, service: ChatService = Depends(get_chat_service)):
    lead = req.leadInfo.model_dump(exclude_none=True) if req.leadInfo else {}
    history = [m.model_dump() for m in req.history]

    reply = service.generate_response(req.message, lead, history)

    log_action(logger, "info", "chat_reply_sent", "Reply generated",
               language=reply.language, results=len(reply.results), is_ending=reply.is_ending)

    return ChatResponse(
        reply=reply.text,
        language=reply.language,
        intent=IntentModel(**reply.intent.to_dict()),
        results=[SearchResultModel(**hit.to_dict()) for hit in reply.results],
        historyDigest=HistoryDigestModel(**reply.history_digest.to_dict()),
        isEnding=reply.is_ending,
    )
