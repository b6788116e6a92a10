from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


# Lead and chat history as stored by the CRM side
class LeadInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    budget: Optional[Union[str, int, float]] = None
    preferredLocation: Optional[str] = None
    propertyType: Optional[str] = None
    transactionType: Optional[str] = None
    bedroomCount: Optional[Union[str, int]] = None


class HistoryMessage(BaseModel):
    sender: str
    message: str = ""


# Pipeline outputs
class IntentModel(BaseModel):
    location: str = ""
    budget: str = ""
    propertyType: str = ""
    transactionType: str = ""
    bedroomCount: str = ""


class SearchResultModel(BaseModel):
    title: str
    snippet: str
    link: str
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None
    name: Optional[str] = None
    relevanceScore: int = 0


class HistoryDigestModel(BaseModel):
    askedAboutName: bool = False
    askedAboutBudget: bool = False
    askedAboutLocation: bool = False
    askedAboutPropertyType: bool = False
    providedInfo: Dict[str, str] = Field(default_factory=dict)


# Endpoints
class ChatRequest(BaseModel):
    message: str
    leadInfo: Optional[LeadInfo] = None
    history: List[HistoryMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
    language: str
    intent: IntentModel
    results: List[SearchResultModel] = Field(default_factory=list)
    historyDigest: HistoryDigestModel
    isEnding: bool = False


class AnalyzeRequest(BaseModel):
    text: str
    leadInfo: Optional[LeadInfo] = None
    history: List[HistoryMessage] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    language: str
    languageName: str
    intent: IntentModel
    enhancedQuery: str
    needsWebSearch: bool
    historyDigest: HistoryDigestModel
    isConversationEnding: bool
