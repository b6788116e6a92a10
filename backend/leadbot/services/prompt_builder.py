"""
Builds the system prompt and the instruction-wrapped user message sent to the LLM.

The assistant qualifies leads one question at a time. Which question comes
next is decided by an ordered list of (predicate, instruction) rules over
the known lead fields and the history digest; the first rule that holds wins.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from .history_miner import HistoryDigest
from .language_templates import LanguageTemplates, get_language_templates

logger = logging.getLogger(__name__)

# Sessions in these languages get the Hindi instruction set
HINDI_INSTRUCTION_LANGUAGES = {"hi", "mr", "gu"}

MAX_PROMPT_HITS = 5
SYSTEM_SNIPPET_CHARS = 200

PERSONA = """### Professional Real Estate Agent Persona ###
You are an experienced, professional real estate agent with deep knowledge of the property market. You simulate a real agent with:
- Extensive expertise in buying, selling, and renting properties across diverse markets
- Deep understanding of property valuation, market trends, and investment opportunities
- Ability to handle multi-intent conversations and adapt to changing client needs
- Strong consultative approach that prioritizes understanding client requirements
- Expertise in property financing, legal processes, and documentation requirements
- Skill in providing personalized recommendations based on client preferences
- Professional yet warm communication style that builds trust and rapport

### Multilingual Capabilities ###
You can communicate fluently in Hindi, English, Gujarati, Marathi and Hinglish (Hindi-English mixed).
Detect the user's preferred language and respond in it, switching when the user switches.

### Conversational Flow Instructions ###
1. Gather the user's name, location preference, budget, buy/rent preference, property type and number of bedrooms.
2. Remember what the user already told you and never ask for it again.
3. If the budget is too low for the desired location, explain the options and suggest alternatives.
4. If the property type is unavailable in the preferred location, suggest similar areas.
5. Ask only one question at a time to keep the conversation focused and natural.

### Property Recommendation Instructions ###
1. Use the provided search results to recommend properties that fit the user's filters.
2. Present listings with title, location details, price, features and amenities, and reference links when available.
3. Offer alternatives when exact matches aren't available.
4. Format information in a clear, structured way that highlights property benefits.

### Lead Capture Instructions ###
1. Collect the user's name, contact details and property preferences.
2. Ask for explicit permission before following up with additional property options.
3. Act as a lead generation and qualification assistant."""

FALLBACK_INSTRUCTIONS = """### Fallback & Escalation Instructions ###
1. When intent is unclear, keep the conversation going with a helpful general answer.
2. Prefer information from known real estate portals (e.g., 99acres, MagicBricks).
3. If the user asks to speak with a human agent, acknowledge it and say an agent will contact them soon."""

QUESTION_CONTROL = """### IMPORTANT: Question Control ###
NEVER ask the same question twice in a conversation.
NEVER ask multiple questions at once.
NEVER ask for information that the user has already provided.
If you're unsure whether to ask a question, DO NOT ask it."""

# instruction key -> (english, hindi)
NEXT_STEP_INSTRUCTIONS = {
    "ending": (
        "The user is ending the conversation. Only respond to their message and do not ask additional questions.",
        "उपयोगकर्ता संवाद समाप्त करना चाहता है। केवल उनके संदेश का उत्तर दें और कोई अतिरिक्त प्रश्न न पूछें।",
    ),
    "all_known": (
        "All basic user details have already been collected. Now provide an accurate answer to their current question.\n"
        "Do not ask any additional questions that have already been asked. Only respond to their current query.",
        "उपयोगकर्ता के सभी बुनियादी विवरण पहले से ही एकत्र किए गए हैं। अब उनकी वर्तमान प्रश्न का सटीक उत्तर दें।\n"
        "कोई अतिरिक्त प्रश्न न पूछें जो पहले पूछे जा चुके हैं। केवल उनके वर्तमान प्रश्न का उत्तर दें।",
    ),
    "ask_name": (
        "First, ask for the user's name. Do not ask for other details yet.",
        "सबसे पहले, उपयोगकर्ता का नाम पूछें। अन्य विवरण अभी न पूछें।",
    ),
    "ask_property_type": (
        "Now only ask about the property type (such as apartment, house, villa, etc.). Do not ask for other details yet.",
        "अब केवल संपत्ति के प्रकार के बारे में पूछें (जैसे अपार्टमेंट, मकान, विला, आदि)। अन्य विवरण अभी न पूछें।",
    ),
    "ask_budget": (
        "Now only ask about their budget. Do not ask for other details yet.",
        "अब केवल उनके बजट के बारे में पूछें। अन्य विवरण अभी न पूछें।",
    ),
    "ask_location": (
        "Now only ask about their preferred location. Do not ask for other details yet.",
        "अब केवल उनके पसंदीदा स्थान के बारे में पूछें। अन्य विवरण अभी न पूछें।",
    ),
    "answer_only": (
        "Respond to the user's current question. Do not repeat questions that have already been asked.",
        "उपयोगकर्ता के वर्तमान प्रश्न का उत्तर दें। पहले पूछे गए प्रश्नों को दोहराएं नहीं।",
    ),
}

TOPIC_NOTES: List[Tuple[str, str]] = [
    (r"price|budget|कीमत|मूल्य|cost|rate|रेट",
     "### Price Related Instructions ###\nProvide accurate information based on real property valuation, budget analysis, current market trends, and price per square foot comparisons. Explain how location, amenities, and property age affect pricing."),
    (r"location|स्थान|area|neighborhood|इलाका|क्षेत्र",
     "### Location Related Instructions ###\nProvide detailed information about location amenities, connectivity, surrounding development, quality of living, proximity to schools/hospitals/markets, future development plans, and property appreciation potential."),
    (r"invest|निवेश|roi|return|profit|लाभ",
     "### Investment Related Instructions ###\nProvide comprehensive information about investment returns, risk analysis, future appreciation prospects, rental yield potential, tax benefits, and comparison with other investment options."),
    (r"loan|finance|ऋण|emi|mortgage|बंधक",
     "### Finance Related Instructions ###\nProvide accurate information about current home loan options, interest rates, EMI calculations, down payment requirements, processing fees, pre-payment options, and tax benefits on home loans."),
    (r"feature|amenity|सुविधा|facility|फैसिलिटी",
     "### Amenity Related Instructions ###\nProvide detailed information about property features, amenities, construction quality, specifications, smart home features, security systems, and their impact on lifestyle and property value."),
    (r"legal|document|कानूनी|दस्तावेज़",
     "### Legal Documentation Instructions ###\nProvide accurate information about required legal documents, verification processes, registration procedures, stamp duty, and other legal aspects of property transactions."),
    (r"rent|किराया|lease|पट्टा",
     "### Rental Property Instructions ###\nProvide detailed information about rental yields, tenant profiles, lease terms, maintenance responsibilities, and rental market trends in the specified location."),
]


@dataclass(frozen=True)
class QuestionContext:
    lead: Mapping[str, Any]
    digest: HistoryDigest
    is_ending: bool

    def has(self, field: str) -> bool:
        return bool(self.lead.get(field))


NextStepRule = Tuple[Callable[[QuestionContext], bool], str]

NEXT_STEP_RULES: Sequence[NextStepRule] = (
    (lambda c: c.is_ending, "ending"),
    (lambda c: all(c.has(f) for f in ("name", "propertyType", "budget", "preferredLocation")), "all_known"),
    (lambda c: not c.has("name") and not c.digest.asked_about_name, "ask_name"),
    (lambda c: not c.has("propertyType") and not c.digest.asked_about_property_type
        and (c.has("name") or c.digest.asked_about_name), "ask_property_type"),
    (lambda c: not c.has("budget") and not c.digest.asked_about_budget
        and (c.has("propertyType") or c.digest.asked_about_property_type), "ask_budget"),
    (lambda c: not c.has("preferredLocation") and not c.digest.asked_about_location
        and (c.has("budget") or c.digest.asked_about_budget), "ask_location"),
    (lambda c: True, "answer_only"),
)


def choose_next_step(lead: Mapping[str, Any], digest: HistoryDigest, is_ending: bool) -> str:
    """Return the instruction key of the first rule that holds."""
    context = QuestionContext(lead=lead or {}, digest=digest or HistoryDigest(), is_ending=is_ending)
    for predicate, key in NEXT_STEP_RULES:
        if predicate(context):
            return key
    return "answer_only"


def _one_line(text: str) -> str:
    return " ".join((text or "").split())


class PromptBuilder:
    def __init__(self, templates: Optional[LanguageTemplates] = None):
        self.templates = templates or get_language_templates()
        self.topic_notes = [(re.compile(p, re.IGNORECASE), note) for p, note in TOPIC_NOTES]

    def build_system_message(self, lead: Mapping[str, Any], tag: str, digest: HistoryDigest,
                             hits: Sequence, is_ending: bool) -> str:
        """
        System prompt: persona, known lead details, search context and next-step instruction.

        Args:
            lead: Lead fields (name, budget, preferredLocation, propertyType)
            tag: Detected language tag of the current message
            digest: What the history shows was already asked/answered
            hits: Ranked search hits
            is_ending: The user is closing the conversation
        """
        lead = lead or {}
        hindi = tag in HINDI_INSTRUCTION_LANGUAGES
        parts = [self.templates.system_message(tag), PERSONA]

        if hindi:
            info = ["### उपयोगकर्ता की जानकारी ###"]
            labels = [("name", "ग्राहक का नाम"), ("budget", "बजट"),
                      ("preferredLocation", "पसंदीदा स्थान"), ("propertyType", "संपत्ति प्रकार")]
        else:
            info = ["### User Information ###"]
            labels = [("name", "Client Name"), ("budget", "Budget"),
                      ("preferredLocation", "Preferred Location"), ("propertyType", "Property Type")]
        for field, label in labels:
            if lead.get(field):
                value = f"₹{lead[field]}" if field == "budget" else lead[field]
                info.append(f"{label}: {value}")
        parts.append("\n".join(info))

        if hits:
            section = ["### ताज़ा रियल एस्टेट जानकारी ###" if hindi else "### Latest Real Estate Information ###"]
            for index, hit in enumerate(list(hits)[:MAX_PROMPT_HITS], 1):
                section.append(f"{index}. {_one_line(hit.title)}")
                section.append(f"   {_one_line(hit.snippet)[:SYSTEM_SNIPPET_CHARS]}...")
                section.append(f"   Source: {hit.link}")
            section.append("")
            section.append("Use the above information to provide accurate and relevant property recommendations.")
            parts.append("\n".join(section))

        step = choose_next_step(lead, digest, is_ending)
        english, hindi_text = NEXT_STEP_INSTRUCTIONS[step]
        header = "### वर्तमान संवाद निर्देश ###" if hindi else "### Current Conversation Instructions ###"
        parts.append(f"{header}\n{hindi_text if hindi else english}")
        parts.append(QUESTION_CONTROL)
        parts.append(FALLBACK_INSTRUCTIONS)

        if hindi:
            parts.append(
                "### अंतिम निर्देश ###\n"
                "हमेशा सटीक, स्पष्ट और उपयोगी उत्तर दें। कभी भी बेतुकी या अप्रासंगिक जानकारी न दें।\n"
                "उपयोगकर्ता के प्रश्न का सीधा उत्तर दें और अनावश्यक जानकारी से बचें।"
            )
        else:
            parts.append(
                "### Final Instructions ###\n"
                "Always provide accurate, clear, and helpful responses. Never provide nonsensical or irrelevant information.\n"
                "Answer the user's question directly and avoid unnecessary information.\n"
                "Maintain a professional, knowledgeable, and helpful tone throughout the conversation."
            )

        logger.debug(f"[PROMPT] System message built: lang={tag} step={step} hits={len(hits or [])}")
        return "\n\n".join(parts)

    def enhance_user_message(self, message: str, lead: Mapping[str, Any], digest: HistoryDigest,
                             hits: Sequence) -> str:
        """Wrap the user's message with answering rules, history facts and search context."""
        lead = lead or {}
        digest = digest or HistoryDigest()

        parts = [
            message,
            "### Response Instructions ###\n"
            "Respond as a professional real estate agent with expertise in the property market. "
            "Provide accurate, factual, and clear answers based on the search results and your knowledge. "
            "Maintain a consultative, helpful tone throughout.",
            "### Conversation Instructions ###\n"
            "1. Ask only one question at a time to maintain a natural conversation flow.\n"
            "2. Do not provide a list of multiple questions at once.\n"
            "3. Do not ask again about information that already exists in the conversation history.\n"
            "4. Adapt your language to match the user's preferred language (Hindi, English, Gujarati, Marathi, or Hinglish).",
        ]

        asked = [
            (digest.asked_about_name, "You have already asked for the user's name. Do not ask for it again."),
            (digest.asked_about_budget, "You have already asked about the user's budget. Do not ask about it again."),
            (digest.asked_about_location,
             "You have already asked about the user's preferred location. Do not ask about it again."),
            (digest.asked_about_property_type,
             "You have already asked about the property type. Do not ask about it again."),
        ]
        history_lines = [f"• {text}" for flag, text in asked if flag]
        if history_lines:
            parts.append("### Conversation History Information ###\n" + "\n".join(history_lines))

        provided = digest.provided_info
        if provided:
            labels = [("name", "their name: {}"), ("budget", "their budget: ₹{}"),
                      ("location", "their preferred location: {}"),
                      ("property_type", "their preferred property type: {}")]
            lines = [f"• User has provided {fmt.format(provided[key])}" for key, fmt in labels if provided.get(key)]
            parts.append("### User-Provided Information ###\n" + "\n".join(lines))

        parts.append(
            "### IMPORTANT: Question Control ###\n"
            "• NEVER ask the same question twice in a conversation.\n"
            "• NEVER ask multiple questions at once.\n"
            "• NEVER ask for information that the user has already provided.\n"
            "• If you're unsure whether to ask a question, DO NOT ask it."
        )

        for pattern, note in self.topic_notes:
            if pattern.search(message or ""):
                parts.append(note)

        user_info = ["### User Information ###"]
        for field, label in [("name", "Name"), ("budget", "Budget"),
                             ("preferredLocation", "Preferred Location"), ("propertyType", "Property Type")]:
            if lead.get(field):
                value = f"₹{lead[field]}" if field == "budget" else lead[field]
                user_info.append(f"• {label}: {value}")
        parts.append("\n".join(user_info))

        if hits:
            section = [
                "### Latest Real Estate Information ###",
                "Answer using the following information. This information is factual and up-to-date:",
            ]
            for index, hit in enumerate(list(hits)[:MAX_PROMPT_HITS], 1):
                section.append(f"{index}. {_one_line(hit.title)}")
                section.append(f"   {_one_line(hit.snippet)}")
                section.append(f"   Source: {hit.link}")
            section.append("")
            section.append("Answer using the above information. If the information is insufficient, "
                           "clearly state that you do not have complete information.")
            parts.append("\n".join(section))

        parts.append("### Final Instructions ###\n"
                     "Provide a direct and clear answer to the user's question. Avoid unnecessary information.")
        return "\n\n".join(parts)


def build_system_message(lead: Mapping[str, Any], tag: str, digest: HistoryDigest, hits: Sequence,
                         is_ending: bool) -> str:
    return PromptBuilder().build_system_message(lead, tag, digest, hits, is_ending)


def enhance_user_message(message: str, lead: Mapping[str, Any], digest: HistoryDigest, hits: Sequence) -> str:
    return PromptBuilder().enhance_user_message(message, lead, digest, hits)
