"""
Pattern and keyword tables for the lead-qualification NLU pipeline.
Defines the default tables and allows overriding them from a JSON file.

Every table is plain data (strings and lists of strings) so a deployment
can extend vocabularies or add languages without touching algorithm code.
Ordering is significant wherever a table is consulted first-match-wins.
"""
import json
import logging
import re
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .. import config

logger = logging.getLogger(__name__)

# Devanagari words that only Marathi uses as standalone tokens
_MARATHI_WORDS = (
    "आहे|नाही|काय|कसे|कोण|कुठे|मी|आम्ही|तुम्ही|माझा|माझे|माझी|"
    "आमचा|मला|आम्हाला|तुमचे|तुमचा|हवे|हवा|पाहिजे"
)
_TOKEN_EDGE = r"[\s,.!?।]"

_CURRENCY = r"(?:rs\.?|inr|₹)"
_AMOUNT = r"(\d[\d,.]*)(?!\d)(?!\s*(?:bhk|rk|bed|bath|sq|acre|yard|floor|storey))"


# Default tables - can be overridden per deployment via NLU_TABLES_PATH
DEFAULT_NLU_TABLES: Dict[str, Any] = {
    # Language tag -> patterns, in priority order. First tag with a matching pattern wins.
    "language_patterns": {
        "mr": [
            rf"^(?=.*[\u0900-\u097F]{{3,}})(?=.*(?:^|{_TOKEN_EDGE})(?:{_MARATHI_WORDS})(?=$|{_TOKEN_EDGE}))",
        ],
        "hi": [
            r"[\u0900-\u097F]{3,}",
            r"(?:कैसे|क्या|कौन|कहाँ|क्यों|मैं|हम|तुम|आप|वह|यह|मेरा|हमारा|मुझे|हमें)",
        ],
        "gu": [r"[\u0A80-\u0AFF]{3,}"],
        "bn": [r"[\u0980-\u09FF]{3,}"],
        "ta": [r"[\u0B80-\u0BFF]{3,}"],
        "te": [r"[\u0C00-\u0C7F]{3,}"],
        "kn": [r"[\u0C80-\u0CFF]{3,}"],
        "ml": [r"[\u0D00-\u0D7F]{3,}"],
        "pa": [r"[\u0A00-\u0A7F]{3,}"],
        "ur": [r"[\u0600-\u06FF]{3,}"],
    },

    "location_prepositions": ["in", "at", "near", "around", "within"],
    "location_descriptors": ["area", "locality", "region", "district", "neighborhood", "neighbourhood"],
    # Words that end a prepositional location phrase
    "location_terminators": [
        "for", "to", "under", "below", "above", "over", "with", "within", "between",
        "budget", "priced", "costing", "upto", "up", "on", "and", "or", "having",
        "from", "less", "more", "max", "maximum", "min", "minimum", "which", "that",
        "where", "please", "near", "around", "at", "in", "i", "we", "my",
        "area", "locality", "region", "district", "neighborhood", "neighbourhood",
    ],
    # Words that cannot open a location phrase
    "location_leading_stopwords": [
        "show", "me", "the", "a", "an", "any", "good", "best", "nice", "some", "find",
        "flat", "flats", "home", "homes", "house", "houses", "property", "properties",
        "apartment", "apartments", "looking", "for", "i", "want", "need", "in", "at",
        "near", "around", "within", "which", "what", "is", "prefer", "like", "my", "your",
        "this", "that", "buying", "renting", "selling", "investing", "purchasing", "getting",
    ],
    "known_cities": [
        "mumbai", "navi mumbai", "delhi", "new delhi", "bangalore", "bengaluru", "hyderabad",
        "chennai", "kolkata", "pune", "ahmedabad", "jaipur", "surat", "lucknow", "kanpur",
        "nagpur", "indore", "thane", "bhopal", "visakhapatnam", "patna", "vadodara",
        "ghaziabad", "ludhiana", "agra", "nashik", "faridabad", "meerut", "rajkot",
        "varanasi", "srinagar", "aurangabad", "dhanbad", "amritsar", "allahabad", "ranchi",
        "howrah", "coimbatore", "jabalpur", "gwalior", "vijayawada", "jodhpur", "madurai",
        "raipur", "kota", "guwahati", "chandigarh", "solapur", "hubli", "dharwad",
        "bareilly", "moradabad", "mysore", "gurgaon", "gurugram", "aligarh", "jalandhar",
        "tiruchirappalli", "bhubaneswar", "salem", "mira-bhayandar", "warangal", "guntur",
        "bhiwandi", "saharanpur", "gorakhpur", "bikaner", "amravati", "noida", "jamshedpur",
        "bhilai", "cuttack", "firozabad", "kochi", "nellore", "bhavnagar", "dehradun",
        "durgapur", "asansol", "rourkela", "nanded", "kolhapur", "ajmer", "akola",
        "gulbarga", "jamnagar", "ujjain", "loni", "siliguri", "jhansi", "ulhasnagar",
        "jammu", "sangli-miraj", "mangalore", "erode", "belgaum", "ambattur", "tirunelveli",
        "malegaon", "gaya", "jalgaon", "udaipur", "maheshtala", "tirupur", "davanagere",
        "kozhikode", "akbarpur", "korba", "bhilwara", "berhampur", "muzaffarpur",
        "ahmednagar", "mathura", "kollam", "avadi", "kadapa", "kamarhati", "sambalpur",
        "bilaspur", "shahjahanpur", "satara", "bijapur", "rampur", "shimoga", "shivamogga",
        "chandrapur", "tumkur", "muzaffarnagar", "bhagalpur", "bally", "panihati", "rohtak",
        "sagar", "bidar", "brahmapur", "baranagar", "darbhanga", "sonipat", "pondicherry",
        "durg", "imphal", "ratlam", "hapur", "anantapur", "arrah", "karimnagar", "etawah",
        "ambarnath", "bharatpur", "begusarai", "gandhidham", "barasat", "raebareli",
        "khammam", "bhiwani", "cuddalore", "sonarpur", "rajahmundry", "bokaro", "bellary",
        "patiala", "gopalpur", "agartala", "bhatpara", "hazaribagh", "dhule", "panvel",
        "haldia", "kurnool", "tiruppur", "ambala", "panipat", "kottayam", "tirupati",
        "karnal", "bathinda",
    ],

    # Ordered: first pattern with a capture wins. Group 1 is the amount.
    "budget_patterns": [
        rf"(?:budget|price|cost|value|worth|range)\s+(?:of\s+|is\s+|around\s+|about\s+)?{_CURRENCY}?\s*{_AMOUNT}",
        rf"{_CURRENCY}\s*{_AMOUNT}",
        rf"(?:between|from)\s*{_CURRENCY}?\s*{_AMOUNT}\s*(?:to|-|and)\s*{_CURRENCY}?\s*\d[\d,.]*",
        rf"(?:under|below|less than|maximum|max|upto|up to)\s*{_CURRENCY}?\s*{_AMOUNT}",
        rf"(?:above|over|more than|minimum|min)\s*{_CURRENCY}?\s*{_AMOUNT}",
        rf"(\d[\d,.]*)\s*(?:lakhs?|lacs?|crores?|cr|k|l|{_CURRENCY})(?![a-z])",
    ],

    "property_types": [
        "apartment", "house", "villa", "flat", "plot", "land", "penthouse", "studio",
        "duplex", "bungalow", "cottage", "farmhouse", "rowhouse", "townhouse",
        "1bhk", "2bhk", "3bhk", "4bhk", "5bhk", "rk", "single room", "commercial",
        "office", "shop", "retail", "warehouse", "industrial", "pg", "paying guest",
        "independent house", "independent floor", "builder floor", "kothi", "haveli",
        "residential apartment", "residential plot", "residential land", "residential house",
        "commercial property", "commercial space", "commercial plot", "commercial land",
        "agricultural land", "farm land", "farm house", "resort", "service apartment",
    ],

    "buy_terms": [
        "buy", "purchase", "buying", "purchasing", "own", "owning", "investment", "investing",
        "sale", "kharidna", "kharid", "खरीदना", "खरीद", "विकय", "खरेदी", "ખરીદવું",
    ],
    "rent_terms": [
        "rent", "rental", "renting", "lease", "leasing", "temporary", "short term",
        "kiraya", "किराया", "भाड़े", "भाडे", "ભાડે",
    ],

    "bedroom_patterns": [
        r"(?<!\d)(\d+)\s*(?:bhk|bedrooms?|beds?)(?![a-z])",
        r"\b(one|two|three|four|five|single|double|triple)[\s-]*(?:bhk|bedrooms?|beds?)(?![a-z])",
    ],
    "bedroom_words": {
        "one": "1", "two": "2", "three": "3", "four": "4", "five": "5",
        "single": "1", "double": "2", "triple": "3",
    },

    # Query enhancement
    "real_estate_keywords": ["real estate", "property", "flat", "house", "apartment"],
    "real_estate_qualifier": "real estate property",
    "trusted_portals": [
        "99acres.com", "magicbricks.com", "housing.com", "nobroker.in",
        "commonfloor.com", "squareyards.com", "makaan.com", "proptiger.com",
    ],

    # Relevance ranking
    "portal_tiers": {
        "premium": [
            "99acres.com", "magicbricks.com", "housing.com", "nobroker.in",
            "commonfloor.com", "squareyards.com", "makaan.com", "proptiger.com",
        ],
        "standard": ["propertywala.com", "indiaproperty.com"],
        "other": [
            "olx.in", "quikr.com", "nestaway.com", "zolostays.com", "stanzaliving.com",
            "colive.com", "facebook.com", "instagram.com", "linkedin.com",
        ],
    },
    "related_property_types": {
        "apartment": ["flat", "condo", "condominium", "residential apartment"],
        "flat": ["apartment", "condo", "condominium", "residential flat"],
        "house": ["villa", "bungalow", "independent", "kothi", "residential house"],
        "villa": ["house", "bungalow", "independent", "kothi"],
        "plot": ["land", "residential plot", "residential land"],
        "land": ["plot", "residential land", "residential plot"],
        "1bhk": ["1 bhk", "one bedroom", "1 bedroom", "single bedroom"],
        "2bhk": ["2 bhk", "two bedroom", "2 bedroom", "double bedroom"],
        "3bhk": ["3 bhk", "three bedroom", "3 bedroom", "triple bedroom"],
        "4bhk": ["4 bhk", "four bedroom", "4 bedroom", "quadruple bedroom"],
        "commercial": ["office", "shop", "retail", "commercial property", "commercial space"],
    },
    "price_patterns": [
        r"₹\s*\d[\d,.]*\s*(?:lakh|crore|k|l|cr)?",
        r"rs\.?\s*\d[\d,.]*\s*(?:lakh|crore|k|l|cr)?",
        r"inr\s*\d[\d,.]*\s*(?:lakh|crore|k|l|cr)?",
        r"\d[\d,.]*\s*(?:lakh|crore|k|l|cr)",
        r"price\s*:\s*\d[\d,.]*",
        r"cost\s*:\s*\d[\d,.]*",
        r"budget\s*:\s*\d[\d,.]*",
        r"\d+(?:\.\d+)?\s*cr",
        r"\d+(?:\.\d+)?\s*l",
        r"\d+(?:\.\d+)?\s*lacs",
        r"\d+(?:\.\d+)?\s*lakhs",
    ],
    "spacious_terms": ["spacious", "large"],
    "property_detail_patterns": [
        r"\d+\s*bhk", r"\d+\s*bedroom", r"\d+\s*bath", r"\d+\s*sq\.?\s*ft",
        r"\d+\s*square\s*feet", r"\d+\s*sq\.?\s*m", r"\d+\s*acre", r"\d+\s*yard",
        r"amenities", r"furnished", r"semi-furnished", r"unfurnished", r"carpet\s*area",
        r"built\s*up\s*area", r"super\s*built\s*up", r"floor\s*plan", r"master\s*bedroom",
        r"attached\s*bath", r"modular\s*kitchen", r"power\s*backup", r"24x7\s*water",
        r"security", r"gym|swimming\s*pool|club\s*house|garden|park",
    ],
    "recency_patterns": [
        r"new\s*launch", r"just\s*launch", r"recent", r"latest", r"new\s*project",
        r"under\s*construction", r"ready\s*to\s*move", r"immediate\s*possession",
        r"\d{1,2}\s*days?\s*ago", r"\d{1,2}\s*hours?\s*ago", r"possession\s*in\s*\d{4}",
        r"completion\s*in\s*\d{4}", r"newly\s*built", r"fresh\s*listing",
    ],
    "buy_listing_patterns": [
        r"\bbuy", r"\bsale", r"\bsell", r"\bpurchas", r"\binvest", r"\bownership",
        r"खरीदना", r"खरीद", r"विकय", r"खरेदी", r"ખરીદવું",
    ],
    "rent_listing_patterns": [
        r"\brent", r"\blease", r"\bleasing", r"\bto let\b", r"\bfor let\b",
        r"किराया", r"भाड़े", r"भाडे", r"ભાડે",
    ],
    "real_estate_vocabulary": (
        r"property|estate|home|house|apartment|flat|villa|plot|land|bhk|residential|"
        r"commercial|rent|sale|broker|agent|realty|builder|construction|project|township|"
        r"society|floor|bedroom|bathroom|kitchen|hall|balcony|terrace|parking|amenities|"
        r"possession|ownership|lease"
    ),
    "detail_terms": [
        "bhk", "bedroom", "bathroom", "sq ft", "square feet", "carpet area", "built up",
        "super built up", "floor", "storey", "parking", "garden", "balcony", "terrace",
        "kitchen", "hall", "living room", "dining room", "study room", "servant room",
        "pooja room", "store room", "lobby", "entrance", "lift", "elevator", "power backup",
        "water supply", "security", "gym", "swimming pool", "club house", "park",
        "playground", "jogging track", "tennis court", "basketball court", "badminton court",
        "squash court", "amphitheatre", "banquet hall", "party hall", "community hall",
        "shopping center", "school", "hospital", "market", "mall", "metro", "bus stop",
        "railway station", "airport",
    ],

    # Conversation history: questions the assistant already asked
    "asked_patterns": {
        "name": [
            r"what(?:'s| is) your name", r"may I know your name", r"could you tell me your name",
            r"who am I speaking with", r"आपका नाम क्या है", r"आपका नाम बताएं",
            r"तुमचे नाव काय आहे", r"તમારું નામ શું છે",
        ],
        "budget": [
            r"what(?:'s| is) your budget", r"budget.*range", r"how much.*spend", r"price range",
            r"आपका बजट क्या है", r"कितना खर्च कर सकते हैं", r"तुमचे बजेट किती आहे",
            r"તમારું બજેટ શું છે",
        ],
        "location": [
            r"preferred location", r"which area", r"where.*looking", r"location preference",
            r"कौन सा इलाका", r"कहां पर चाहते हैं", r"कोणत्या भागात", r"ક્યાં શોધી રહ્યા છો",
        ],
        "property_type": [
            r"what type of property", r"looking for a (?:house|apartment|flat|condo)",
            r"property type", r"किस प्रकार की संपत्ति", r"कौन सा प्रॉपर्टी टाइप",
            r"कोणत्या प्रकारची मालमत्ता", r"કયા પ્રકારની સંપત્તિ",
        ],
    },
    # Conversation history: facts the user supplied. Group 1 is the value.
    "provided_patterns": {
        "name": [
            r"my name is ([^\W\d_][^\s\d.,!?;:]*(?:\s+[^\W\d_][^\s\d.,!?;:]*){0,2})",
            r"\bI am ([^\W\d_][^\s\d.,!?;:]*(?:\s+[^\W\d_][^\s\d.,!?;:]*){0,2})",
            r"\bI'm ([^\W\d_][^\s\d.,!?;:]*(?:\s+[^\W\d_][^\s\d.,!?;:]*){0,2})",
            r"मेरा नाम\s+([^\s\d.,!?।]+(?:\s+[^\s\d.,!?।]+)?)\s+है",
            r"माझे नाव\s+([^\s\d.,!?।]+(?:\s+[^\s\d.,!?।]+)?)\s+आहे",
            r"મારું નામ\s+([^\s\d.,!?।]+(?:\s+[^\s\d.,!?।]+)?)\s+છે",
        ],
        "budget": [
            r"budget is (\d[\d,]*)",
            r"looking.*around (\d[\d,]*)",
            r"(\d[\d,]*).*budget",
            r"मेरा बजट (\d[\d,]*)",
            r"माझे बजेट (\d[\d,]*)",
            r"મારું બજેટ (\d[\d,]*)",
        ],
        "location": [
            r"\b(?:location|area|place|interested in)\b(?:\s*[:-]\s*|\s+(?:is\s+|would be\s+|will be\s+)?)([a-z][a-z\s,]*)",
        ],
    },
    # Leading words that mean an "I am ..." phrase is not a name
    "name_stopwords": [
        "looking", "interested", "searching", "planning", "from", "a", "an", "the", "in",
        "not", "here", "fine", "good", "ok", "okay", "sure", "ready", "also", "just",
        "thinking", "trying", "going", "currently", "very", "so", "really", "new",
        "buying", "renting", "selling", "at", "on", "with", "and", "glad", "happy",
    ],
    "history_window": 10,

    # Response normalisation: offer-to-help question phrasings to strip
    "offer_to_help_patterns": [
        r"would you like (?:to|me to) [^.?!]+\??",
        r"do you want (?:to|me to) [^.?!]+\??",
        r"can I help you [^.?!]+\??",
        r"are you interested in [^.?!]+\??",
        r"shall we [^.?!]+\??",
        r"how about [^.?!]+\??",
        r"what (?:else|other|more) [^.?!]+\??",
        r"is there anything else [^.?!]+\??",
        r"क्या आप .+ बताना चाहेंगे\??",
        r"आप .+ के बारे में क्या सोचते हैं\??",
        r"क्या आपको .+ चाहिए\??",
        r"क्या मैं आपकी और सहायता कर सकता हूँ\??",
        r"क्या आप .+ जानना चाहते हैं\??",
        r"क्या आपके पास .+ है\??",
        r"मैं आपकी कैसे सहायता कर सकता हूँ\??",
        r"आपको और क्या जानकारी चाहिए\??",
        r"क्या आप .+ खोज रहे हैं\??",
        r"क्या आप .+ पसंद करेंगे\??",
        r"तुम्हाला .+ आवडेल का\??",
        r"मी तुम्हाला .+ मदत करू शकतो का\??",
        r"तुम्हाला .+ हवे आहे का\??",
        r"શું તમે .+ કરવા માંગો છો\??",
        r"હું તમને .+ મદદ કરી શકું\??",
        r"તમને .+ જોઈએ છે\??",
    ],
    "closing_present_pattern": r"thank you|thanks|pleasure|happy to help|see you",
    "closing_line": (
        "It was a pleasure assisting you. If you have any other questions in the future, "
        "please feel free to ask."
    ),

    # Conversation ending detection
    "short_ending_phrases": [
        "thanks", "thank you", "ok", "okay", "bye", "goodbye", "got it",
        "धन्यवाद", "शुक्रिया", "ठीक है", "अच्छा", "बाय",
        "आभार", "ठीक आहे", "बरं",
        "આભાર", "ધન્યવાદ", "ઠીક છે", "સારું",
    ],
    "ending_patterns": [
        r"\b(?:thank you|thanks|thank u)\b",
        r"\b(?:goodbye|bye|see you|farewell)\b",
        r"\b(?:that's all|that is all|no more|finished)\b",
        r"\bno more questions\b",
        r"\b(?:got it|understood|i understand)\b",
        r"\b(?:ok|okay|fine|great)\b",
        r"\b(?:that's helpful|that helps|clear now)\b",
        r"\bappreciate\b",
        r"धन्यवाद|शुक्रिया|थैंक्स|आभार",
        r"अलविदा|बाय|गुड बाय|फिर मिलेंगे",
        r"बस इतना ही|यही सब है|हो गया",
        r"कोई और सवाल नहीं|और कुछ नहीं",
        r"समझ गया|ठीक है|समझ में आया",
        r"ओके|अच्छा|ठीक|बहुत अच्छा",
        r"मदद मिली|स्पष्ट है|समझ में आ गया",
        r"थँक्यू",
        r"निरोप|पुन्हा भेटू",
        r"बस एवढेच|इतकेच|झाले",
        r"आणखी प्रश्न नाहीत",
        r"समजले|बरोबर|ठीक आहे",
        r"छान|बरं",
        r"मदत झाली|स्पष्ट आहे",
        r"આભાર|ધન્યવાદ|થેંક્યુ",
        r"આવજો|બાય|ફરી મળીશું",
        r"બસ આટલું જ|પૂરું થયું",
        r"વધુ પ્રશ્નો નથી",
        r"સમજાયું|બરાબર|ઠીક છે",
        r"ઓકે|સારું|ઠીક",
        r"મદદ મળી|સ્પષ્ટ છે",
        r"ধন্যবাদ|আপনাকে ধন্যবাদ",
        r"বিদায়|ফিরে দেখা হবে",
        r"এটাই সব|শেষ",
        r"আর কোন প্রশ্ন নেই",
        r"বুঝেছি|ঠিক আছে",
        r"ওকে|ভালো",
        r"সাহায্য পেয়েছি|পরিষ্কার",
    ],

    # Keywords that suggest a query needs fresh web data
    "web_search_keywords": [
        "market", "price", "trend", "current", "latest", "recent",
        "statistics", "data", "report", "news", "development",
        "investment", "return", "appreciation", "depreciation",
        "mortgage", "interest rate", "loan", "financing",
        "neighborhood", "school", "crime", "safety", "amenities",
        "tax", "property tax", "insurance", "regulation", "law",
        "forecast", "prediction", "future", "growth",
        "बाजार", "कीमत", "मूल्य", "वर्तमान", "नवीनतम", "हालिया",
        "आंकड़े", "डेटा", "रिपोर्ट", "समाचार", "विकास",
        "निवेश", "रिटर्न", "मूल्यवृद्धि", "मूल्यह्रास",
        "बंधक", "ब्याज दर", "ऋण", "वित्तपोषण",
        "पड़ोस", "स्कूल", "अपराध", "सुरक्षा", "सुविधाएं",
        "कर", "संपत्ति कर", "बीमा", "नियमन", "कानून",
        "पूर्वानुमान", "भविष्यवाणी", "भविष्य",
        "बाजारपेठ", "किंमत", "ट्रेंड", "सध्याचे", "अलीकडील",
        "आकडेवारी", "अहवाल", "बातम्या",
        "गुंतवणूक", "परतावा", "मूल्यवाढ", "मूल्यघट",
        "गहाण", "व्याजदर", "कर्ज", "वित्तपुरवठा",
        "परिसर", "शाळा", "गुन्हेगारी", "सुविधा",
        "मालमत्ता कर", "विमा", "कायदा", "भाकीत", "अंदाज", "वाढ",
        "બજાર", "કિંમત", "વલણ", "વર્તમાન", "નવીનતમ", "તાજેતરની",
        "આંકડા", "ડેટા", "અહેવાલ", "સમાચાર", "વિકાસ",
        "રોકાણ", "વળતર", "મૂલ્ય વૃદ્ધિ", "મૂલ્ય ઘટાડો",
        "ગીરો", "વ્યાજ દર", "લોન", "ફાઇનાન્સિંગ",
        "પડોશ", "શાળા", "ગુના", "સલામતી", "સુવિધાઓ",
        "કર", "મિલકત કર", "વીમો", "નિયમન", "કાયદો",
        "આગાહી", "અનુમાન", "ભવિષ્ય", "વૃદ્ધિ",
    ],
}

REQUIRED_TABLES = [
    "language_patterns", "known_cities", "budget_patterns", "property_types",
    "buy_terms", "rent_terms", "bedroom_patterns", "bedroom_words", "trusted_portals",
    "portal_tiers", "asked_patterns", "provided_patterns", "offer_to_help_patterns",
]

# Tables holding regex source text, compiled by the pipeline components
PATTERN_TABLES = [
    "language_patterns", "budget_patterns", "bedroom_patterns", "price_patterns",
    "property_detail_patterns", "recency_patterns", "buy_listing_patterns",
    "rent_listing_patterns", "real_estate_vocabulary", "asked_patterns",
    "provided_patterns", "offer_to_help_patterns", "closing_present_pattern",
    "ending_patterns",
]


def _pattern_sources(table: Any):
    """Yield every regex source string in a pattern table (string, list, or keyed lists)."""
    if isinstance(table, str):
        yield table
    elif isinstance(table, dict):
        for patterns in table.values():
            yield from _pattern_sources(patterns)
    elif isinstance(table, (list, tuple)):
        for pattern in table:
            yield from _pattern_sources(pattern)
    else:
        raise TypeError(f"expected pattern text, got {type(table).__name__}")


def _freeze(value: Any) -> Any:
    """Turn nested dicts/lists into read-only mappings and tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


class NluConfig:
    """Loads NLU tables with optional per-deployment overrides"""

    @staticmethod
    def get_tables(path: Optional[str] = None) -> Mapping[str, Any]:
        """
        Get the NLU tables, merged with an override file when one is given.

        Args:
            path: JSON file whose top-level keys replace or extend default tables

        Returns:
            Read-only mapping of table name -> table
        """
        tables = dict(DEFAULT_NLU_TABLES)

        if path:
            try:
                with open(path, encoding="utf-8") as fh:
                    overrides = json.load(fh)
                tables = NluConfig._merge_tables(tables, overrides)
                logger.info(f"[NLU CONFIG] Loaded table overrides from {path}")
            except (OSError, ValueError) as e:
                logger.error(f"[NLU CONFIG] Could not load overrides from {path}: {e}")

        is_valid, error = NluConfig.validate_tables(tables)
        if not is_valid:
            logger.error(f"[NLU CONFIG] Invalid override ({error}), using defaults")
            tables = dict(DEFAULT_NLU_TABLES)

        return _freeze(tables)

    @staticmethod
    def _merge_tables(default_tables: Dict, overrides: Dict) -> Dict:
        """
        Merge override tables over defaults.
        A table present in the override replaces the default one wholesale,
        except keyed tables (dicts), which are updated key by key.
        """
        merged = dict(default_tables)

        for name, table in overrides.items():
            if isinstance(merged.get(name), dict) and isinstance(table, dict):
                combined = dict(merged[name])
                combined.update(table)
                merged[name] = combined
            else:
                merged[name] = table

        return merged

    @staticmethod
    def validate_tables(tables: Dict[str, Any]) -> tuple[bool, Optional[str]]:
        """
        Validate table structure.

        Returns:
            (is_valid, error_message)
        """
        for name in REQUIRED_TABLES:
            if name not in tables:
                return False, f"Missing required table: {name}"

        if not isinstance(tables["language_patterns"], dict):
            return False, "language_patterns must map language tag -> pattern list"

        for tag, patterns in tables["language_patterns"].items():
            if not isinstance(patterns, (list, tuple)):
                return False, f"Patterns for language '{tag}' must be a list"

        for name in PATTERN_TABLES:
            if name not in tables:
                continue
            try:
                for source in _pattern_sources(tables[name]):
                    re.compile(source)
            except (TypeError, re.error) as e:
                return False, f"Bad pattern in {name}: {e}"

        return True, None


@lru_cache(maxsize=1)
def get_default_tables() -> Mapping[str, Any]:
    """Tables for this process, built once (honours NLU_TABLES_PATH)."""
    return NluConfig.get_tables(config.NLU_TABLES_PATH or None)
