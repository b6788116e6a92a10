"""
Language names and fixed message templates, one immutable lookup per process.
"""
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping

LANGUAGE_NAMES = {
    "en": "English",
    "hi": "Hindi",
    "mr": "Marathi",
    "gu": "Gujarati",
    "bn": "Bengali",
    "ta": "Tamil",
    "te": "Telugu",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
    "ur": "Urdu",
}

SYSTEM_MESSAGES = {
    "en": "You are a helpful real estate assistant. Provide accurate information about properties, market trends, and buying/selling advice. Be concise and factual.",
    "hi": "आप एक सहायक रियल एस्टेट सहायक हैं। संपत्तियों, बाजार रुझानों और खरीदने/बेचने की सलाह के बारे में सटीक जानकारी प्रदान करें। संक्षिप्त और तथ्यात्मक रहें।",
    "mr": "तुम्ही एक मदतगार रिअल इस्टेट सहाय्यक आहात. मालमत्ता, बाजारातील कल आणि खरेदी/विक्री सल्ला याबद्दल अचूक माहिती द्या. संक्षिप्त आणि वस्तुनिष्ठ रहा.",
    "gu": "તમે એક મદદગાર રીયલ એસ્ટેટ સહાયક છો. પ્રોપર્ટી, માર્કેટ ટ્રેન્ડ્સ અને ખરીદી/વેચાણની સલાહ વિશે સચોટ માહિતી આપો. સંક્ષિપ્ત અને તથ્યાત્મક રહો.",
    "bn": "আপনি একজন সহায়ক রিয়েল এস্টেট সহকারী। সম্পত্তি, বাজারের প্রবণতা এবং কেনা/বিক্রয় সম্পর্কে সঠিক তথ্য প্রদান করুন। সংক্ষিপ্ত এবং তথ্যপূর্ণ থাকুন।",
    "ta": "நீங்கள் உதவிகரமான ரியல் எஸ்டேட் உதவியாளர். சொத்துக்கள், சந்தை போக்குகள் மற்றும் வாங்குதல்/விற்பனை ஆலோசனை பற்றிய துல்லியமான தகவல்களை வழங்கவும். சுருக்கமாகவும் உண்மையாகவும் இருங்கள்.",
    "te": "మీరు సహాయకరమైన రియల్ ఎస్టేట్ సహాయకులు. ఆస్తుల గురించి, మార్కెట్ ధోరణుల గురించి మరియు కొనుగోలు/అమ్మకం సలహాల గురించి ఖచ్చితమైన సమాచారాన్ని అందించండి. సంక్షిప్తంగా మరియు వాస్తవికంగా ఉండండి.",
    "kn": "ನೀವು ಸಹಾಯಕ ರಿಯಲ್ ಎಸ್ಟೇಟ್ ಸಹಾಯಕರಾಗಿದ್ದೀರಿ. ಆಸ್ತಿಗಳು, ಮಾರುಕಟ್ಟೆ ಪ್ರವೃತ್ತಿಗಳು ಮತ್ತು ಖರೀದಿ/ಮಾರಾಟ ಸಲಹೆಗಳ ಬಗ್ಗೆ ನಿಖರವಾದ ಮಾಹಿತಿಯನ್ನು ಒದಗಿಸಿ. ಸಂಕ್ಷಿಪ್ತ ಮತ್ತು ವಾಸ್ತವಿಕವಾಗಿರಿ.",
    "ml": "നിങ്ങൾ ഒരു സഹായകരമായ റിയൽ എസ്റ്റേറ്റ് അസിസ്റ്റന്റാണ്. വസ്തുക്കൾ, വിപണി പ്രവണതകൾ, വാങ്ങൽ/വിൽക്കൽ ഉപദേശം എന്നിവയെക്കുറിച്ച് കൃത്യമായ വിവരങ്ങൾ നൽകുക. ചുരുക്കവും വസ്തുനിഷ്ഠവുമായിരിക്കുക.",
    "pa": "ਤੁਸੀਂ ਇੱਕ ਮਦਦਗਾਰ ਰੀਅਲ ਅਸਟੇਟ ਸਹਾਇਕ ਹੋ। ਜਾਇਦਾਦਾਂ, ਮਾਰਕੀਟ ਰੁਝਾਨਾਂ, ਅਤੇ ਖਰੀਦਣ/ਵੇਚਣ ਦੀ ਸਲਾਹ ਬਾਰੇ ਸਹੀ ਜਾਣਕਾਰੀ ਪ੍ਰਦਾਨ ਕਰੋ। ਸੰਖੇਪ ਅਤੇ ਤੱਥਾਤਮਕ ਰਹੋ।",
    "ur": "آپ ایک مددگار ریل اسٹیٹ اسسٹنٹ ہیں۔ پراپرٹیز، مارکیٹ رجحانات، اور خریدنے/بیچنے کے مشورے کے بارے میں درست معلومات فراہم کریں۔ مختصر اور حقیقی رہیں۔",
}

NO_RESULTS_MESSAGES = {
    "en": "I couldn't find any relevant real estate information for your query.",
    "hi": "मुझे आपके प्रश्न के लिए कोई प्रासंगिक रियल एस्टेट जानकारी नहीं मिली।",
    "mr": "मला तुमच्या प्रश्नासाठी कोणतीही संबंधित रिअल इस्टेट माहिती सापडली नाही.",
    "gu": "મને તમારી ક્વેરી માટે કોઈ સંબંધિત રીયલ એસ્ટેટ માહિતી મળી નથી.",
    "bn": "আমি আপনার প্রশ্নের জন্য কোনও প্রাসঙ্গিক রিয়েল এস্টেট তথ্য খুঁজে পাইনি।",
    "ta": "உங்கள் கேள்விக்கு தொடர்புடைய ரியல் எஸ்டேட் தகவல்களை என்னால் கண்டுபிடிக்க முடியவில்லை.",
    "te": "మీ ప్రశ్నకు సంబంధించిన రియల్ ఎస్టేట్ సమాచారాన్ని నేను కనుగొనలేకపోయాను.",
    "kn": "ನಿಮ್ಮ ಪ್ರಶ್ನೆಗೆ ಸಂಬಂಧಿಸಿದ ಯಾವುದೇ ರಿಯಲ್ ಎಸ್ಟೇಟ್ ಮಾಹಿತಿಯನ್ನು ನಾನು ಕಂಡುಕೊಳ್ಳಲು ಸಾಧ್ಯವಾಗಲಿಲ್ಲ.",
    "ml": "നിങ്ങളുടെ ചോദ്യത്തിന് പ്രസക്തമായ റിയൽ എസ്റ്റേറ്റ് വിവരങ്ങളൊന്നും എനിക്ക് കണ്ടെത്താൻ കഴിഞ്ഞില്ല.",
    "pa": "ਮੈਨੂੰ ਤੁਹਾਡੇ ਸਵਾਲ ਲਈ ਕੋਈ ਢੁਕਵੀਂ ਰੀਅਲ ਅਸਟੇਟ ਜਾਣਕਾਰੀ ਨਹੀਂ ਮਿਲੀ।",
    "ur": "مجھے آپ کے سوال کے لیے کوئی متعلقہ ریل اسٹیٹ معلومات نہیں مل سکیں۔",
}

INTRO_MESSAGES = {
    "en": "Here's what I found online about your real estate query:",
    "hi": "आपके रियल एस्टेट प्रश्न के बारे में मुझे ऑनलाइन यह जानकारी मिली:",
    "mr": "तुमच्या रिअल इस्टेट प्रश्नाबद्दल मला ऑनलाईन हे सापडले:",
    "gu": "તમારી રીયલ એસ્ટેટ ક્વેરી વિશે મને ઓનલાઇન આ માહિતી મળી:",
    "bn": "আপনার রিয়েল এস্টেট প্রশ্ন সম্পর্কে আমি অনলাইনে যা খুঁজে পেয়েছি:",
    "ta": "உங்கள் ரியல் எஸ்டேட் கேள்வி பற்றி நான் ஆன்லைனில் கண்டுபிடித்தது இதோ:",
    "te": "మీ రియల్ ఎస్టేట్ ప్రశ్న గురించి నేను ఆన్‌లైన్‌లో కనుగొన్నది ఇదే:",
    "kn": "ನಿಮ್ಮ ರಿಯಲ್ ಎಸ್ಟೇಟ್ ಪ್ರಶ್ನೆಯ ಬಗ್ಗೆ ನಾನು ಆನ್‌ಲೈನ್‌ನಲ್ಲಿ ಕಂಡುಕೊಂಡದ್ದು ಇಲ್ಲಿದೆ:",
    "ml": "നിങ്ങളുടെ റിയൽ എസ്റ്റേറ്റ് ചോദ്യത്തെക്കുറിച്ച് ഞാൻ ഓൺലൈനിൽ കണ്ടെത്തിയത് ഇതാണ്:",
    "pa": "ਤੁਹਾਡੇ ਰੀਅਲ ਅਸਟੇਟ ਸਵਾਲ ਬਾਰੇ ਮੈਨੂੰ ਔਨਲਾਈਨ ਜੋ ਮਿਲਿਆ:",
    "ur": "آپ کے ریل اسٹیٹ سوال کے بارے میں مجھے آن لائن یہ معلومات ملیں:",
}

MORE_INFO_MESSAGES = {
    "en": "Is there anything specific from these results you'd like to know more about?",
    "hi": "क्या इन परिणामों से आप किसी विशेष जानकारी के बारे में और अधिक जानना चाहते हैं?",
    "mr": "या निकालांमधून तुम्हाला काही विशिष्ट माहिती अधिक जाणून घ्यायची आहे का?",
    "gu": "શું આ પરિણામોમાંથી કોઈ ચોક્કસ માહિતી વિશે તમે વધુ જાણવા માંગો છો?",
    "bn": "এই ফলাফলগুলি থেকে আপনি কি কোনও নির্দিষ্ট বিষয় সম্পর্কে আরও জানতে চান?",
    "ta": "இந்த முடிவுகளிலிருந்து குறிப்பிட்ட ஏதாவது பற்றி மேலும் அறிய விரும்புகிறீர்களா?",
    "te": "ఈ ఫలితాల నుండి మీరు ఏదైనా నిర్దిష్ట విషయం గురించి మరింత తెలుసుకోవాలనుకుంటున్నారా?",
    "kn": "ಈ ಫಲಿತಾಂಶಗಳಿಂದ ನೀವು ಯಾವುದಾದರೂ ನಿರ್ದಿಷ್ಟ ವಿಷಯದ ಬಗ್ಗೆ ಹೆಚ್ಚು ತಿಳಿಯಲು ಬಯಸುತ್ತೀರಾ?",
    "ml": "ഈ ഫലങ്ങളിൽ നിന്ന് എന്തെങ്കിലും പ്രത്യേകമായി കൂടുതൽ അറിയാൻ നിങ്ങൾ ആഗ്രഹിക്കുന്നുണ്ടോ?",
    "pa": "ਕੀ ਇਹਨਾਂ ਨਤੀਜਿਆਂ ਵਿੱਚੋਂ ਕੋਈ ਖਾਸ ਜਾਣਕਾਰੀ ਹੈ ਜਿਸ ਬਾਰੇ ਤੁਸੀਂ ਹੋਰ ਜਾਣਨਾ ਚਾਹੋਗੇ?",
    "ur": "کیا ان نتائج میں سے کوئی خاص چیز ہے جس کے بارے میں آپ مزید جاننا چاہیں گے؟",
}


@dataclass(frozen=True)
class LanguageTemplates:
    """Read-only per-language lookup tables"""
    names: Mapping[str, str]
    system_messages: Mapping[str, str]
    no_results: Mapping[str, str]
    intro: Mapping[str, str]
    more_info: Mapping[str, str]

    def language_name(self, tag: str) -> str:
        return self.names.get(tag, "Unknown")

    def system_message(self, tag: str) -> str:
        """Base assistant persona, with a respond-in-language note for non-English tags."""
        message = self.system_messages.get(tag, self.system_messages["en"])
        if tag != "en":
            message += f"\n\nIMPORTANT: Always respond in {self.language_name(tag)} language."
        return message

    def format_search_results(self, hits: Iterable, tag: str) -> str:
        hits = list(hits or [])
        if not hits:
            return self.no_results.get(tag, self.no_results["en"])

        lines = [self.intro.get(tag, self.intro["en"]), ""]
        for index, hit in enumerate(hits, 1):
            lines.append(f"{index}. **{hit.title}**")
            lines.append(hit.snippet)
            lines.append(f"[Learn more]({hit.link})")
            lines.append("")
        lines.append(self.more_info.get(tag, self.more_info["en"]))
        return "\n".join(lines)


@lru_cache(maxsize=1)
def get_language_templates() -> LanguageTemplates:
    return LanguageTemplates(
        names=MappingProxyType(dict(LANGUAGE_NAMES)),
        system_messages=MappingProxyType(dict(SYSTEM_MESSAGES)),
        no_results=MappingProxyType(dict(NO_RESULTS_MESSAGES)),
        intro=MappingProxyType(dict(INTRO_MESSAGES)),
        more_info=MappingProxyType(dict(MORE_INFO_MESSAGES)),
    )


def get_language_name(tag: str) -> str:
    return get_language_templates().language_name(tag)


def format_search_results_in_language(hits: Iterable, tag: str) -> str:
    """Numbered markdown listing of hits with intro/outro lines in the given language."""
    return get_language_templates().format_search_results(hits, tag)
