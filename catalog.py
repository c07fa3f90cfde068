from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class Text:
    en: str
    hi: str | None = None

    def render(self, language: str) -> str:
        if language == "en" or not self.hi or self.hi == self.en:
            return self.en
        if language == "hi":
            return self.hi
        return f"{self.en} / {self.hi}"

    def lines(self, language: str) -> Tuple[str, ...]:
        """Stacked form used for headings: English above Hindi in bilingual mode."""
        if language == "both" and self.hi and self.hi != self.en:
            return (self.en, self.hi)
        return (self.render(language),)


@dataclass(frozen=True)
class Option:
    value: str
    label: Text
    hint: Text | None = None  # shown on the form only


@dataclass(frozen=True)
class Question:
    field: str
    kind: str  # single, multi, ranking, rating, text, follow_up
    prompt: Text
    number: int | None = None
    note: Text | None = None
    detail_field: str | None = None
    detail_label: Text | None = None


LANGUAGES: Dict[str, Dict[str, str]] = {
    "both": {"label": "English / हिन्दी"},
    "en": {"label": "English"},
    "hi": {"label": "हिन्दी"},
}
DEFAULT_LANGUAGE = "both"


def resolve_language(value: str | None) -> str:
    if not value:
        return DEFAULT_LANGUAGE
    normalized = value.lower()
    return normalized if normalized in LANGUAGES else DEFAULT_LANGUAGE


YES_NO_OPTIONS: Tuple[Option, ...] = (
    Option("yes", Text("Yes", "हाँ")),
    Option("no", Text("No", "नहीं")),
)

GENDER_OPTIONS: Tuple[Option, ...] = (
    Option("male", Text("Male", "पुरुष")),
    Option("female", Text("Female", "महिला")),
    Option("other", Text("Other", "अन्य")),
)

BLOOD_GROUP_OPTIONS: Tuple[Option, ...] = tuple(
    Option(group, Text(group)) for group in ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
)

NO_VISIT_REASON_OPTIONS: Tuple[Option, ...] = (
    Option("no-trained-doctor", Text("No trained doctor nearby", "पास प्रशिक्षित डॉक्टर नहीं")),
    Option(
        "prefer-local",
        Text("Prefer local/quack because cheaper", "सस्ता होने के कारण स्थानीय/क्वैक चुनते हैं"),
    ),
    Option("long-waiting", Text("Long waiting", "लम्बा इंतज़ार")),
    Option("cost", Text("Cost of treatment", "इलाज की लागत")),
    Option("lack-awareness", Text("Lack of awareness", "जानकारी की कमी")),
)

SERVICE_OPTIONS: Tuple[Option, ...] = (
    Option("general-opd", Text("General OPD", "सामान्य OPD")),
    Option(
        "daycare",
        Text("Daycare treatments", "डेकेयर ट्रीटमेंट"),
        hint=Text("minor procedures", "छोटी प्रक्रियाएँ"),
    ),
    Option(
        "super-speciality",
        Text("Super-speciality consultations", "सुपर-स्पेशलिटी परामर्श"),
        hint=Text("cardiology, neurology, etc.", "हृदय, तंत्रिका आदि"),
    ),
    Option(
        "diagnostic",
        Text("Diagnostic lab & imaging", "डायग्नोस्टिक लैब और इमेजिंग"),
        hint=Text("reliable tests", "भरोसेमंद टेस्ट"),
    ),
    Option("cghs-support", Text("CGHS / CAPF support", "CGHS / CAPF सहायता")),
    Option("generic-medicines", Text("Affordable generic medicines", "सस्ती जेनेरिक दवाएँ")),
    Option("preventive-checkups", Text("Preventive health checkups", "निवारक स्वास्थ्य जांच")),
)

RANK_OPTIONS: Tuple[Option, ...] = (
    Option("1", Text("1st", "पहला")),
    Option("2", Text("2nd", "दूसरा")),
    Option("3", Text("3rd", "तीसरा")),
)

WELLNESS_CENTRE_OPTIONS: Tuple[Option, ...] = (
    Option("definitely", Text("Definitely", "ज़रूर")),
    Option("maybe", Text("Maybe", "शायद")),
    Option("not-interested", Text("Not interested", "रुचि नहीं")),
)

RATING_OPTIONS: Tuple[Option, ...] = tuple(Option(str(n), Text(str(n))) for n in range(1, 6))

WRONG_TREATMENT_OPTIONS: Tuple[Option, ...] = (
    Option("yes-often", Text("Yes - often", "हाँ - अक्सर")),
    Option("yes-once-twice", Text("Yes - once or twice", "हाँ - एक / दो बार")),
    Option("no", Text("No", "नहीं")),
)

BLOOD_TEST_COST_OPTIONS: Tuple[Option, ...] = (
    Option("less-300", Text("Less than ₹300", "₹300 से कम")),
    Option("300-600", Text("₹300-₹600")),
    Option("600-1000", Text("₹600-₹1000")),
    Option("more-1000", Text("More than ₹1000", "₹1000 से अधिक")),
)

GENERIC_MEDICINE_OPTIONS: Tuple[Option, ...] = (
    Option("yes", Text("Yes", "हाँ")),
    Option("no", Text("No", "नहीं")),
    Option("unsure", Text("Unsure", "निश्चित नहीं")),
)

VISIT_HOUR_OPTIONS: Tuple[Option, ...] = (
    Option("morning", Text("Morning (8am-12pm)", "सुबह (8-12)")),
    Option("afternoon", Text("Afternoon (12pm-4pm)", "दोपहर (12-4)")),
    Option("evening", Text("Evening (4pm-8pm)", "शाम (4-8)")),
    Option("weekend", Text("Weekend availability important", "वीकेंड पर खुला होना ज़रूरी")),
)

FOLLOW_UP_OPTIONS: Tuple[Option, ...] = (
    Option("phone", Text("Yes - Phone", "हाँ - फोन")),
    Option("whatsapp", Text("Yes - WhatsApp", "हाँ - WhatsApp")),
    Option("no", Text("No", "नहीं")),
)

CATALOG: Dict[str, Tuple[Option, ...]] = {
    "gender": GENDER_OPTIONS,
    "blood_group": BLOOD_GROUP_OPTIONS,
    "visited_doctor": YES_NO_OPTIONS,
    "no_visit_reasons": NO_VISIT_REASON_OPTIONS,
    "services_needed": SERVICE_OPTIONS,
    "use_wellness_centre": WELLNESS_CENTRE_OPTIONS,
    "cghs_importance": RATING_OPTIONS,
    "wrong_treatment": WRONG_TREATMENT_OPTIONS,
    "blood_test_cost": BLOOD_TEST_COST_OPTIONS,
    "generic_medicines": GENERIC_MEDICINE_OPTIONS,
    "visit_hours": VISIT_HOUR_OPTIONS,
    "health_sessions": YES_NO_OPTIONS,
    "follow_up": FOLLOW_UP_OPTIONS,
    "satisfaction": RATING_OPTIONS,
}

# (field, label, input type, placeholder)
PERSONAL_FIELDS: List[Tuple[str, Text, str, Text | None]] = [
    ("name", Text("Name", "नाम"), "text", None),
    ("age", Text("Age", "आयु"), "number", None),
    ("gender", Text("Gender", "लिंग"), "select", None),
    ("contact", Text("Contact", "संपर्क"), "tel", Text("Phone or Email", "फोन या ईमेल")),
    ("address", Text("Address", "पता"), "text", Text("Full address", "पूरा पता")),
    (
        "emergency_contact",
        Text("Emergency Contact", "आपातकालीन संपर्क"),
        "tel",
        Text("Emergency phone number", "आपातकालीन फोन नंबर"),
    ),
    ("blood_group", Text("Blood Group", "रक्त समूह"), "select", None),
    ("area", Text("Local area", "स्थानीय क्षेत्र"), "text", Text("Locality or area", "मोहल्ला या क्षेत्र")),
]

QUESTIONS: List[Question] = [
    Question(
        number=1,
        field="visited_doctor",
        kind="single",
        prompt=Text(
            "Have you visited any trained doctor (MBBS/MD/MS/DM/MCh) in Chhatarpur in the last 12 months?",
            "क्या आपने पिछले 12 महीनों में Chhatarpur में किसी प्रशिक्षित डॉक्टर (MBBS/MD/MS/DM/MCh) से इलाज कराया है?",
        ),
    ),
    Question(
        number=2,
        field="no_visit_reasons",
        kind="multi",
        prompt=Text("If NO, why?", "अगर नहीं, तो वजह क्या थी?"),
        note=Text("Choose all that apply", "सभी लागू विकल्प चुनें"),
        detail_field="other_reason",
        detail_label=Text("Other (please specify)", "अन्य (कृपया बताएं)"),
    ),
    Question(
        number=3,
        field="services_needed",
        kind="ranking",
        prompt=Text(
            "Which services do you need most in your area?",
            "आपके क्षेत्र में किन सेवाओं की सबसे ज़्यादा ज़रूरत है?",
        ),
        note=Text("Rank top 3", "टॉप 3 चुनें और क्रम दें"),
    ),
    Question(
        number=4,
        field="use_wellness_centre",
        kind="single",
        prompt=Text(
            "Would you use a local wellness centre if AIIMS-trained doctors and reliable diagnostics "
            "were available at affordable prices?",
            "यदि AIIMS-प्रशिक्षित डॉक्टर और भरोसेमंद डायग्नोस्टिक सस्ती कीमत पर उपलब्ध हों, "
            "क्या आप स्थानीय वेलनेस सेंटर का उपयोग करेंगे?",
        ),
    ),
    Question(
        number=5,
        field="cghs_importance",
        kind="rating",
        prompt=Text(
            "How important is having CGHS/CAPF empanelled services nearby for you or your family?",
            "CGHS/CAPF सेवाएँ आपके लिए कितनी ज़रूरी हैं?",
        ),
        note=Text("1 = Not important, 5 = Very important", "1 = बिल्कुल आवश्यक नहीं, 5 = बहुत ज़रूरी"),
    ),
    Question(
        number=6,
        field="wrong_treatment",
        kind="single",
        prompt=Text(
            "Have you ever received wrong or unnecessary tests/treatments locally?",
            "क्या आपको स्थानीय स्तर पर कभी गलत या अनावश्यक टेस्ट/इलाज मिला है?",
        ),
        detail_field="wrong_treatment_details",
        detail_label=Text("If yes, please briefly explain", "अगर हाँ, संक्षेप में बताएं"),
    ),
    Question(
        number=7,
        field="blood_test_cost",
        kind="single",
        prompt=Text(
            "What is an acceptable average cost for a routine blood test package (basic checkup) "
            "for families here?",
            "यहाँ परिवार के लिए सामान्य ब्लड टेस्ट पैकेज की स्वीकार्य औसत लागत क्या है? (रु में)",
        ),
    ),
    Question(
        number=8,
        field="generic_medicines",
        kind="single",
        prompt=Text(
            "Would you prefer generic medicines dispensed at the centre (cheaper) if quality assured?",
            "अगर गुणवत्तापूर्ण सुनिश्चित हो तो क्या आप सेंटर पर जेनेरिक दवाइयाँ लेना पसंद करेंगे (सस्ती होती हैं)?",
        ),
    ),
    Question(
        number=9,
        field="visit_hours",
        kind="multi",
        prompt=Text(
            "Which hours are best for you to visit the wellness centre?",
            "किस समय आप वेलनेस सेंटर आना पसंद करेंगे?",
        ),
        note=Text("Choose all that apply", "सभी लागू विकल्प चुनें"),
    ),
    Question(
        number=10,
        field="health_sessions",
        kind="single",
        prompt=Text(
            "Would you like community health awareness sessions (free) on topics like diabetes, "
            "hypertension, women's health, child vaccination?",
            "क्या आप मुफ्त सामुदायिक स्वास्थ्य जागरूकता सत्र चाहेंगे (शुगर, ब्लड प्रेशर, "
            "महिलाओं का स्वास्थ्य, बच्चों का टीकाकरण आदि)?",
        ),
        detail_field="health_topics",
        detail_label=Text("Which topics interest you most?", "किन विषयों में रुचि है?"),
    ),
    Question(
        field="feedback",
        kind="text",
        prompt=Text("Feedback & Suggestions", "सुझाव और प्रतिक्रिया"),
        note=Text(
            "Please give any suggestions or concerns you have about local healthcare (short)",
            "कृपया स्थानीय स्वास्थ्य सेवाओं के बारे में अपने सुझाव/चिंताएँ लिखें (संक्षेप)",
        ),
    ),
    Question(
        field="follow_up",
        kind="follow_up",
        prompt=Text("Follow-up Preference", "फॉलो-अप प्राथमिकता"),
        note=Text(
            "Would you like a follow-up call or message about the new centre?",
            "क्या आप नए केंद्र के बारे में फोन या संदेश से फॉलो-अप चाहते हैं?",
        ),
    ),
    Question(
        field="satisfaction",
        kind="rating",
        prompt=Text(
            "Overall satisfaction with local healthcare today",
            "आज के स्थानीय स्वास्थ्य सेवाओं से समग्र संतुष्टि",
        ),
        note=Text("1-5"),
    ),
]

NOT_ANSWERED = Text("Not answered", "उत्तर नहीं दिया गया")
NOT_PROVIDED = Text("Not provided", "नहीं दिया गया")
NO_FEEDBACK = Text("No feedback provided", "कोई सुझाव नहीं दिया गया")
NOT_SPECIFIED = Text("Not specified", "निर्दिष्ट नहीं")
NO_FOLLOW_UP = Text("No follow-up requested", "फॉलो-अप नहीं चाहिए")
PHONE_LABEL = Text("Phone", "फोन")
WHATSAPP_LABEL = Text("WhatsApp")

COPY: Dict[str, Dict[str, Text]] = {
    "site": {
        "centre": Text("Preventive Healthcare & Wellness Centre", "निवारक स्वास्थ्य और कल्याण केंद्र"),
        "tagline": Text(
            "For OPD, Daycare, Super-speciality, Diagnostics, CGHS/CAPF and Generic Medicine support "
            "in Chhatarpur Area"
        ),
        "team": Text("Team (AIIMS alumni outreach / Chhatarpur Wellness Initiative)"),
        "thanks": Text(
            "Thank you - your time and feedback are valuable to us.",
            "धन्यवाद - आपका कीमती समय और सुझाव हमारे लिए बहुत महत्वपूर्ण हैं।",
        ),
        "address": Text("D-89, 1st Floor, 100 Feet Rd, Chhatarpur Enclave, Phase - II, New Delhi-110074"),
    },
    "form": {
        "page_title": Text("Patient Questionnaire", "रोगी प्रश्नावली"),
        "purpose_title": Text("Purpose", "उद्देश्य"),
        "purpose": Text(
            "We want to understand local healthcare needs and improve services. Your answers will help "
            "set up reliable, affordable, and trustworthy care in Chhatarpur.",
            "हम आपके इलाके की स्वास्थ्य ज़रूरतें समझना चाहते हैं ताकि Chhatarpur में भरोसेमंद और "
            "सस्ती सेवाएँ दी जा सकें।",
        ),
        "instructions_title": Text("Instructions", "निर्देश"),
        "instruction_honest": Text("Please answer honestly.", "कृपया ईमानदारी से जवाब दें।"),
        "instruction_confidential": Text("All answers are confidential.", "सभी उत्तर गोपनीय रखे जाएँगे।"),
        "personal_title": Text("Personal Information", "व्यक्तिगत जानकारी"),
        "select_placeholder": Text("Select", "चुनें"),
        "rank_placeholder": Text("Rank", "क्रम"),
        "phone_placeholder": Text("Phone number", "फोन नंबर"),
        "whatsapp_placeholder": Text("WhatsApp number", "WhatsApp नंबर"),
        "submit_button": Text("Submit Questionnaire", "प्रश्नावली जमा करें"),
        "submitting": Text("Submitting...", "जमा हो रहा है..."),
    },
    "report": {
        "title": Text("Patient Questionnaire Response", "रोगी प्रश्नावली प्रतिक्रिया"),
        "date": Text("Date", "दिनांक"),
        "answer": Text("Answer", "उत्तर"),
        "personal_title": Text("Personal Information", "व्यक्तिगत जानकारी"),
        "saved": Text(
            "Your healthcare questionnaire has been saved securely. Thank you for your valuable feedback.",
            "आपकी स्वास्थ्य प्रश्नावली सुरक्षित रूप से सहेज ली गई है। आपके बहुमूल्य सुझाव के लिए धन्यवाद।",
        ),
        "back": Text("Back to Form", "फॉर्म पर वापस जाएँ"),
        "print": Text("Print", "प्रिंट करें"),
        "download_pdf": Text("Download PDF", "PDF डाउनलोड करें"),
        "page": Text("Page", "पृष्ठ"),
    },
    "errors": {
        "missing_personal": Text(
            "Please fill all mandatory personal information fields.",
            "कृपया सभी अनिवार्य व्यक्तिगत जानकारी भरें।",
        ),
        "missing_address": Text(
            "Please fill all mandatory address, emergency contact, and blood group fields.",
            "कृपया पता, आपातकालीन संपर्क और रक्त समूह के सभी अनिवार्य फ़ील्ड भरें।",
        ),
        "not_configured": Text(
            "Submission failed: the questionnaire database is not configured. Please contact the administrator.",
            "जमा नहीं हो सका: प्रश्नावली डेटाबेस कॉन्फ़िगर नहीं है। कृपया व्यवस्थापक से संपर्क करें।",
        ),
        "unreachable": Text(
            "Submission failed: the questionnaire database could not be reached. Please try again.",
            "जमा नहीं हो सका: प्रश्नावली डेटाबेस से संपर्क नहीं हो पाया। कृपया फिर से प्रयास करें।",
        ),
        "rejected": Text(
            "Failed to save response. Please try again.",
            "उत्तर सहेजा नहीं जा सका। कृपया फिर से प्रयास करें।",
        ),
        "unexpected": Text(
            "Unexpected error. Please try again.",
            "अनपेक्षित त्रुटि हुई। कृपया फिर से प्रयास करें।",
        ),
        "in_progress": Text(
            "This questionnaire is already being submitted.",
            "यह प्रश्नावली पहले से जमा की जा रही है।",
        ),
        "already_submitted": Text(
            "This questionnaire has already been submitted.",
            "यह प्रश्नावली पहले ही जमा हो चुकी है।",
        ),
        "incomplete_pdf": Text(
            "Unable to export PDF because mandatory personal information is missing.",
            "PDF नहीं बन सका क्योंकि अनिवार्य व्यक्तिगत जानकारी अधूरी है।",
        ),
    },
}


def get_copy(language: str) -> Dict[str, Dict[str, str]]:
    return {
        section: {key: text.render(language) for key, text in entries.items()}
        for section, entries in COPY.items()
    }


def find_option(
    field: str, value: str, catalog: Dict[str, Tuple[Option, ...]] = CATALOG
) -> Option | None:
    for option in catalog.get(field, ()):
        if option.value == value:
            return option
    return None


def catalog_position(
    field: str, value: str, catalog: Dict[str, Tuple[Option, ...]] = CATALOG
) -> int:
    """Index of ``value`` in the field's options; unknown values sort after all known ones."""
    options = catalog.get(field, ())
    for index, option in enumerate(options):
        if option.value == value:
            return index
    return len(options)


def ordered_values(
    field: str, values: Iterable[str], catalog: Dict[str, Tuple[Option, ...]] = CATALOG
) -> List[str]:
    return sorted(set(values), key=lambda value: (catalog_position(field, value, catalog), value))
