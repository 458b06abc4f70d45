import re

DISCLAIMER = (
    "\n\n*Disclaimer: I am an AI support assistant, not a medical professional. "
    "This information is educational only and does not constitute a diagnosis or medical advice. "
    "Always consult a qualified healthcare provider for medical concerns.*"
)

_UNSAFE_PATTERNS = [
    re.compile(r"diagnose|diagnosis", re.IGNORECASE),
    re.compile(r"prescribe|prescription|medication|medicine|drug", re.IGNORECASE),
    re.compile(r"cure|treatment plan", re.IGNORECASE),
    re.compile(r"what (disease|condition|illness) do i have", re.IGNORECASE),
]

UNSAFE_REQUEST_RESPONSE = (
    "I appreciate your trust in me, but I'm not able to provide medical diagnoses or prescribe "
    "treatments. For medical advice specific to your situation, please consult with a qualified "
    "healthcare professional. I'm here to support you emotionally and help you understand general "
    "health information. How else can I help you today?"
)

INTENTS = [
    {
        "name": "anxiety",
        "keywords": ["scared", "afraid", "anxious", "worried", "nervous", "panic", "fear"],
        "response": (
            "It's completely natural to feel concerned about your health. Being aware and proactive "
            "is a strength, not a source of fear.\n\n"
            "**Here are some things that may help:**\n"
            "- Take deep breaths. Anxiety is a normal response\n"
            "- Talk to someone you trust about how you're feeling\n"
            "- Remember that a risk assessment is NOT a diagnosis\n"
            "- Schedule a doctor's appointment to get professional guidance\n"
            "- Our community forum has supportive conversations from others who've felt the same way\n\n"
            "You are not alone in this. Would you like me to explain what your risk score means, "
            "or guide you to support resources?"
        ),
    },
    {
        "name": "lump",
        "keywords": ["lump", "lumps", "found lump", "breast lump"],
        "response": (
            "Finding a lump can be concerning, but **most breast lumps are benign** (non-cancerous). "
            "Common causes include cysts, fibroadenomas, or hormonal changes.\n\n"
            "**What you should do:**\n"
            "1. Don't panic. 8 out of 10 breast lumps are non-cancerous\n"
            "2. Note the size, shape, and location\n"
            "3. Schedule a clinical breast examination with your doctor\n"
            "4. Your doctor may order imaging (ultrasound or mammogram) to evaluate it\n\n"
            "Would you like to book an appointment through our platform?"
        ),
    },
    {
        "name": "screening",
        "keywords": ["mammogram", "screening", "test", "scan", "ultrasound", "imaging"],
        "response": (
            "**Breast Screening Methods:**\n\n"
            "- **Mammogram**: An X-ray of the breast. Recommended annually for women 40+ "
            "(or earlier with risk factors).\n"
            "- **Ultrasound**: Uses sound waves. Often used alongside mammograms, especially for dense breasts.\n"
            "- **Clinical Breast Exam (CBE)**: A physical exam by a healthcare provider.\n"
            "- **MRI**: Used for high-risk women. More sensitive but also more costly.\n\n"
            "**General guidelines:**\n"
            "- Ages 25-39: Clinical breast exam every 1-3 years\n"
            "- Ages 40+: Annual mammogram + clinical exam\n"
            "- High risk: Discuss enhanced screening with your doctor\n\n"
            "Would you like to schedule an appointment to discuss screening?"
        ),
    },
    {
        "name": "risk_score",
        "keywords": ["risk", "score", "result", "what does", "mean", "explain", "understand"],
        "response": (
            "**Understanding Your Risk Score:**\n\n"
            "Our assessment combines two components:\n"
            "- **Risk Factors (40%)**: Age, family history, lifestyle, hormonal factors\n"
            "- **Symptoms via BSE (60%)**: Self-reported changes in breast tissue\n\n"
            "**Risk Levels:**\n"
            "- **Low (0-30)**: Standard monitoring. Continue routine screening.\n"
            "- **Moderate (31-60)**: Some elevated factors. Clinical evaluation recommended.\n"
            "- **High (61-100)**: Multiple concerning indicators. Please see a doctor promptly.\n\n"
            "**Important**: This is a screening tool for awareness, NOT a diagnosis.\n\n"
            "Would you like more details about any specific risk factor?"
        ),
    },
    {
        "name": "self_exam",
        "keywords": ["bse", "self-exam", "self exam", "self-examination", "check myself", "how to check"],
        "response": (
            "**Breast Self-Examination (BSE) Guide:**\n\n"
            "Best done 3-5 days after your period starts:\n\n"
            "**Step 1: Visual check** (in front of a mirror)\n"
            "- Arms at sides, then raised overhead\n"
            "- Look for changes in size, shape, skin texture, or nipple position\n\n"
            "**Step 2: Manual exam** (lying down)\n"
            "- Use the pads of your 3 middle fingers\n"
            "- Move in small circles, covering the entire breast and armpit\n"
            "- Use light, medium, and firm pressure\n\n"
            "**Step 3: Standing/shower**\n"
            "- Repeat the circular motion while skin is wet\n\n"
            "**What to report to a doctor:** new lumps or thickening, skin dimpling or puckering, "
            "nipple discharge or inversion, persistent pain."
        ),
    },
    {
        "name": "appointment",
        "keywords": ["appointment", "book", "doctor", "consult", "visit", "schedule"],
        "response": (
            "You can book an appointment through our **Appointment Scheduler**.\n\n"
            "**How to book:**\n"
            "1. Go to the Appointments section from the navigation bar\n"
            "2. Select a doctor and preferred date\n"
            "3. Choose an available time slot\n"
            "4. Confirm your booking\n\n"
            "Would you like me to direct you there?"
        ),
    },
    {
        "name": "family_history",
        "keywords": ["family history", "genetic", "hereditary", "brca", "gene", "inherited"],
        "response": (
            "**Family History & Genetic Risk:**\n\n"
            "Having a first-degree relative (mother, sister, daughter) with breast cancer roughly "
            "doubles your risk. Multiple affected relatives increase it further.\n\n"
            "**BRCA1 and BRCA2 genes:** inherited mutations significantly increase risk. Genetic "
            "testing is available, and a genetic counselor can help you understand results.\n\n"
            "**What you can do:**\n"
            "- Document your family history (both sides)\n"
            "- Share it with your doctor\n"
            "- Ask about genetic counseling if multiple relatives are affected\n\n"
            "Would you like to learn more about genetic counseling?"
        ),
    },
    {
        "name": "greeting",
        "keywords": ["hello", "hi", "hey", "help", "start", "what can you do"],
        "response": (
            "Hello! I'm your breast health awareness support assistant.\n\n"
            "**I can help you with:**\n"
            "- Understanding your risk assessment results\n"
            "- Explaining medical terms and screening methods\n"
            "- Emotional support and coping strategies\n"
            "- Guiding you to book appointments\n"
            "- Breast self-examination (BSE) guidance\n"
            "- Understanding family history and genetic factors\n\n"
            "Just type your question and I'll do my best to help. What would you like to know?"
        ),
    },
]

DEFAULT_RESPONSE = (
    "Thank you for reaching out. I want to make sure I give you the best guidance.\n\n"
    "Here are topics I can help with:\n"
    "- **Risk score explanation**: understanding your assessment results\n"
    "- **Breast self-exam (BSE)**: how to check yourself\n"
    "- **Screening methods**: mammograms, ultrasounds, etc.\n"
    "- **Emotional support**: coping with worry or anxiety\n"
    "- **Appointments**: booking a doctor consultation\n"
    "- **Family history**: understanding genetic risk factors\n\n"
    "Could you tell me more about what you'd like to know?"
)


def contains_unsafe_request(message):
    return any(pattern.search(message) for pattern in _UNSAFE_PATTERNS)


def match_intent(message):
    """Intent with the most contained keywords; the earlier intent wins a tie."""
    lowered = message.lower()
    best_match = None
    best_score = 0

    for intent in INTENTS:
        score = sum(1 for keyword in intent["keywords"] if keyword in lowered)
        if score > best_score:
            best_score = score
            best_match = intent

    return best_match


def get_chatbot_response(message):
    if contains_unsafe_request(message):
        return {"intent": "unsafe_request", "content": UNSAFE_REQUEST_RESPONSE + DISCLAIMER}

    intent = match_intent(message)
    if intent is None:
        return {"intent": None, "content": DEFAULT_RESPONSE + DISCLAIMER}
    return {"intent": intent["name"], "content": intent["response"] + DISCLAIMER}
