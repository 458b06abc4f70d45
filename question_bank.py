"""
Static questionnaire used by the self-assessment.

Weights (1-5) and option values (0-1) were calibrated against the
Breast_Cancer_Data_Value.csv patient records; the dataset column each
question came from is noted beside it.
"""

RISK_FACTOR = "risk_factor"
SYMPTOM = "symptom"
CATEGORIES = (RISK_FACTOR, SYMPTOM)


def _question(question_id, category, text, description, options, weight):
    return {
        "id": question_id,
        "category": category,
        "text": text,
        "description": description,
        "options": [{"label": label, "value": value} for label, value in options],
        "weight": weight,
    }


RISK_FACTOR_QUESTIONS = [
    # Age
    _question(
        "rf_age",
        RISK_FACTOR,
        "What is your age group?",
        "Risk increases with age. Most breast cancers are diagnosed after 40.",
        [("Under 30", 0), ("30-39", 0.3), ("40-49", 0.6), ("50-59", 0.8), ("60+", 1.0)],
        3,
    ),
    # PHH
    _question(
        "rf_phh",
        RISK_FACTOR,
        "Do you have a personal or family history of breast cancer?",
        "Includes first-degree relatives (mother, sister, daughter) or personal prior diagnosis.",
        [("No", 0), ("Yes", 1.0)],
        3,
    ),
    # Diet
    _question(
        "rf_diet",
        RISK_FACTOR,
        "How would you describe your regular diet?",
        "A balanced diet may lower risk; high-fat or processed food diets are linked to increased risk.",
        [("Healthy / balanced", 0), ("Mixed / moderate", 0.4), ("Mostly junk / processed food", 1.0)],
        1,
    ),
    # Obesity
    _question(
        "rf_obesity",
        RISK_FACTOR,
        "What best describes your body weight / BMI range?",
        "Obesity (especially post-menopause) is associated with higher breast cancer risk.",
        [("Underweight / Thinness", 0), ("Normal weight", 0), ("Overweight", 0.4), ("Obese", 1.0)],
        1,
    ),
    # Smoker
    _question(
        "rf_smoker",
        RISK_FACTOR,
        "Are you a current or former smoker?",
        "Smoking is linked to a modestly increased risk of breast cancer.",
        [("No, never smoked", 0), ("Former smoker", 0.5), ("Yes, current smoker", 1.0)],
        1,
    ),
    # Alcohol_Consumption
    _question(
        "rf_alcohol",
        RISK_FACTOR,
        "Do you consume alcohol?",
        "Regular alcohol consumption is associated with increased risk.",
        [("No / rarely", 0), ("Yes, regularly", 1.0)],
        1,
    ),
    # Chest Radiation, the strongest single risk factor in the dataset
    _question(
        "rf_chest_radiation",
        RISK_FACTOR,
        "Have you ever received radiation therapy to the chest area?",
        "Prior chest radiation (e.g., for Hodgkin lymphoma) significantly increases breast cancer risk.",
        [("No", 0), ("Yes", 1.0)],
        5,
    ),
    # Menstrual History
    _question(
        "rf_menstrual",
        RISK_FACTOR,
        "Which best describes your menstrual / reproductive history?",
        "Factors that increase lifetime estrogen exposure can raise risk.",
        [
            ("Normal menstrual history", 0),
            ("Early menstruation (before age 12)", 1.0),
            ("Late menopause (after age 55)", 1.0),
            ("First child after age 30 (late childbirth)", 1.0),
            ("Never gave birth", 1.0),
        ],
        2,
    ),
    # Worklife
    _question(
        "rf_worklife",
        RISK_FACTOR,
        "What type of work schedule do you have?",
        "Night shifts and irregular schedules may disrupt circadian rhythms and affect risk.",
        [
            ("Regular daytime schedule", 0),
            ("Morning shifts", 0.5),
            ("Rotational / changing shifts", 0.8),
            ("Night shifts", 1.0),
        ],
        1,
    ),
]

SYMPTOM_QUESTIONS = [
    # Breasts_Swelling
    _question(
        "sx_swelling",
        SYMPTOM,
        "Have you noticed any swelling in one or both breasts?",
        "Unexplained swelling, even without a lump, should be evaluated.",
        [("No swelling", 0), ("Yes, in one breast", 0.8), ("Yes, in both breasts", 1.0)],
        3,
    ),
    # Breasts_Shrinkage
    _question(
        "sx_shrinkage",
        SYMPTOM,
        "Have you noticed any shrinkage (decrease in size) of one or both breasts?",
        "Unexplained change in breast size can be a warning sign.",
        [("No shrinkage", 0), ("Yes, in one breast", 0.8), ("Yes, in both breasts", 1.0)],
        3,
    ),
    # Breasts_Dimpling
    _question(
        "sx_dimpling",
        SYMPTOM,
        "Have you noticed any dimpling (indentations or puckering) on the breast skin?",
        "Dimpling can indicate underlying tissue changes, sometimes called \"peau d'orange\".",
        [
            ("No dimpling observed", 0),
            ("Mild dimpling (1 area)", 0.6),
            ("Moderate dimpling (2 areas)", 0.8),
            ("Significant dimpling (3+ areas)", 1.0),
        ],
        3,
    ),
    # Breasts_Asymmetry
    _question(
        "sx_asymmetry",
        SYMPTOM,
        "Have you noticed a new or worsening asymmetry between your breasts?",
        "Some asymmetry is normal, but new or changing asymmetry should be checked.",
        [("Symmetric (no noticeable difference)", 0), ("Asymmetric (noticeable difference)", 1.0)],
        2,
    ),
    # Skin_of_Breast
    _question(
        "sx_skin",
        SYMPTOM,
        "How does the skin of your breast look or feel?",
        "Skin changes on the breast are important warning signs to discuss with a doctor.",
        [
            ("Normal, no changes", 0),
            ("Red or inflamed", 0.8),
            ("Scaly or flaky", 0.8),
            ("Swollen", 0.9),
            ("Looks like orange skin (peau d'orange)", 1.0),
        ],
        4,
    ),
    # Breast Feels
    _question(
        "sx_feel",
        SYMPTOM,
        "How does your breast feel when you examine it?",
        "Regular breast self-examination helps detect changes early.",
        [
            ("Normal, no unusual feeling", 0),
            ("Tenderness or pain", 0.8),
            ("Thickening of breast tissue", 0.9),
            ("A definite lump", 1.0),
        ],
        5,
    ),
    # Niple Discharge
    _question(
        "sx_discharge",
        SYMPTOM,
        "Have you noticed any nipple discharge?",
        "Non-milky discharge (especially bloody or clear) should be evaluated promptly.",
        [
            ("No discharge", 0),
            ("Milky discharge (normal if breastfeeding)", 0.1),
            ("Clear or watery discharge", 0.8),
            ("Bloody discharge", 1.0),
        ],
        5,
    ),
]

_QUESTIONS_BY_CATEGORY = {
    RISK_FACTOR: RISK_FACTOR_QUESTIONS,
    SYMPTOM: SYMPTOM_QUESTIONS,
}

_QUESTIONS_BY_ID = {q["id"]: q for q in RISK_FACTOR_QUESTIONS + SYMPTOM_QUESTIONS}


def get_questions(category):
    if category not in CATEGORIES:
        raise ValueError(f"Unknown question category: {category}")
    return _QUESTIONS_BY_CATEGORY[category]


def get_question(question_id):
    return _QUESTIONS_BY_ID.get(question_id)


def catalog_payload():
    """Question catalog in the shape the assessment form renders."""
    return {
        "riskFactorQuestions": get_questions(RISK_FACTOR),
        "symptomQuestions": get_questions(SYMPTOM),
    }
