"""
student_depression/data_dictionary.py

The survey schema in one place: raw CSV headers, the snake_case names used
after recoding, the declared vocabulary for every categorical field and a
description per column for the dashboard.
"""

# Raw CSV header -> recoded column name, in file order.
RAW_COLUMNS = {
    "Gender": "gender",
    "Age": "age",
    "Academic Pressure": "academic_pressure",
    "Study Satisfaction": "study_satisfaction",
    "Sleep Duration": "sleep_duration",
    "Dietary Habits": "dietary_habits",
    "Have you ever had suicidal thoughts ?": "suicidal_thoughts",
    "Study Hours": "study_hours",
    "Financial Stress": "financial_stress",
    "Family History of Mental Illness": "family_history",
    "Depression": "depression",
}

# Indicator columns, one per declared category, in this order.
GENDER_LEVELS = ["Female", "Male"]

YES_NO = {"No": 0, "Yes": 1}
YES_NO_FIELDS = ["suicidal_thoughts", "family_history", "depression"]

# Ordered vocabularies; the recoded value is the 1-based rank.
ORDINAL_TEXT_FIELDS = {
    "sleep_duration": [
        "Less than 5 hours",
        "5-6 hours",
        "7-8 hours",
        "More than 8 hours",
    ],
    "dietary_habits": ["Healthy", "Moderate", "Unhealthy"],
}

# Ordinal fields already stored as integers on a 1-5 scale.
ORDINAL_SCALE_FIELDS = {
    "academic_pressure": (1, 5),
    "study_satisfaction": (1, 5),
    "financial_stress": (1, 5),
}

NUMERIC_FIELDS = ["age", "study_hours"]

LABEL_COL = "depression"

DATA_DICTIONARY = {
    "gender_female": "1 if the respondent reported Female, else 0.",
    "gender_male": "1 if the respondent reported Male, else 0.",
    "age": "Respondent age in years.",
    "academic_pressure": "Self-rated academic pressure (1 = low, 5 = high).",
    "study_satisfaction": "Self-rated satisfaction with studies (1 = low, 5 = high).",
    "sleep_duration": "Nightly sleep bucket (1 = <5h, 2 = 5-6h, 3 = 7-8h, 4 = >8h).",
    "dietary_habits": "Diet quality (1 = Healthy, 2 = Moderate, 3 = Unhealthy).",
    "suicidal_thoughts": "Ever had suicidal thoughts (1 = Yes).",
    "study_hours": "Daily study hours.",
    "financial_stress": "Self-rated financial stress (1 = low, 5 = high).",
    "family_history": "Family history of mental illness (1 = Yes).",
    "depression": "Target variable (1 = Yes, 0 = No).",
    "depression_risk": "Model-predicted probability of depression (0-1).",
    "risk_band": "Category derived from depression_risk and the threshold.",
}
