import numpy as np
import pandas as pd
import pytest

from student_depression.make_synthetic_data import generate_survey
from student_depression.recode import recode


@pytest.fixture(scope="session")
def raw_survey() -> pd.DataFrame:
    return generate_survey(n_students=502, random_state=1234)


@pytest.fixture(scope="session")
def recoded(raw_survey) -> pd.DataFrame:
    return recode(raw_survey)


@pytest.fixture
def imbalanced(recoded) -> pd.DataFrame:
    """All negatives plus the first 40 positives."""
    neg = recoded[recoded["depression"] == 0]
    pos = recoded[recoded["depression"] == 1].head(40)
    return pd.concat([neg, pos])


@pytest.fixture(scope="session")
def age_rule_data() -> pd.DataFrame:
    """Label is exactly (age > 30); the other columns are noise."""
    rng = np.random.default_rng(7)
    n = 600
    age = rng.integers(18, 46, size=n)
    return pd.DataFrame(
        {
            "age": age,
            "noise_a": rng.normal(0, 1, size=n),
            "noise_b": rng.integers(1, 6, size=n),
            "noise_c": rng.binomial(1, 0.5, size=n),
            "depression": (age > 30).astype(int),
        }
    )


def low_risk_raw() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Gender": ["Female"],
            "Age": [24],
            "Academic Pressure": [1],
            "Study Satisfaction": [5],
            "Sleep Duration": ["7-8 hours"],
            "Dietary Habits": ["Healthy"],
            "Have you ever had suicidal thoughts ?": ["No"],
            "Study Hours": [4],
            "Financial Stress": [1],
            "Family History of Mental Illness": ["No"],
        }
    )


@pytest.fixture
def low_risk_row() -> pd.DataFrame:
    return low_risk_raw()


@pytest.fixture(scope="session")
def even_labels(recoded) -> pd.DataFrame:
    """The recoded survey relabelled to exactly 250 Yes / 252 No."""
    rng = np.random.default_rng(250)
    out = recoded.copy()
    out["depression"] = rng.permutation(np.repeat([1, 0], [250, 252]))
    return out
