"""
student_depression/make_synthetic_data.py

Creates a synthetic student depression survey in the raw CSV format
(text categories, original headers). Same shape as the real 502-row survey and
useful for demos and tests.

Outputs:
  data/student_depression_synthetic.csv
"""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import pandas as pd

from student_depression.config import DEFAULT_DATA_PATH, DEFAULT_SEED
from student_depression.data_dictionary import GENDER_LEVELS, ORDINAL_TEXT_FIELDS, RAW_COLUMNS


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1 / (1 + np.exp(-x))


def generate_survey(n_students: int = 502, random_state: int = DEFAULT_SEED) -> pd.DataFrame:
    rng = np.random.default_rng(random_state)

    gender = rng.choice(GENDER_LEVELS, size=n_students)
    age = rng.integers(18, 35, size=n_students)

    academic_pressure = rng.integers(1, 6, size=n_students)
    study_satisfaction = rng.integers(1, 6, size=n_students)
    financial_stress = rng.integers(1, 6, size=n_students)
    sleep_rank = rng.integers(1, 5, size=n_students)  # 1 = <5h ... 4 = >8h
    diet_rank = rng.integers(1, 4, size=n_students)  # 1 = Healthy ... 3 = Unhealthy
    suicidal = rng.binomial(1, 0.5, size=n_students)
    family_history = rng.binomial(1, 0.5, size=n_students)
    study_hours = rng.integers(0, 13, size=n_students)

    # Higher risk with pressure, money worries, suicidal thoughts, poor sleep and diet;
    # lower with satisfaction.
    linear_risk = (
        + 0.90 * (academic_pressure - 3)
        + 0.70 * (financial_stress - 3)
        - 0.60 * (study_satisfaction - 3)
        + 1.60 * (suicidal - 0.5)
        + 0.45 * (diet_rank - 2)
        - 0.35 * (sleep_rank - 2.5)
        + 0.08 * (study_hours - 6)
        + 0.25 * family_history
        - 0.04 * (age - 26)
        + rng.normal(0, 0.5, size=n_students)
    )
    depression = rng.binomial(1, sigmoid(linear_risk))

    yes_no = np.array(["No", "Yes"])
    sleep_levels = np.array(ORDINAL_TEXT_FIELDS["sleep_duration"])
    diet_levels = np.array(ORDINAL_TEXT_FIELDS["dietary_habits"])

    values = [
        gender,
        age,
        academic_pressure,
        study_satisfaction,
        sleep_levels[sleep_rank - 1],
        diet_levels[diet_rank - 1],
        yes_no[suicidal],
        study_hours,
        financial_stress,
        yes_no[family_history],
        yes_no[depression],
    ]
    return pd.DataFrame(dict(zip(RAW_COLUMNS, values)))


def main() -> None:
    parser = argparse.ArgumentParser(description="Write a synthetic student depression survey.")
    parser.add_argument("--rows", type=int, default=502, help="Number of respondents.")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed.")
    parser.add_argument("--out", type=str, default=str(DEFAULT_DATA_PATH), help="Output CSV path.")
    args = parser.parse_args()

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    df = generate_survey(n_students=args.rows, random_state=args.seed)
    df.to_csv(out_path, index=False)

    # Print quick quality checks
    print(f"Wrote {len(df)} rows to {out_path}")
    print("Depression rate:", round((df["Depression"] == "Yes").mean(), 3))
    print("Columns:", list(df.columns))


if __name__ == "__main__":
    main()
