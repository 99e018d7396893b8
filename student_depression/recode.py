"""
student_depression/recode.py

Turns the raw survey table into a fully numeric table:

  - Gender        -> gender_female / gender_male indicators (exactly one is 1)
  - Yes/No fields -> 1 / 0
  - sleep_duration, dietary_habits -> 1-based rank in their declared vocabulary
  - 1-5 scales, age, study_hours   -> validated numbers

Anything outside a declared vocabulary fails fast with RecodeError instead of
being coerced to a missing value.
"""

from __future__ import annotations

import logging
from typing import Dict, List

import numpy as np
import pandas as pd

from student_depression.data_dictionary import (
    GENDER_LEVELS,
    LABEL_COL,
    NUMERIC_FIELDS,
    ORDINAL_SCALE_FIELDS,
    ORDINAL_TEXT_FIELDS,
    RAW_COLUMNS,
    YES_NO,
    YES_NO_FIELDS,
)
from student_depression.errors import RecodeError
from student_depression.load import align_headers

logger = logging.getLogger(__name__)

GENDER_COLUMNS = [f"gender_{level.lower()}" for level in GENDER_LEVELS]

FEATURE_COLUMNS: List[str] = GENDER_COLUMNS + [
    "age",
    "academic_pressure",
    "study_satisfaction",
    "sleep_duration",
    "dietary_habits",
    "suicidal_thoughts",
    "study_hours",
    "financial_stress",
    "family_history",
]


def _first_bad(values: pd.Series, bad: pd.Series):
    return values[bad].iloc[0]


def _check_complete(df: pd.DataFrame) -> None:
    for col in df.columns:
        missing = df[col].isna()
        if missing.any():
            row = int(np.flatnonzero(missing.to_numpy())[0])
            raise RecodeError(col, None, f"missing value in field '{col}' (row {row})")


def _text(s: pd.Series) -> pd.Series:
    return s.astype(str).str.strip()


def map_vocabulary(s: pd.Series, field: str, mapping: Dict[str, int]) -> pd.Series:
    values = _text(s)
    unknown = ~values.isin(list(mapping))
    if unknown.any():
        raise RecodeError(field, _first_bad(s, unknown))
    return values.map(mapping).astype(int)


def ordinal_mapping(levels: List[str]) -> Dict[str, int]:
    return {level: rank for rank, level in enumerate(levels, start=1)}


def _to_number(s: pd.Series, field: str) -> pd.Series:
    numbers = pd.to_numeric(s, errors="coerce")
    bad = numbers.isna()
    if bad.any():
        raise RecodeError(field, _first_bad(s, bad))
    return numbers


def _to_scale(s: pd.Series, field: str, low: int, high: int) -> pd.Series:
    numbers = _to_number(s, field)
    bad = (numbers != np.round(numbers)) | (numbers < low) | (numbers > high)
    if bad.any():
        raise RecodeError(field, _first_bad(s, bad))
    return numbers.astype(int)


def one_hot_gender(s: pd.Series) -> pd.DataFrame:
    values = _text(s)
    unknown = ~values.isin(GENDER_LEVELS)
    if unknown.any():
        raise RecodeError("gender", _first_bad(s, unknown))
    return pd.DataFrame(
        {col: (values == level).astype(int) for col, level in zip(GENDER_COLUMNS, GENDER_LEVELS)},
        index=s.index,
    )


def recode(raw: pd.DataFrame, with_label: bool = True) -> pd.DataFrame:
    """
    Recode a raw survey table.

    Parameters
    ----------
    raw : pd.DataFrame
        Table with the survey's raw headers and text values. Not modified.
    with_label : bool
        Require the Depression column. Scoring input may omit it.

    Returns
    -------
    pd.DataFrame
        FEATURE_COLUMNS (plus "depression" when present), all integer or float.

    Raises
    ------
    RecodeError
        On a missing column, a missing value or a value outside the declared
        vocabulary or scale.
    """
    df = align_headers(raw, with_label=with_label).rename(columns=RAW_COLUMNS)
    _check_complete(df)

    out = one_hot_gender(df["gender"])

    age = _to_number(df["age"], "age")
    if (age != np.round(age)).any():
        raise RecodeError("age", _first_bad(df["age"], age != np.round(age)))
    out["age"] = age.astype(int)

    for field, (low, high) in ORDINAL_SCALE_FIELDS.items():
        out[field] = _to_scale(df[field], field, low, high)

    for field, levels in ORDINAL_TEXT_FIELDS.items():
        out[field] = map_vocabulary(df[field], field, ordinal_mapping(levels))

    for field in YES_NO_FIELDS:
        if field in df.columns:
            out[field] = map_vocabulary(df[field], field, YES_NO)

    for field in NUMERIC_FIELDS:
        if field not in out.columns:
            out[field] = _to_number(df[field], field).astype(float)

    columns = FEATURE_COLUMNS + ([LABEL_COL] if LABEL_COL in out.columns else [])
    logger.info("Recoded %d rows into %d numeric columns", len(out), len(columns))
    return out[columns]


def is_recoded(df: pd.DataFrame) -> bool:
    """True if df already carries the numeric feature columns."""
    if not all(c in df.columns for c in FEATURE_COLUMNS):
        return False
    return all(pd.api.types.is_numeric_dtype(df[c]) for c in FEATURE_COLUMNS)
