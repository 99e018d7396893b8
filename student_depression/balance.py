"""
student_depression/balance.py

Class balancing for the training set.

The majority class is randomly under-sampled and the minority class is
over-sampled with a smoothed bootstrap (each synthetic record is an existing
minority record plus Gaussian jitter scaled per feature), so both classes end
up with n // 2 rows. Jittered records are then snapped back onto the survey
scales: discrete fields rounded and clipped, exactly one sex indicator set,
age and study hours kept inside the observed range. Only ever called on the
training partition.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from imblearn.over_sampling import RandomOverSampler
from imblearn.under_sampling import RandomUnderSampler

from student_depression.config import DEFAULT_SEED, LABEL_COL
from student_depression.data_dictionary import (
    NUMERIC_FIELDS,
    ORDINAL_SCALE_FIELDS,
    ORDINAL_TEXT_FIELDS,
    YES_NO_FIELDS,
)
from student_depression.errors import BalanceError
from student_depression.recode import GENDER_COLUMNS

logger = logging.getLogger(__name__)


def minority_ratio(labels: pd.Series) -> float:
    counts = labels.value_counts()
    if len(counts) < 2:
        return 0.0
    return float(counts.min() / counts.max())


def snap_to_domain(frame: pd.DataFrame, reference: pd.DataFrame) -> pd.DataFrame:
    """
    Put jittered records back on the survey's value scales.

    Discrete columns are rounded and clipped to their declared range, the sex
    indicators are re-derived so exactly one is 1, and the continuous columns
    are clipped to the range observed in `reference` (the unbalanced input).
    Columns outside the survey schema are left as they are.
    """
    out = frame.copy()

    binary = [c for c in YES_NO_FIELDS + GENDER_COLUMNS[:1] if c in out.columns]
    for col in binary:
        out[col] = out[col].round().clip(0, 1).astype(int)
    if all(c in out.columns for c in GENDER_COLUMNS):
        out[GENDER_COLUMNS[1]] = 1 - out[GENDER_COLUMNS[0]]

    scales = dict(ORDINAL_SCALE_FIELDS)
    scales.update({f: (1, len(levels)) for f, levels in ORDINAL_TEXT_FIELDS.items()})
    for col, (low, high) in scales.items():
        if col in out.columns:
            out[col] = out[col].round().clip(low, high).astype(int)

    for col in NUMERIC_FIELDS:
        if col in out.columns:
            low, high = reference[col].min(), reference[col].max()
            out[col] = out[col].clip(low, high)
    if "age" in out.columns:
        out["age"] = out["age"].round().astype(int)

    return out


def balance(
    train: pd.DataFrame,
    label: str = LABEL_COL,
    seed: int = DEFAULT_SEED,
    shrinkage: float = 1.0,
) -> pd.DataFrame:
    """
    Return a new, class-balanced training frame. train is not modified.

    Raises
    ------
    BalanceError
        If the label column is missing or has fewer than two classes.
    """
    if label not in train.columns:
        raise BalanceError(f"label column '{label}' not found")

    y = train[label]
    counts = y.value_counts()
    if len(counts) < 2:
        raise BalanceError(f"label '{label}' has {len(counts)} observed class(es); need 2")

    X = train.drop(columns=[label])
    # plain float arrays: imblearn casts DataFrame output back to the input dtypes
    values, labels = X.to_numpy(dtype=float), y.to_numpy()
    target = len(train) // 2
    ordered = counts.sort_values(kind="stable")
    minority, majority = ordered.index[0], ordered.index[-1]

    X_down, y_down = RandomUnderSampler(
        sampling_strategy={majority: target},
        random_state=seed,
    ).fit_resample(values, labels)

    X_bal, y_bal = RandomOverSampler(
        sampling_strategy={minority: target},
        shrinkage=shrinkage,
        random_state=seed,
    ).fit_resample(X_down, y_down)

    # jitter lands between and outside the survey scales; snap back onto them
    out = snap_to_domain(pd.DataFrame(X_bal, columns=X.columns), X).reset_index(drop=True)
    out[label] = np.asarray(y_bal).astype(int)

    logger.info(
        "Balanced training set: %s -> %s (ratio %.3f -> %.3f)",
        counts.sort_index().to_dict(),
        out[label].value_counts().sort_index().to_dict(),
        minority_ratio(y),
        minority_ratio(out[label]),
    )
    return out
