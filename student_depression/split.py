"""
student_depression/split.py

Seeded train/test partition of the recoded survey.
"""

from __future__ import annotations

import logging
import math
from typing import Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from student_depression.config import DEFAULT_SEED, TRAIN_FRACTION

logger = logging.getLogger(__name__)


def train_size_for(n_rows: int, fraction: float) -> int:
    """round(n * fraction) with halves rounded up."""
    return int(math.floor(n_rows * fraction + 0.5))


def train_test_partition(
    df: pd.DataFrame,
    fraction: float = TRAIN_FRACTION,
    seed: int = DEFAULT_SEED,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split df into (train, test) without touching df.

    The training side holds exactly round(n * fraction) rows and the test side
    the remainder. Rows keep their original index labels, so the two parts are
    disjoint and their union is df. The same seed always gives the same
    partition.
    """
    if not 0.0 < fraction < 1.0:
        raise ValueError(f"fraction must be in (0, 1), got {fraction}")

    n_rows = len(df)
    n_train = train_size_for(n_rows, fraction)
    if n_train == 0 or n_train == n_rows:
        raise ValueError(
            f"Splitting {n_rows} rows at fraction {fraction} leaves an empty partition."
        )

    train, test = train_test_split(
        df,
        train_size=n_train,
        random_state=seed,
        shuffle=True,
    )
    logger.info("Split %d rows -> train=%d test=%d (seed=%d)", n_rows, len(train), len(test), seed)
    return train.copy(), test.copy()
