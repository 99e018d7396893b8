"""
student_depression/load.py

Reads the survey CSV into a DataFrame whose headers match RAW_COLUMNS exactly.

Exports of the survey disagree on stray whitespace in the headers
("Have you ever had suicidal thoughts ?" vs "...thoughts?"), so headers are
matched after collapsing whitespace and dropping any space before "?".
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Union

import pandas as pd

from student_depression.data_dictionary import LABEL_COL, RAW_COLUMNS
from student_depression.errors import RecodeError

logger = logging.getLogger(__name__)


def canonical_header(name: str) -> str:
    text = " ".join(str(name).split())
    text = re.sub(r"\s+\?", "?", text)
    return text.lower()


def align_headers(df: pd.DataFrame, with_label: bool = True) -> pd.DataFrame:
    """
    Rename columns to the declared raw headers and keep them in file order.

    With with_label=False the Depression column may be absent (scoring input).

    Raises
    ------
    RecodeError
        If a declared header is absent.
    """
    lookup = {canonical_header(c): c for c in df.columns}
    renames = {}
    for header, name in RAW_COLUMNS.items():
        found = lookup.get(canonical_header(header))
        if found is None:
            if name == LABEL_COL and not with_label:
                continue
            raise RecodeError(header, message=f"missing column '{header}'")
        renames[found] = header

    extra = [c for c in df.columns if c not in renames]
    if extra:
        logger.warning("Ignoring extra columns: %s", extra)

    ordered = [h for h in RAW_COLUMNS if h in renames.values()]
    return df.rename(columns=renames)[ordered]


def load_survey(path: Union[str, Path]) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Survey data not found at {path}. "
            f"Generate it first: python -m student_depression.make_synthetic_data"
        )

    df = align_headers(pd.read_csv(path))
    logger.info("Loaded %d rows x %d columns from %s", df.shape[0], df.shape[1], path)
    return df
