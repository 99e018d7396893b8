"""
student_depression/inference.py

Purpose
-------
Scoring-time logic shared by the dashboard and any batch scoring: loading the
saved artifacts, validating an input table and computing depression risk.

Artifacts expected in artifacts/:
  - model.pkl        : fitted DepressionForest
  - features.json    : ordered list of feature column names used during training
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import joblib
import pandas as pd

from student_depression.config import ARTIFACT_DIR
from student_depression.recode import is_recoded, recode


@dataclass(frozen=True)
class ModelBundle:
    """Everything needed for scoring, kept together."""
    model: object
    features: List[str]


def save_bundle(bundle: ModelBundle, artifact_dir: Path = ARTIFACT_DIR) -> None:
    artifact_dir.mkdir(parents=True, exist_ok=True)
    joblib.dump(bundle.model, artifact_dir / "model.pkl")
    (artifact_dir / "features.json").write_text(json.dumps(bundle.features, indent=2))


def load_bundle(artifact_dir: Path = ARTIFACT_DIR) -> ModelBundle:
    """
    Load model + feature metadata from disk.

    Raises
    ------
    FileNotFoundError
        If model.pkl or features.json is missing.
    ValueError
        If features.json is not a list of strings.
    """
    model_path = artifact_dir / "model.pkl"
    feat_path = artifact_dir / "features.json"

    if not model_path.exists():
        raise FileNotFoundError(
            f"Missing {model_path}. Train first (python -m student_depression.train)."
        )

    if not feat_path.exists():
        raise FileNotFoundError(
            f"Missing {feat_path}. Re-train to generate it (python -m student_depression.train)."
        )

    model = joblib.load(model_path)
    features = json.loads(feat_path.read_text())

    if not isinstance(features, list) or not all(isinstance(x, str) for x in features):
        raise ValueError("features.json is not a valid list of strings.")

    return ModelBundle(model=model, features=features)


def prepare(df: pd.DataFrame) -> pd.DataFrame:
    """Recode raw survey rows; pass through tables that are already numeric."""
    if is_recoded(df):
        return df
    return recode(df, with_label=False)


def validate_features(df: pd.DataFrame, features: List[str]) -> Tuple[pd.DataFrame, List[str]]:
    """
    Select the model's features from df, in training order.

    Unlike training-time recoding there is nothing to impute here: a
    non-numeric value means the row cannot be scored, so it is an error.

    Returns
    -------
    X : pd.DataFrame
        Feature matrix in training order.
    warnings : List[str]
        Non-fatal issues (ignored extra columns).

    Raises
    ------
    ValueError
        If required columns are missing or hold non-numeric values.
    """
    warnings: List[str] = []

    missing = [c for c in features if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    extra = [c for c in df.columns if c not in features]
    if extra:
        warnings.append(f"Ignoring extra columns: {extra}")

    X = df[features].copy()
    for c in features:
        X[c] = pd.to_numeric(X[c], errors="coerce")

    bad = [c for c in features if X[c].isna().any()]
    if bad:
        raise ValueError(f"Non-numeric or missing values in columns: {bad}")

    return X, warnings


def score(df: pd.DataFrame, bundle: ModelBundle) -> pd.Series:
    """
    Predicted probability of depression (vote fraction of the forest) per row,
    aligned to df.index. df may be raw survey rows or an already recoded table.
    """
    X, _ = validate_features(prepare(df), bundle.features)
    proba = bundle.model.predict_proba(X)
    return pd.Series(proba, index=df.index, name="depression_risk")


def leaf_probability(df: pd.DataFrame, bundle: ModelBundle) -> pd.Series:
    """
    The forest's averaged leaf probability of depression per row.

    This is the quantity SHAP's TreeExplainer decomposes. It equals the vote
    fraction from score() only when every leaf is pure, so the dashboard shows
    both next to each SHAP waterfall.
    """
    X, _ = validate_features(prepare(df), bundle.features)
    forest = bundle.model.model_
    pos_idx = int(list(forest.classes_).index(1))
    proba = forest.predict_proba(X)[:, pos_idx]
    return pd.Series(proba, index=df.index, name="leaf_probability")
