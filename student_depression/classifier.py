"""
student_depression/classifier.py

Random-forest classifier for the depression label.

Each of the T trees is grown on a bootstrap resample of the (balanced)
training set and every split looks at m randomly chosen candidate features,
m = ceil(sqrt(p)) unless given. Trees are fitted in parallel with n_jobs; the
per-tree seeds derive from the forest seed, so the fitted forest is the same
for any n_jobs.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.exceptions import NotFittedError
from sklearn.inspection import permutation_importance

from student_depression.config import DEFAULT_SEED, LABEL_COL, N_JOBS, N_TREES
from student_depression.errors import FitError

logger = logging.getLogger(__name__)

POSITIVE = 1


def default_max_features(n_features: int) -> int:
    return max(1, math.ceil(math.sqrt(n_features)))


class DepressionForest:
    """
    Thin wrapper around RandomForestClassifier with the pipeline's contract:
    FitError on unusable training data, vote-fraction probabilities and an
    explicit importance table.
    """

    def __init__(
        self,
        n_trees: int = N_TREES,
        max_features: Optional[int] = None,
        seed: int = DEFAULT_SEED,
        n_jobs: int = N_JOBS,
        label: str = LABEL_COL,
    ) -> None:
        self.n_trees = n_trees
        self.max_features = max_features
        self.seed = seed
        self.n_jobs = n_jobs
        self.label = label
        self.model_: Optional[RandomForestClassifier] = None
        self.features_: List[str] = []

    # -----------------------------
    # Fitting
    # -----------------------------
    def fit(self, train: pd.DataFrame) -> "DepressionForest":
        if len(train) == 0:
            raise FitError("training set is empty")
        if self.label not in train.columns:
            raise FitError(f"label column '{self.label}' not found")

        y = train[self.label].astype(int).to_numpy()
        classes = np.unique(y)
        if len(classes) < 2:
            raise FitError(f"training label has a single class: {classes.tolist()}")
        if not set(classes.tolist()).issubset({0, 1}):
            raise FitError(f"label must be binary 0/1, found {sorted(classes.tolist())}")

        self.features_ = [c for c in train.columns if c != self.label]
        if not self.features_:
            raise FitError("training set has no predictor columns")

        m = self.max_features or default_max_features(len(self.features_))
        self.model_ = RandomForestClassifier(
            n_estimators=self.n_trees,
            max_features=m,
            bootstrap=True,
            random_state=self.seed,
            n_jobs=self.n_jobs,
        )
        self.model_.fit(train[self.features_], y)
        logger.info(
            "Fitted %d trees on %d rows, %d predictors (m=%d)",
            self.n_trees, len(train), len(self.features_), m,
        )
        return self

    def _check_fitted(self) -> RandomForestClassifier:
        if self.model_ is None:
            raise NotFittedError("DepressionForest is not fitted yet; call fit() first.")
        return self.model_

    def _matrix(self, X: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in self.features_ if c not in X.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")
        return X[self.features_]

    @property
    def classes_(self) -> np.ndarray:
        return self._check_fitted().classes_

    # -----------------------------
    # Prediction
    # -----------------------------
    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        """Fraction of trees voting for the positive class, per row."""
        model = self._check_fitted()
        values = self._matrix(X).to_numpy(dtype=np.float32)
        pos_idx = int(np.flatnonzero(model.classes_ == POSITIVE)[0])

        votes = np.stack([tree.predict(values) for tree in model.estimators_])
        return (votes == pos_idx).mean(axis=0)

    def predict(self, X: pd.DataFrame, threshold: float = 0.5) -> np.ndarray:
        return (self.predict_proba(X) >= threshold).astype(int)

    # -----------------------------
    # Feature importance
    # -----------------------------
    def importance(
        self,
        kind: str = "impurity",
        data: Optional[pd.DataFrame] = None,
        n_repeats: int = 10,
    ) -> pd.DataFrame:
        """
        Ranked feature importance table with columns feature, importance, std.

        kind="impurity" is the mean decrease in Gini impurity across trees.
        kind="permutation" is the mean drop in accuracy when a feature is
        shuffled in `data` (a labelled frame, usually the test set).
        """
        model = self._check_fitted()

        if kind == "impurity":
            per_tree = np.stack([tree.feature_importances_ for tree in model.estimators_])
            scores = model.feature_importances_
            spread = per_tree.std(axis=0)
        elif kind == "permutation":
            if data is None or self.label not in data.columns:
                raise ValueError("permutation importance needs labelled data")
            result = permutation_importance(
                model,
                self._matrix(data),
                data[self.label].astype(int).to_numpy(),
                n_repeats=n_repeats,
                random_state=self.seed,
                n_jobs=self.n_jobs,
            )
            scores, spread = result.importances_mean, result.importances_std
        else:
            raise ValueError(f"Unknown importance kind: {kind!r}")

        table = (
            pd.DataFrame({"feature": self.features_, "importance": scores, "std": spread})
            .sort_values("importance", ascending=False, kind="stable")
            .reset_index(drop=True)
        )
        # plots read this to label the axis
        table.attrs["kind"] = kind
        return table
