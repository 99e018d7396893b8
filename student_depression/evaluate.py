"""
student_depression/evaluate.py

Scores a fitted model on the held-out test set.

The two rates are named the way the survey write-up names them, which
treats "No" as the class of interest:

  sensitivity = TN / (TN + FP)   true-negative rate ("No" correctly found)
  specificity = TP / (TP + FN)   true-positive rate ("Yes" correctly found)

This is the reverse of the usual clinical wording; both directions are spelled
out in the printed report so nobody has to guess.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix, roc_auc_score, roc_curve

from student_depression.config import THRESHOLD
from student_depression.errors import EvalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationReport:
    """Read-only summary of one evaluation on the test set."""

    tp: int
    fp: int
    tn: int
    fn: int
    accuracy: float
    sensitivity: float
    specificity: float
    auc: float
    threshold: float
    n_test: int
    roc_fpr: List[float] = field(default_factory=list, repr=False)
    roc_tpr: List[float] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict:
        return asdict(self)


def _rate(num: int, den: int) -> float:
    return float(num / den) if den else float("nan")


def rank_auc(y_true: np.ndarray, scores: np.ndarray) -> float:
    """
    Probability that a random positive scores above a random negative, with
    ties counted as one half (the Mann-Whitney form of ROC AUC).
    """
    return float(roc_auc_score(y_true, scores))


def threshold_counts(y_true: np.ndarray, proba: np.ndarray, threshold: float) -> Dict[str, int]:
    y_pred = (proba >= threshold).astype(int)
    cm = confusion_matrix(y_true, y_pred, labels=[0, 1])
    return {
        "tn": int(cm[0, 0]),
        "fp": int(cm[0, 1]),
        "fn": int(cm[1, 0]),
        "tp": int(cm[1, 1]),
    }


def evaluate(model, test: pd.DataFrame, threshold: float = THRESHOLD) -> EvaluationReport:
    """
    Evaluate `model` (anything with predict_proba, classes_ and label) on `test`.

    Raises
    ------
    EvalError
        If the test set is empty, has no label column, carries a label class
        the model was not trained on, or holds a single class (AUC undefined).
    """
    if len(test) == 0:
        raise EvalError("test set is empty")
    label = model.label
    if label not in test.columns:
        raise EvalError(f"label column '{label}' not found in test set")

    y_true = test[label].astype(int).to_numpy()
    seen = set(np.asarray(model.classes_).astype(int).tolist())
    unseen = sorted(set(np.unique(y_true).tolist()) - seen)
    if unseen:
        raise EvalError(f"test labels {unseen} were not seen in training {sorted(seen)}")
    if len(np.unique(y_true)) < 2:
        raise EvalError("test set holds a single label class; AUC is undefined")

    proba = model.predict_proba(test)
    counts = threshold_counts(y_true, proba, threshold)
    tp, fp, tn, fn = counts["tp"], counts["fp"], counts["tn"], counts["fn"]

    fpr, tpr, _ = roc_curve(y_true, proba)

    report = EvaluationReport(
        tp=tp,
        fp=fp,
        tn=tn,
        fn=fn,
        accuracy=_rate(tp + tn, len(y_true)),
        sensitivity=_rate(tn, tn + fp),
        specificity=_rate(tp, tp + fn),
        auc=rank_auc(y_true, proba),
        threshold=float(threshold),
        n_test=int(len(y_true)),
        roc_fpr=fpr.tolist(),
        roc_tpr=tpr.tolist(),
    )
    logger.info("Evaluated %d test rows: accuracy=%.3f auc=%.3f", report.n_test, report.accuracy, report.auc)
    return report


def format_report(report: EvaluationReport) -> str:
    lines = [
        f"Confusion matrix (threshold={report.threshold:.2f}, n={report.n_test})",
        "                 predicted No   predicted Yes",
        f"  actual No      {report.tn:>12d}   {report.fp:>13d}",
        f"  actual Yes     {report.fn:>12d}   {report.tp:>13d}",
        "",
        f"Accuracy    : {report.accuracy:.2%}",
        f"Sensitivity : {report.sensitivity:.2%}  (TN/(TN+FP), 'No' class)",
        f"Specificity : {report.specificity:.2%}  (TP/(TP+FN), 'Yes' class)",
        f"AUC         : {report.auc:.4f}",
    ]
    return "\n".join(lines)


def format_importance(table: pd.DataFrame, top: int = 10) -> str:
    rows = table.head(top)
    width = max(len(f) for f in rows["feature"]) if len(rows) else 0
    lines = ["Feature importance"]
    for rank, row in enumerate(rows.itertuples(index=False), start=1):
        lines.append(f"  {rank:>2d}. {row.feature:<{width}}  {row.importance:.4f}")
    return "\n".join(lines)
