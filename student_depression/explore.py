"""
student_depression/explore.py

Descriptive plots of the recoded survey plus the two model figures (ROC curve
and feature importance). One figure per chart, written as PNG.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from student_depression.config import LABEL_COL
from student_depression.data_dictionary import ORDINAL_SCALE_FIELDS, ORDINAL_TEXT_FIELDS
from student_depression.evaluate import EvaluationReport

logger = logging.getLogger(__name__)


# ---------- Style helpers ----------
def beautify(ax, title=None, xlabel=None, ylabel=None):
    ax.grid(True, ls="--", lw=0.6, alpha=0.6)
    for spine in ["top", "right"]:
        ax.spines[spine].set_visible(False)
    if title:
        ax.set_title(title, fontsize=13, pad=10)
    if xlabel:
        ax.set_xlabel(xlabel)
    if ylabel:
        ax.set_ylabel(ylabel)


def bar_annot(ax, fmt="{:.0f}", offset=3):
    for p in ax.patches:
        h = p.get_height()
        if np.isfinite(h) and h > 0:
            ax.annotate(fmt.format(h), (p.get_x() + p.get_width() / 2, h),
                        ha="center", va="bottom", fontsize=9, xytext=(0, offset),
                        textcoords="offset points")


def savefig(fig, out_dir: Path, name: str) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    fp = out_dir / name
    fig.tight_layout()
    fig.savefig(fp, dpi=160)
    plt.close(fig)
    logger.info("saved: %s", fp)
    return fp


# ---------- Descriptive ----------
def label_distribution(df: pd.DataFrame, label: str = LABEL_COL):
    counts = df[label].map({0: "No", 1: "Yes"}).value_counts().reindex(["No", "Yes"], fill_value=0)
    fig, ax = plt.subplots(figsize=(6, 4))
    counts.plot(kind="bar", ax=ax, rot=0)
    beautify(ax, title=f"Depression (pos={df[label].mean() * 100:.1f}%)", xlabel="Depression", ylabel="Count")
    bar_annot(ax)
    return fig


def age_by_label(df: pd.DataFrame, label: str = LABEL_COL):
    fig, ax = plt.subplots(figsize=(6.5, 4))
    bins = np.arange(df["age"].min(), df["age"].max() + 2) - 0.5
    for value, name, ls in [(0, "No", "-"), (1, "Yes", "--")]:
        ax.hist(df.loc[df[label] == value, "age"], bins=bins, histtype="step", lw=1.6, ls=ls, label=name)
    ax.legend(title="Depression")
    beautify(ax, title="Age by depression", xlabel="Age", ylabel="Frequency")
    return fig


def rate_by_level(df: pd.DataFrame, field: str, label: str = LABEL_COL):
    rates = df.groupby(field)[label].mean().sort_index() * 100
    fig, ax = plt.subplots(figsize=(6, 4))
    rates.plot(kind="bar", ax=ax, rot=0)
    beautify(ax, title=f"Depression rate by {field}", xlabel=field, ylabel="% depressed")
    bar_annot(ax, fmt="{:.0f}%")
    return fig


def correlation_heatmap(df: pd.DataFrame):
    corr = df.corr(method="pearson")
    fig, ax = plt.subplots(figsize=(8, 6.5))
    im = ax.imshow(corr, vmin=-1, vmax=1, cmap="coolwarm")
    ax.set_xticks(np.arange(len(corr.columns)))
    ax.set_yticks(np.arange(len(corr.columns)))
    ax.set_xticklabels(corr.columns, rotation=45, ha="right")
    ax.set_yticklabels(corr.columns)
    for i in range(corr.shape[0]):
        for j in range(corr.shape[1]):
            ax.text(j, i, f"{corr.iat[i, j]:.2f}", ha="center", va="center", fontsize=7)
    ax.set_title("Pearson correlation")
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    return fig


# ---------- Model ----------
def roc_plot(report: EvaluationReport):
    fig, ax = plt.subplots(figsize=(5.5, 5))
    ax.plot(report.roc_fpr, report.roc_tpr, lw=2, label=f"Random forest (AUC={report.auc:.3f})")
    ax.plot([0, 1], [0, 1], ls="--", lw=1, color="grey", label="Chance")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1.01)
    ax.legend(loc="lower right")
    beautify(ax, title="ROC curve (test set)", xlabel="False positive rate", ylabel="True positive rate")
    return fig


IMPORTANCE_LABELS = {
    "impurity": "Mean decrease in impurity",
    "permutation": "Mean decrease in accuracy (permuted)",
}


def importance_plot(table: pd.DataFrame, top: int = 10, kind: Optional[str] = None):
    kind = kind or table.attrs.get("kind", "impurity")
    rows = table.head(top)
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.barh(rows["feature"], rows["importance"], xerr=rows["std"])
    ax.invert_yaxis()
    beautify(ax, title=f"Top {len(rows)} features", xlabel=IMPORTANCE_LABELS[kind])
    return fig


def write_descriptive_plots(df: pd.DataFrame, out_dir: Path, label: str = LABEL_COL) -> List[Path]:
    paths = [
        savefig(label_distribution(df, label), out_dir, "01_label_distribution.png"),
        savefig(age_by_label(df, label), out_dir, "02_age_by_label.png"),
    ]
    fields = list(ORDINAL_SCALE_FIELDS) + list(ORDINAL_TEXT_FIELDS)
    for i, field in enumerate(fields, start=3):
        paths.append(savefig(rate_by_level(df, field, label), out_dir, f"{i:02d}_rate_by_{field}.png"))
    paths.append(savefig(correlation_heatmap(df), out_dir, f"{len(paths) + 1:02d}_correlation.png"))
    return paths


def write_model_plots(report: EvaluationReport, importance: pd.DataFrame, out_dir: Path) -> List[Path]:
    return [
        savefig(roc_plot(report), out_dir, "roc_curve.png"),
        savefig(importance_plot(importance), out_dir, "feature_importance.png"),
    ]
