"""
student_depression/train.py

Runs the whole analysis once: load -> recode -> plots -> split -> balance ->
fit -> evaluate -> report, and saves artifacts for the dashboard.

Artifacts
---------
  artifacts/model.pkl         fitted DepressionForest
  artifacts/features.json     feature order used in training
  artifacts/metrics.json      evaluation report + feature importance
  artifacts/config.json       settings of this run
  artifacts/data_schema.json  column names, dtypes, value ranges
  artifacts/sample.csv        raw rows for demo scoring in Streamlit
  reports/figures/*.png       descriptive plots, ROC curve, importance

Run (default)
-------------
python -m student_depression.train

Run (custom)
------------
python -m student_depression.train --data data/student_depression.csv --seed 1234 --n-trees 500
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from student_depression import config
from student_depression.balance import balance, minority_ratio
from student_depression.classifier import DepressionForest
from student_depression.errors import PipelineError
from student_depression.evaluate import EvaluationReport, evaluate, format_importance, format_report
from student_depression.explore import write_descriptive_plots, write_model_plots
from student_depression.inference import ModelBundle, save_bundle
from student_depression.load import load_survey
from student_depression.recode import recode
from student_depression.split import train_test_partition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    report: EvaluationReport
    importance: pd.DataFrame
    model: DepressionForest
    n_train: int
    n_train_balanced: int
    n_test: int


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train and evaluate the student depression model.")
    parser.add_argument(
        "--data",
        type=str,
        default=str(config.DEFAULT_DATA_PATH),
        help="Path to the raw survey CSV.",
    )
    parser.add_argument(
        "--artifacts",
        type=str,
        default=str(config.ARTIFACT_DIR),
        help="Directory for model and metrics artifacts.",
    )
    parser.add_argument(
        "--figures",
        type=str,
        default=str(config.FIGURE_DIR),
        help="Directory for PNG figures.",
    )
    parser.add_argument(
        "--train-fraction",
        type=float,
        default=config.TRAIN_FRACTION,
        help="Fraction of rows used for training.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.DEFAULT_SEED,
        help="Seed for splitting, balancing and the forest.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=config.THRESHOLD,
        help="Probability threshold for the confusion matrix.",
    )
    parser.add_argument(
        "--n-trees",
        type=int,
        default=config.N_TREES,
        help="Number of trees in the forest.",
    )
    parser.add_argument(
        "--max-features",
        type=int,
        default=None,
        help="Candidate features per split (default ceil(sqrt(p))).",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=config.N_JOBS,
        help="Parallel jobs for fitting trees.",
    )
    parser.add_argument(
        "--no-balance",
        action="store_true",
        help="Fit on the raw training split without class balancing.",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip writing figures.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def build_data_schema(df: pd.DataFrame, label_col: str) -> Dict:
    """Column names, dtypes and observed ranges of the recoded table."""
    return {
        "n_rows": int(df.shape[0]),
        "n_cols": int(df.shape[1]),
        "label_col": label_col,
        "columns": [
            {
                "name": c,
                "dtype": str(df[c].dtype),
                "min": float(df[c].min()),
                "max": float(df[c].max()),
            }
            for c in df.columns
        ],
    }


def run(args: argparse.Namespace) -> RunResult:
    artifact_dir = Path(args.artifacts)
    figure_dir = Path(args.figures)
    artifact_dir.mkdir(parents=True, exist_ok=True)

    # -----------------------------
    # 1) Load + recode
    # -----------------------------
    raw = load_survey(args.data)

    # Every answer must be in its declared vocabulary; one unknown value aborts
    # the run with RecodeError rather than becoming a missing value.
    data = recode(raw)

    # Descriptive plots use the whole table; they do not feed the model.
    if not args.no_plots:
        write_descriptive_plots(data, figure_dir)

    # -----------------------------
    # 2) Split + balance
    # -----------------------------
    # The test split is set aside here and never seen by balancing or fitting.
    train, test = train_test_partition(data, fraction=args.train_fraction, seed=args.seed)

    # Balancing only reshapes the training rows; the held-out class mix stays
    # as observed so the metrics describe real prevalence.
    if args.no_balance:
        fit_frame = train
    else:
        fit_frame = balance(train, label=config.LABEL_COL, seed=args.seed)

    # -----------------------------
    # 3) Fit + evaluate
    # -----------------------------
    # One seed drives split, balance and forest, so a rerun reproduces every number.
    model = DepressionForest(
        n_trees=args.n_trees,
        max_features=args.max_features,
        seed=args.seed,
        n_jobs=args.n_jobs,
    ).fit(fit_frame)

    report = evaluate(model, test, threshold=args.threshold)
    # Impurity importance comes from the fitted trees; no extra pass over the data.
    importance = model.importance()

    if not args.no_plots:
        write_model_plots(report, importance, figure_dir)

    # -----------------------------
    # 4) Save artifacts
    # -----------------------------
    save_bundle(ModelBundle(model=model, features=model.features_), artifact_dir)

    # metrics.json carries everything the dashboard shows, including the ROC points.
    metrics = report.to_dict()
    metrics.update(
        {
            "n_train": int(len(train)),
            "n_train_balanced": int(len(fit_frame)),
            "minority_ratio_train": minority_ratio(train[config.LABEL_COL]),
            "minority_ratio_balanced": minority_ratio(fit_frame[config.LABEL_COL]),
            "positive_rate_test": float(test[config.LABEL_COL].mean()),
            "importance": importance.to_dict(orient="records"),
        }
    )
    (artifact_dir / "metrics.json").write_text(json.dumps(metrics, indent=2))

    run_config = {
        "data_path": str(args.data),
        "train_fraction": args.train_fraction,
        "seed": args.seed,
        "threshold": args.threshold,
        "balanced": not args.no_balance,
        "model_type": "RandomForestClassifier",
        "n_trees": args.n_trees,
        "max_features": args.max_features,
    }
    (artifact_dir / "config.json").write_text(json.dumps(run_config, indent=2))
    (artifact_dir / "data_schema.json").write_text(
        json.dumps(build_data_schema(data, config.LABEL_COL), indent=2)
    )

    # Raw rows so the dashboard can demo recoding + scoring
    raw.sample(n=min(config.SAMPLE_ROWS, len(raw)), random_state=args.seed).to_csv(
        artifact_dir / "sample.csv", index=False
    )
    logger.info("Saved artifacts to: %s", artifact_dir.resolve())

    return RunResult(
        report=report,
        importance=importance,
        model=model,
        n_train=len(train),
        n_train_balanced=len(fit_frame),
        n_test=len(test),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(levelname)s - %(message)s")

    # Stage errors are expected failures: log which stage and why, exit 1.
    # Anything else is a bug and keeps its traceback.
    try:
        result = run(args)
    except PipelineError as e:
        logger.error("Run aborted at stage '%s': %s", e.stage, e.message)
        return 1

    print(format_report(result.report))
    print()
    print(format_importance(result.importance))
    return 0


if __name__ == "__main__":
    sys.exit(main())
