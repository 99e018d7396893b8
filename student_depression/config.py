"""
student_depression/config.py

Project paths and run defaults. Command-line flags in train.py override these.
"""

from pathlib import Path

from student_depression.data_dictionary import LABEL_COL  # noqa: F401  re-exported for the stages

DATA_DIR = Path("data")
ARTIFACT_DIR = Path("artifacts")
FIGURE_DIR = Path("reports") / "figures"

DEFAULT_DATA_PATH = DATA_DIR / "student_depression_synthetic.csv"

# Reproducibility
DEFAULT_SEED = 1234

# Splitter
TRAIN_FRACTION = 0.70

# Classifier
N_TREES = 500
N_JOBS = -1

# Evaluator
THRESHOLD = 0.50

# Number of rows written to artifacts/sample.csv for the dashboard
SAMPLE_ROWS = 300
