"""
app/streamlit_app.py

Purpose
-------
A Streamlit dashboard that:
  - loads the trained model bundle (model + feature schema)
  - shows the stored evaluation report, ROC curve and feature importance
  - scores an uploaded survey CSV (raw text answers or already recoded)
  - provides SHAP global + local explanations for the "Yes" class

Run
---
streamlit run app/streamlit_app.py
"""

import json
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import shap
import streamlit as st

from student_depression.config import ARTIFACT_DIR, FIGURE_DIR
from student_depression.data_dictionary import DATA_DICTIONARY
from student_depression.inference import leaf_probability, load_bundle, prepare, score, validate_features


# ---------------------------------------------------------------------
# Streamlit page configuration
# ---------------------------------------------------------------------
st.set_page_config(
    page_title="Student Depression Report",
    layout="wide",
)
st.title("Student Depression Report")


# ---------------------------------------------------------------------
# Caching helpers
# ---------------------------------------------------------------------
@st.cache_resource
def get_bundle():
    """Load model + features once per session (unless code changes)."""
    return load_bundle(ARTIFACT_DIR)

@st.cache_resource
def get_explainer(_forest):
    """Create SHAP explainer once per session."""
    return shap.TreeExplainer(_forest)

@st.cache_data
def compute_shap_values(_explainer, X: pd.DataFrame):
    return _explainer.shap_values(X)


def positive_class(values):
    """
    SHAP returns either [class0, class1] or an (n, p, 2) array for binary
    forests depending on version; keep the "Yes" contributions.
    """
    if isinstance(values, list):
        return values[1]
    values = np.asarray(values)
    if values.ndim == 3:
        return values[:, :, 1]
    return values


# ---------------------------------------------------------------------
# Load model bundle (fail fast with useful instructions)
# ---------------------------------------------------------------------
try:
    bundle = get_bundle()
    st.success("Model bundle loaded.")
except FileNotFoundError as e:
    st.warning("No model bundle found. Train first: `python -m student_depression.train`.")
    st.code(str(e))
    st.stop()


# ---------------------------------------------------------------------
# Stored evaluation
# ---------------------------------------------------------------------
# metrics.json is written by train.py from the held-out 30%; it does not
# change with the uploaded file.
metrics_path = ARTIFACT_DIR / "metrics.json"
if metrics_path.exists():
    metrics = json.loads(metrics_path.read_text())
    st.subheader("Held-out evaluation")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Accuracy", f"{metrics['accuracy']:.1%}")
    c2.metric("Sensitivity (No)", f"{metrics['sensitivity']:.1%}", help="TN / (TN + FP)")
    c3.metric("Specificity (Yes)", f"{metrics['specificity']:.1%}", help="TP / (TP + FN)")
    c4.metric("AUC", f"{metrics['auc']:.3f}")

    st.table(
        pd.DataFrame(
            [[metrics["tn"], metrics["fp"]], [metrics["fn"], metrics["tp"]]],
            index=["actual No", "actual Yes"],
            columns=["predicted No", "predicted Yes"],
        )
    )

    fig_cols = st.columns(2)
    for col, name in zip(fig_cols, ["roc_curve.png", "feature_importance.png"]):
        path = Path(FIGURE_DIR) / name
        if path.exists():
            col.image(str(path))


# ---------------------------------------------------------------------
# Sidebar controls
# ---------------------------------------------------------------------
st.sidebar.header("Controls")

# Threshold decides which scores count as a "Yes" prediction.
threshold = st.sidebar.slider(
    "Risk threshold",
    min_value=0.0,
    max_value=1.0,
    value=0.50,
    step=0.01,
    help="Scores at or above this value are labelled Yes."
)

max_rows = st.sidebar.slider(
    "Max rows to score",
    min_value=50,
    max_value=2000,
    value=500,
    step=50,
)

with st.sidebar.expander("Data dictionary"):
    for name, text in DATA_DICTIONARY.items():
        st.markdown(f"**{name}**: {text}")


# ---------------------------------------------------------------------
# Data input section
# ---------------------------------------------------------------------
st.subheader("Upload survey CSV for scoring")
st.caption(f"Model features: {bundle.features}")

file = st.file_uploader("Upload a CSV", type="csv")

if file:
    df = pd.read_csv(file)
else:
    st.info("No file uploaded. Using artifacts/sample.csv if available.")
    sample_path = ARTIFACT_DIR / "sample.csv"
    if sample_path.exists():
        df = pd.read_csv(sample_path)
    else:
        df = pd.DataFrame({c: pd.Series(dtype="float") for c in bundle.features})

if len(df) == 0:
    st.warning("No rows available to score.")
    st.stop()

# Keep runtime predictable by limiting row count.
df = df.head(max_rows)


# ---------------------------------------------------------------------
# Validate + score
# ---------------------------------------------------------------------
# Raw survey rows are recoded with the same vocabularies as training; an
# unknown answer stops the page instead of being silently scored.
try:
    X, warnings = validate_features(prepare(df), bundle.features)
    for w in warnings:
        st.warning(w)
except Exception as e:
    st.error("Input data failed validation.")
    st.code(str(e))
    st.stop()

# Scores are the share of the forest's trees voting "Yes".
risk = score(df, bundle)

out = df.copy()
out["depression_risk"] = risk
# The threshold only changes the label, never the score itself.
out["risk_band"] = np.where(out["depression_risk"] >= threshold, "Yes", "No")

col1, col2 = st.columns([2, 1])

with col1:
    st.subheader("Scored records (top 50 by risk)")
    st.dataframe(out.sort_values("depression_risk", ascending=False).head(50), use_container_width=True)

    # Downloadable results include the score and the label at this threshold.
    csv = out.to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download scored CSV",
        data=csv,
        file_name="scored.csv",
        mime="text/csv",
    )

with col2:
    st.subheader("Risk distribution")
    fig = plt.figure()
    plt.hist(out["depression_risk"], bins=30)
    plt.title("Depression risk")
    plt.xlabel("depression_risk")
    plt.ylabel("count")
    st.pyplot(fig)

    st.subheader("Predicted label counts")
    st.write(out["risk_band"].value_counts(dropna=False))


# ---------------------------------------------------------------------
# Explainability (SHAP)
# ---------------------------------------------------------------------
st.subheader("Explainability (SHAP)")

# TreeExplainer walks sklearn's trees, so it explains the averaged leaf
# probability, not the vote fraction shown as depression_risk above.
leaf = leaf_probability(df, bundle)

# Explainer is cached; SHAP values are cached by the contents of X.
explainer = get_explainer(bundle.model.model_)
sv_pos = positive_class(compute_shap_values(explainer, X))

st.caption("Global explanation: SHAP summary plot (Yes class)")
fig2 = plt.figure()
shap.summary_plot(sv_pos, X, show=False)
st.pyplot(fig2)

row_idx = st.number_input(
    "Row index to explain",
    min_value=0,
    max_value=len(X) - 1,
    value=0,
    step=1,
)

# expected_value is one number per class for binary forests; keep "Yes".
expected = np.ravel(explainer.expected_value)
base_value = float(expected[1] if expected.size > 1 else expected[0])

st.caption(
    "SHAP waterfall plot for the selected row. The waterfall sums to the forest's "
    "averaged leaf probability, which can differ slightly from depression_risk "
    "(the share of trees voting Yes) when leaves are impure."
)
m1, m2 = st.columns(2)
m1.metric("depression_risk (tree votes)", f"{risk.iloc[row_idx]:.3f}")
m2.metric("Leaf probability (SHAP total)", f"{leaf.iloc[row_idx]:.3f}")

explanation = shap.Explanation(
    values=sv_pos[row_idx],
    base_values=base_value,
    data=X.iloc[row_idx].to_numpy(),
    feature_names=list(X.columns),
)
fig3 = plt.figure()
shap.plots.waterfall(explanation, show=False)
st.pyplot(fig3)
