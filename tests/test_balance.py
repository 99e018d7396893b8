import pandas as pd
import pytest

from student_depression.balance import balance, minority_ratio, snap_to_domain
from student_depression.errors import BalanceError
from student_depression.recode import GENDER_COLUMNS


def test_balancing_never_worsens_ratio(imbalanced):
    out = balance(imbalanced, seed=1234)
    assert minority_ratio(out["depression"]) >= minority_ratio(imbalanced["depression"])


def test_classes_reach_half_of_input_each(imbalanced):
    out = balance(imbalanced, seed=1234)
    counts = out["depression"].value_counts()
    assert counts[0] == counts[1] == len(imbalanced) // 2
    assert list(out.columns) == list(imbalanced.columns)


def test_synthetic_minority_rows_are_jittered(imbalanced):
    out = balance(imbalanced, seed=1234)
    features = [c for c in imbalanced.columns if c != "depression"]
    pos = out.loc[out["depression"] == 1, features]
    original = imbalanced.loc[imbalanced["depression"] == 1, features]
    # more positives than existed, and the new ones are not exact copies
    assert len(pos) > len(original)
    assert len(pos.drop_duplicates()) > len(original)


def test_fixed_seed_is_deterministic(imbalanced):
    pd.testing.assert_frame_equal(balance(imbalanced, seed=3), balance(imbalanced, seed=3))


def test_input_is_not_modified(imbalanced):
    before = imbalanced.copy()
    balance(imbalanced, seed=1)
    pd.testing.assert_frame_equal(imbalanced, before)


def test_missing_label_raises(imbalanced):
    with pytest.raises(BalanceError, match="not found"):
        balance(imbalanced.drop(columns=["depression"]))


def test_single_class_raises(recoded):
    only_neg = recoded[recoded["depression"] == 0]
    with pytest.raises(BalanceError) as exc:
        balance(only_neg)
    assert exc.value.stage == "balance"


def test_balanced_rows_stay_on_survey_scales(imbalanced):
    out = balance(imbalanced, seed=1234)

    assert (out[GENDER_COLUMNS].sum(axis=1) == 1).all()
    assert set(out["gender_female"].unique()) <= {0, 1}
    for field in ["suicidal_thoughts", "family_history"]:
        assert set(out[field].unique()) <= {0, 1}
    for field in ["academic_pressure", "study_satisfaction", "financial_stress"]:
        assert out[field].between(1, 5).all()
        assert pd.api.types.is_integer_dtype(out[field])
    assert out["sleep_duration"].between(1, 4).all()
    assert out["dietary_habits"].between(1, 3).all()
    assert out["age"].between(imbalanced["age"].min(), imbalanced["age"].max()).all()
    assert out["study_hours"].between(imbalanced["study_hours"].min(), imbalanced["study_hours"].max()).all()


def test_snap_leaves_unknown_columns_alone():
    frame = pd.DataFrame({"gender_female": [0.7, -0.4], "gender_male": [0.9, 0.2], "noise": [1.25, -3.5]})
    out = snap_to_domain(frame, frame)
    assert out["gender_female"].tolist() == [1, 0]
    assert out["gender_male"].tolist() == [0, 1]
    assert out["noise"].tolist() == [1.25, -3.5]
