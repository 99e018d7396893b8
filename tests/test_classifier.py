import numpy as np
import pandas as pd
import pytest
from sklearn.exceptions import NotFittedError

from student_depression.balance import balance
from student_depression.classifier import DepressionForest, default_max_features
from student_depression.errors import FitError
from student_depression.evaluate import evaluate
from student_depression.recode import recode
from student_depression.split import train_test_partition


def test_deterministic_rule_is_learned(age_rule_data):
    train, test = train_test_partition(age_rule_data, fraction=0.7, seed=1234)
    model = DepressionForest(n_trees=100, seed=1234, n_jobs=1).fit(train)
    report = evaluate(model, test)
    assert report.accuracy >= 0.95


def test_rule_feature_ranks_first(age_rule_data):
    model = DepressionForest(n_trees=100, seed=1, n_jobs=1).fit(age_rule_data)
    table = model.importance()
    assert table.loc[0, "feature"] == "age"
    assert set(table["feature"]) == {"age", "noise_a", "noise_b", "noise_c"}
    assert table["importance"].is_monotonic_decreasing


def test_permutation_importance_needs_labelled_data(age_rule_data):
    model = DepressionForest(n_trees=50, seed=1, n_jobs=1).fit(age_rule_data)
    table = model.importance(kind="permutation", data=age_rule_data, n_repeats=3)
    assert table.loc[0, "feature"] == "age"
    with pytest.raises(ValueError):
        model.importance(kind="permutation")
    with pytest.raises(ValueError):
        model.importance(kind="shap")


def test_probability_is_vote_fraction(age_rule_data):
    model = DepressionForest(n_trees=40, seed=2, n_jobs=1).fit(age_rule_data)
    proba = model.predict_proba(age_rule_data)
    assert ((proba >= 0) & (proba <= 1)).all()
    assert np.allclose(proba * 40, np.round(proba * 40))
    assert np.array_equal(model.predict(age_rule_data), (proba >= 0.5).astype(int))


def test_parallel_fit_matches_serial(age_rule_data):
    serial = DepressionForest(n_trees=30, seed=11, n_jobs=1).fit(age_rule_data)
    parallel = DepressionForest(n_trees=30, seed=11, n_jobs=2).fit(age_rule_data)
    assert np.array_equal(serial.predict_proba(age_rule_data), parallel.predict_proba(age_rule_data))


def test_default_candidate_features_is_ceil_sqrt():
    assert default_max_features(10) == 4
    assert default_max_features(9) == 3
    assert default_max_features(1) == 1


def test_empty_training_set_raises(age_rule_data):
    with pytest.raises(FitError, match="empty"):
        DepressionForest(n_trees=5).fit(age_rule_data.iloc[0:0])


def test_single_class_raises(age_rule_data):
    young = age_rule_data[age_rule_data["depression"] == 0]
    with pytest.raises(FitError, match="single class"):
        DepressionForest(n_trees=5).fit(young)


def test_unfitted_model_refuses_to_predict(age_rule_data):
    with pytest.raises(NotFittedError):
        DepressionForest().predict_proba(age_rule_data)


def test_low_risk_respondent_is_predicted_no(recoded, low_risk_row):
    train, _ = train_test_partition(recoded, fraction=0.7, seed=1234)
    model = DepressionForest(n_trees=200, seed=1234, n_jobs=1).fit(balance(train, seed=1234))

    proba = model.predict_proba(recode(low_risk_row, with_label=False))
    assert proba[0] < 0.5
    assert model.predict(recode(low_risk_row, with_label=False))[0] == 0
