import json

import pytest

from student_depression.classifier import DepressionForest
from student_depression.inference import (
    ModelBundle,
    leaf_probability,
    load_bundle,
    save_bundle,
    score,
    validate_features,
)


@pytest.fixture
def bundle(recoded):
    model = DepressionForest(n_trees=25, seed=1234, n_jobs=1).fit(recoded)
    return ModelBundle(model=model, features=model.features_)


def test_saved_bundle_loads_back(tmp_path, bundle, recoded):
    save_bundle(bundle, tmp_path)
    loaded = load_bundle(tmp_path)

    assert loaded.features == bundle.features
    assert json.loads((tmp_path / "features.json").read_text()) == bundle.features
    assert (loaded.model.predict_proba(recoded) == bundle.model.predict_proba(recoded)).all()


def test_missing_artifacts_raise(tmp_path):
    with pytest.raises(FileNotFoundError, match="Train first"):
        load_bundle(tmp_path)


def test_bad_feature_file_raises(tmp_path, bundle):
    save_bundle(bundle, tmp_path)
    (tmp_path / "features.json").write_text(json.dumps({"not": "a list"}))
    with pytest.raises(ValueError):
        load_bundle(tmp_path)


def test_raw_and_recoded_rows_score_the_same(raw_survey, recoded, bundle):
    raw_scores = score(raw_survey.head(20), bundle)
    recoded_scores = score(recoded.head(20), bundle)

    assert raw_scores.name == "depression_risk"
    assert list(raw_scores.index) == list(raw_survey.head(20).index)
    assert (raw_scores == recoded_scores).all()
    assert raw_scores.between(0, 1).all()


def test_validate_features_reports_extras_and_rejects_gaps(recoded, bundle):
    X, warnings = validate_features(recoded, bundle.features)
    assert list(X.columns) == bundle.features
    assert any("depression" in w for w in warnings)

    with pytest.raises(ValueError, match="Missing required columns"):
        validate_features(recoded.drop(columns=["age"]), bundle.features)

    bad = recoded.head(3).astype({"age": object})
    bad.loc[bad.index[0], "age"] = "old"
    with pytest.raises(ValueError, match="age"):
        validate_features(bad, bundle.features)


def test_leaf_probability_is_what_tree_explainers_decompose(recoded, bundle):
    leaf = leaf_probability(recoded.head(30), bundle)
    votes = score(recoded.head(30), bundle)

    expected = bundle.model.model_.predict_proba(recoded.head(30)[bundle.features])[:, 1]
    assert leaf.name == "leaf_probability"
    assert (leaf.to_numpy() == expected).all()
    assert leaf.between(0, 1).all()
    # both read the same trees, so they agree on which side of 0.5 most rows fall
    assert ((leaf >= 0.5) == (votes >= 0.5)).mean() > 0.9
