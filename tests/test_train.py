import json

from student_depression.make_synthetic_data import generate_survey
from student_depression.train import main


def write_survey(path, rows=502):
    generate_survey(n_students=rows, random_state=1234).to_csv(path, index=False)
    return path


def run_args(tmp_path, data):
    return [
        "--data", str(data),
        "--artifacts", str(tmp_path / "artifacts"),
        "--figures", str(tmp_path / "figures"),
        "--n-trees", "60",
        "--n-jobs", "1",
        "--log-level", "WARNING",
    ]


def test_full_run_writes_report_and_artifacts(tmp_path, capsys):
    data = write_survey(tmp_path / "survey.csv")

    assert main(run_args(tmp_path, data)) == 0

    artifacts = tmp_path / "artifacts"
    for name in ["model.pkl", "features.json", "metrics.json", "config.json", "data_schema.json", "sample.csv"]:
        assert (artifacts / name).exists(), name

    metrics = json.loads((artifacts / "metrics.json").read_text())
    assert 0.0 <= metrics["auc"] <= 1.0
    assert metrics["n_train"] == 351
    assert metrics["n_test"] == 151
    assert metrics["minority_ratio_balanced"] >= metrics["minority_ratio_train"]
    assert len(metrics["importance"]) == 11

    figures = tmp_path / "figures"
    assert (figures / "roc_curve.png").exists()
    assert (figures / "feature_importance.png").exists()
    assert (figures / "01_label_distribution.png").exists()

    out = capsys.readouterr().out
    assert "Confusion matrix" in out
    assert "AUC" in out
    assert "Feature importance" in out


def test_bad_vocabulary_aborts_with_stage(tmp_path, caplog):
    df = generate_survey(n_students=50, random_state=3)
    df.loc[4, "Have you ever had suicidal thoughts ?"] = "Maybe"
    data = tmp_path / "bad.csv"
    df.to_csv(data, index=False)

    assert main(run_args(tmp_path, data) + ["--no-plots"]) == 1
    assert "recode" in caplog.text
    assert "Maybe" in caplog.text
    assert not (tmp_path / "artifacts" / "model.pkl").exists()


def test_unbalanced_run_is_supported(tmp_path):
    data = write_survey(tmp_path / "survey.csv", rows=200)
    assert main(run_args(tmp_path, data) + ["--no-balance", "--no-plots"]) == 0
    config = json.loads((tmp_path / "artifacts" / "config.json").read_text())
    assert config["balanced"] is False


def test_balancing_leaves_the_test_split_untouched(tmp_path):
    data = write_survey(tmp_path / "survey.csv", rows=200)
    balanced_dir = tmp_path / "balanced"
    plain_dir = tmp_path / "plain"

    assert main(run_args(balanced_dir, data) + ["--no-plots"]) == 0
    assert main(run_args(plain_dir, data) + ["--no-balance", "--no-plots"]) == 0

    balanced = json.loads((balanced_dir / "artifacts" / "metrics.json").read_text())
    plain = json.loads((plain_dir / "artifacts" / "metrics.json").read_text())
    assert balanced["n_test"] == plain["n_test"]
    assert balanced["positive_rate_test"] == plain["positive_rate_test"]
    assert balanced["n_train"] == plain["n_train"]
    assert plain["n_train_balanced"] == plain["n_train"]
