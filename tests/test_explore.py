import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from student_depression.classifier import DepressionForest
from student_depression.explore import importance_plot, write_descriptive_plots


def axis_label(fig):
    label = fig.axes[0].get_xlabel()
    plt.close(fig)
    return label


def test_importance_axis_follows_table_kind(age_rule_data):
    model = DepressionForest(n_trees=20, seed=1, n_jobs=1).fit(age_rule_data)

    impurity = model.importance()
    permutation = model.importance(kind="permutation", data=age_rule_data, n_repeats=2)

    assert impurity.attrs["kind"] == "impurity"
    assert axis_label(importance_plot(impurity)) == "Mean decrease in impurity"
    assert "accuracy" in axis_label(importance_plot(permutation))


def test_explicit_kind_overrides_plain_table():
    table = pd.DataFrame({"feature": ["a", "b"], "importance": [0.6, 0.4], "std": [0.0, 0.0]})
    assert axis_label(importance_plot(table)) == "Mean decrease in impurity"
    assert "accuracy" in axis_label(importance_plot(table, kind="permutation"))


def test_descriptive_plots_are_written(tmp_path, recoded):
    paths = write_descriptive_plots(recoded, tmp_path)
    assert len(paths) == 8
    assert all(p.exists() for p in paths)
