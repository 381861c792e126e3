import os

import pytest

from bayeslm.plotting import (
    plot_all_posterior,
    plot_feature_histograms,
    plot_posterior_distributions,
)
from bayeslm.plotting.style import color_for_species, feature_label, panel_tag, sanitize_filename
from bayeslm.schema import SUMMARY


def test_feature_histograms_saved(tmp_path, iris):
    path = plot_feature_histograms(iris, str(tmp_path))
    assert path == os.path.join(str(tmp_path), "figures", "feature_histograms.png")
    assert os.path.exists(path)
    assert os.path.exists(path[:-4] + ".pdf")


def test_feature_histograms_missing_column(tmp_path, iris):
    with pytest.raises(KeyError, match="petal_width"):
        plot_feature_histograms(iris.drop(columns=["petal_width"]), str(tmp_path))


def test_posterior_figures_saved(tmp_path, default_fit, default_summary):
    paths = plot_all_posterior(default_fit, default_summary, str(tmp_path), n_draws=10)
    names = [os.path.basename(p) for p in paths]
    assert names == [
        "posterior_distributions.png",
        "trace.png",
        "posterior_predictive_check.png",
    ]
    assert all(os.path.getsize(p) > 0 for p in paths)


def test_posterior_plot_requires_summary_rows(tmp_path, default_fit, default_summary):
    partial = default_summary[default_summary[SUMMARY.parameter] != "sigma"]
    with pytest.raises(KeyError, match="sigma"):
        plot_posterior_distributions(default_fit, partial, str(tmp_path))


def test_style_helpers():
    assert panel_tag(0) == "(a)"
    assert panel_tag(3) == "(d)"
    assert sanitize_filename("Posterior: y ~ x") == "Posterior_y_x"
    assert feature_label("sepal_length") == "Sepal length / cm"
    assert color_for_species("setosa") != color_for_species("virginica")
