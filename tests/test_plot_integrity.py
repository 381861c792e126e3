"""Verify plotting functions do not mutate analysis results."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas.testing as pdt

from bayeslm.plotting import plot_feature_histograms, plot_posterior_distributions
from bayeslm.plotting.style import add_panel_label, save_figure


def test_histograms_do_not_mutate_data(tmp_path, iris):
    snapshot = iris.copy(deep=True)
    plot_feature_histograms(iris, output_dir=str(tmp_path))
    pdt.assert_frame_equal(iris, snapshot)


def test_posterior_plot_does_not_mutate_fit(tmp_path, default_fit, default_summary):
    summary_snapshot = default_summary.copy(deep=True)
    draws_snapshot = default_fit.samples("sepal_length").copy()

    plot_posterior_distributions(default_fit, default_summary, output_dir=str(tmp_path))

    pdt.assert_frame_equal(default_summary, summary_snapshot)
    assert np.array_equal(default_fit.samples("sepal_length"), draws_snapshot)


def test_save_figure_uses_tight_bounding(monkeypatch, tmp_path):
    """Ensure multi-format exports use tight bounding and expected padding."""
    fig, _ = plt.subplots()
    calls = []

    def _fake_savefig(path, **kwargs):
        calls.append((Path(path).suffix, kwargs))

    monkeypatch.setattr(fig, "savefig", _fake_savefig)

    saved = save_figure(fig, str(tmp_path / "integrity_plot.png"))

    assert saved.endswith("integrity_plot.png")
    assert [ext for ext, _ in calls] == [".png", ".pdf"]
    for ext, kwargs in calls:
        assert kwargs.get("bbox_inches") == "tight"
        assert kwargs.get("pad_inches") == 0.12
        if ext == ".png":
            assert kwargs.get("dpi") == 300
        else:
            assert kwargs.get("dpi") is None

    plt.close(fig)


def test_add_panel_label_position():
    fig, ax = plt.subplots()
    add_panel_label(ax, "(a)")
    txt = ax.texts[-1]
    assert txt.get_text() == "(a)"
    assert txt.get_position() == (0.02, 0.98)
    assert txt.get_bbox_patch() is None
    plt.close(fig)
