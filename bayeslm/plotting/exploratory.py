"""Render exploratory figures of the raw iris measurements.

Histograms are drawn per feature and overlaid by species, so the reader can
see both the overall distribution of each measurement and how strongly the
species separate on it before any model is fitted.
"""

from __future__ import annotations

import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..schema import IRIS
from .style import (
    STYLE,
    add_panel_label,
    clean_axis,
    color_for_species,
    feature_label,
    fig_size,
    finalize_figure,
    panel_tag,
    set_axis_labels,
    set_global_style,
)


def plot_feature_histograms(
    df: pd.DataFrame, output_dir: str = "output", bins: int = 20
) -> str:
    """Render one histogram per numeric feature on a 2x2 grid.

    Args:
        df (pandas.DataFrame): Iris table from ``load_iris_data``; read only.
        output_dir (str, optional): Output root; the figure is written below
            ``<output_dir>/figures``. Defaults to ``"output"``.
        bins (int, optional): Shared bin count per feature. Defaults to ``20``.

    Returns:
        str: Path to the saved PNG file.

    Raises:
        KeyError: If any iris feature column is missing.
    """
    missing = [c for c in IRIS.features if c not in df.columns]
    if missing:
        raise KeyError(f"Iris data missing feature columns: {missing}")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)

    fig, axes = plt.subplots(2, 2, figsize=fig_size("grid_2x2"))
    has_species = IRIS.species in df.columns

    for idx, (ax, feature) in enumerate(zip(axes.ravel(), IRIS.features)):
        values = df[feature].to_numpy(dtype=float)
        edges = np.histogram_bin_edges(values[np.isfinite(values)], bins=bins)

        if has_species:
            for species, group in df.groupby(IRIS.species, observed=True, sort=True):
                ax.hist(
                    group[feature].to_numpy(dtype=float),
                    bins=edges,
                    color=color_for_species(species),
                    alpha=STYLE.ALPHA_HIST,
                    edgecolor="white",
                    linewidth=0.5,
                    label=str(species),
                )
        else:
            ax.hist(values, bins=edges, color="0.4", edgecolor="white", linewidth=0.5)

        clean_axis(ax)
        set_axis_labels(ax, x=feature_label(feature), y="Count")
        add_panel_label(ax, panel_tag(idx))

    if has_species:
        handles, labels = axes.ravel()[0].get_legend_handles_labels()
        fig.legend(
            handles,
            labels,
            loc="upper center",
            ncol=len(labels),
            bbox_to_anchor=(0.5, 1.02),
        )

    return finalize_figure(fig, output_dir, "feature_histograms")
