"""Render posterior distributions, chain traces, and the predictive check.

All functions receive a fitted ``FitResult`` (and, where needed, its
precomputed summary) and only draw; no statistics are recomputed here beyond
kernel density curves for display.
"""

from __future__ import annotations

import math
import os
from typing import List

import arviz as az
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from scipy.stats import gaussian_kde

from ..model import FitResult
from ..schema import SUMMARY
from .style import (
    INTERVAL_COLOR,
    OBSERVED_COLOR,
    POSTERIOR_COLOR,
    STYLE,
    add_info_box,
    add_panel_label,
    clean_axis,
    feature_label,
    finalize_figure,
    panel_tag,
    set_axis_labels,
    set_global_style,
)


def _density_curve(values: np.ndarray, grid: np.ndarray) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    values = values[np.isfinite(values)]
    if values.size < 2 or np.ptp(values) == 0:
        return np.zeros_like(grid)
    return gaussian_kde(values)(grid)


def plot_posterior_distributions(
    fit: FitResult, summary: pd.DataFrame, output_dir: str = "output"
) -> str:
    """Render one posterior histogram per parameter with mean and interval marked.

    Args:
        fit (FitResult): Fitted model.
        summary (pandas.DataFrame): Output of
            ``bayeslm.analysis.summarize_posterior`` for ``fit``.
        output_dir (str, optional): Output root. Defaults to ``"output"``.

    Returns:
        str: Path to the saved PNG file.

    Raises:
        KeyError: If ``summary`` lacks a row for a fitted parameter.
    """
    names = fit.parameter_names
    rows = summary.set_index(SUMMARY.parameter)
    missing = [n for n in names if n not in rows.index]
    if missing:
        raise KeyError(f"Summary has no rows for parameters: {missing}")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    ci_prob = summary.attrs.get("ci_prob", 0.95)

    ncols = 2
    nrows = int(math.ceil(len(names) / ncols))
    fig, axes = plt.subplots(nrows, ncols, figsize=(9.5, 3.2 * nrows), squeeze=False)

    for idx, name in enumerate(names):
        ax = axes.ravel()[idx]
        samples = fit.samples(name).ravel()
        row = rows.loc[name]
        ax.hist(
            samples,
            bins=40,
            density=True,
            color=POSTERIOR_COLOR,
            alpha=STYLE.ALPHA_HIST,
            edgecolor="white",
            linewidth=0.4,
        )
        ax.axvline(row[SUMMARY.mean], color=INTERVAL_COLOR, linewidth=STYLE.LINEWIDTH)
        for bound in (row[SUMMARY.ci_lower], row[SUMMARY.ci_upper]):
            ax.axvline(bound, color=INTERVAL_COLOR, linewidth=STYLE.LINEWIDTH_THIN, linestyle="--")
        if row[SUMMARY.ci_lower] < 0 < row[SUMMARY.ci_upper]:
            ax.axvline(0.0, color="0.5", linewidth=STYLE.LINEWIDTH_THIN, linestyle=":")

        clean_axis(ax, grid_axis="none")
        set_axis_labels(ax, x=name, y="Density" if idx % ncols == 0 else None)
        ax.set_yticks([])
        add_panel_label(ax, panel_tag(idx))
        add_info_box(
            ax,
            f"mean {row[SUMMARY.mean]:.3f}\n"
            f"{ci_prob:.0%} CI [{row[SUMMARY.ci_lower]:.3f}, {row[SUMMARY.ci_upper]:.3f}]\n"
            f"R-hat {row[SUMMARY.rhat]:.3f}",
        )

    for ax in axes.ravel()[len(names):]:
        ax.axis("off")

    return finalize_figure(
        fig, output_dir, "posterior_distributions", title=f"Posterior: {fit.formula}"
    )


def plot_trace(fit: FitResult, output_dir: str = "output") -> str:
    """Render ArviZ trace plots (per-chain density and draws) for every parameter."""
    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    axes = az.plot_trace(fit.idata, var_names=fit.parameter_names, compact=False)
    fig = np.asarray(axes).ravel()[0].figure
    return finalize_figure(fig, output_dir, "trace")


def plot_posterior_predictive(
    fit: FitResult,
    output_dir: str = "output",
    n_draws: int = 50,
    seed: int | None = None,
) -> str:
    """Overlay densities of simulated datasets on the observed response density.

    Args:
        fit (FitResult): Fit carrying posterior predictive samples.
        output_dir (str, optional): Output root. Defaults to ``"output"``.
        n_draws (int, optional): Simulated datasets to draw. Defaults to ``50``.
        seed (int, optional): Seed for choosing which datasets to draw;
            defaults to the fit's seed.

    Returns:
        str: Path to the saved PNG file.

    Raises:
        ValueError: If the fit has no posterior predictive samples.
    """
    y_obs = fit.observed()
    y_rep = fit.posterior_predictive()

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)

    rng = np.random.default_rng(fit.seed if seed is None else seed)
    n_pick = min(int(n_draws), y_rep.shape[0])
    picks = rng.choice(y_rep.shape[0], size=n_pick, replace=False)

    lo = min(float(np.min(y_obs)), float(np.quantile(y_rep[picks], 0.005)))
    hi = max(float(np.max(y_obs)), float(np.quantile(y_rep[picks], 0.995)))
    pad = 0.05 * (hi - lo)
    grid = np.linspace(lo - pad, hi + pad, 300)

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)
    for i, idx in enumerate(picks):
        ax.plot(
            grid,
            _density_curve(y_rep[idx], grid),
            color=POSTERIOR_COLOR,
            alpha=STYLE.ALPHA_DRAW,
            linewidth=STYLE.LINEWIDTH_THIN,
            label="Simulated (posterior predictive)" if i == 0 else None,
        )
    ax.plot(
        grid,
        _density_curve(y_obs, grid),
        color=OBSERVED_COLOR,
        linewidth=STYLE.LINEWIDTH,
        label="Observed",
    )

    clean_axis(ax)
    set_axis_labels(ax, x=feature_label(fit.formula.response), y="Density")
    ax.legend(loc="upper right")
    return finalize_figure(fig, output_dir, "posterior_predictive_check")


def plot_all_posterior(
    fit: FitResult, summary: pd.DataFrame, output_dir: str = "output", n_draws: int = 50
) -> List[str]:
    """Render every posterior figure and return the PNG paths."""
    paths = [
        plot_posterior_distributions(fit, summary, output_dir),
        plot_trace(fit, output_dir),
    ]
    if "posterior_predictive" in fit.idata.groups():
        paths.append(plot_posterior_predictive(fit, output_dir, n_draws=n_draws))
    return paths
