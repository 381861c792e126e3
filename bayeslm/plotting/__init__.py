"""
Plotting utilities for the Bayesian regression walkthrough.

All plotting functions accept precomputed data or fitted results and do not
perform any model fitting.

Modules:
    exploratory:
        Per-feature histograms of the iris measurements, overlaid by
        species.

    posterior_plots:
        Posterior histograms with mean and credible interval, ArviZ trace
        plots, and the posterior-predictive density overlay.

    style:
        Shared rcParams, colors, labels, and multi-format save helpers.

Design Principles:
    1. No statistics in plotting code beyond display-only density curves.
    2. Inputs are never mutated.
    3. Every figure is saved as PNG (300 dpi) and PDF under
       ``<output_dir>/figures``.
"""

from .exploratory import plot_feature_histograms
from .posterior_plots import (
    plot_all_posterior,
    plot_posterior_distributions,
    plot_posterior_predictive,
    plot_trace,
)
from .style import set_global_style

__all__ = [
    "plot_feature_histograms",
    "plot_all_posterior",
    "plot_posterior_distributions",
    "plot_posterior_predictive",
    "plot_trace",
    "set_global_style",
]
