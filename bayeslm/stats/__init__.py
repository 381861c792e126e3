"""
Statistical utilities for the regression walkthrough.

This subpackage provides numerical routines that operate on arrays and
primitive types; no PyMC model construction happens here.

Modules:
    regression:
        Ordinary least-squares multiple regression with standard errors and
        confidence intervals, used as a classical reference for the
        Bayesian estimates.

    diagnostics:
        Credible intervals, split R-hat and bulk ESS for ``(chain, draw)``
        arrays, and posterior-predictive comparison statistics.

Design Principle:
    This subpackage has no dependencies on plotting/ or the model module.
    It provides pure numerical utilities that can be independently tested.
"""

from .diagnostics import (
    bayesian_p_value,
    bulk_ess,
    equal_tailed_interval,
    interval_excludes_zero,
    predictive_statistics,
    relative_difference,
    rhat_converged,
    split_rhat,
)
from .regression import ols_regression, ols_table

__all__ = [
    "ols_regression",
    "ols_table",
    "bayesian_p_value",
    "bulk_ess",
    "equal_tailed_interval",
    "interval_excludes_zero",
    "predictive_statistics",
    "relative_difference",
    "rhat_converged",
    "split_rhat",
]
