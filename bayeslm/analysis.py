"""
Posterior analysis for the Bayesian linear regression walkthrough.

This module turns raw posterior draws into the quantities the walkthrough
reads back:
- posterior mean, SD, and an equal-tailed credible interval per parameter,
- the rank-normalized split R-hat convergence diagnostic (expected near 1.0),
- a posterior-predictive check comparing simulated and observed responses by
  mean and variance,
- an ordinary least-squares reference fit, and a prior predictive summary.

Convergence is reported, never enforced: a parameter whose R-hat is outside
tolerance triggers a ``ConvergenceWarning`` and a logged warning, and the
caller decides what to do with the run.
"""

from __future__ import annotations

import logging
import warnings
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from .formula import Formula, design_matrix, parse_formula
from .model import FitResult, sample_prior_predictive
from .priors import DEFAULT_PRIOR, PriorSpec
from .schema import SUMMARY
from .stats.diagnostics import (
    bulk_ess,
    equal_tailed_interval,
    interval_excludes_zero,
    predictive_statistics,
    rhat_converged,
    split_rhat,
)
from .stats.regression import ols_regression, ols_table

logger = logging.getLogger(__name__)


class ConvergenceWarning(RuntimeWarning):
    """Emitted when chains have not mixed to a common distribution."""


class PredictiveCheckWarning(RuntimeWarning):
    """Emitted when simulated data disagrees with the observed data."""


def summarize_posterior(fit: FitResult, ci_prob: float = 0.95) -> pd.DataFrame:
    """Summarize each model parameter's posterior.

    Args:
        fit (FitResult): Output of ``fit_bayesian_regression``.
        ci_prob (float, optional): Credible interval probability. Defaults to
            ``0.95``.

    Returns:
        pandas.DataFrame: One row per parameter (intercept first, then the
        predictors in formula order, then ``sigma``) with the columns of
        ``bayeslm.schema.SummaryColumns``.

    Note:
        Intervals are equal-tailed quantile intervals, not highest-density
        intervals, so they are invariant under monotone transformations.
    """
    rows = []
    for name in fit.parameter_names:
        samples = fit.samples(name)
        lo, hi = equal_tailed_interval(samples, ci_prob)
        rows.append(
            {
                SUMMARY.parameter: name,
                SUMMARY.mean: float(np.mean(samples)),
                SUMMARY.sd: float(np.std(samples, ddof=1)),
                SUMMARY.ci_lower: lo,
                SUMMARY.ci_upper: hi,
                SUMMARY.rhat: split_rhat(samples),
                SUMMARY.ess_bulk: bulk_ess(samples),
            }
        )
    summary = pd.DataFrame.from_records(rows)
    summary.attrs["ci_prob"] = float(ci_prob)
    return summary


def _rows_for(summary: pd.DataFrame, parameters: Iterable[str] | None) -> pd.DataFrame:
    if parameters is None:
        return summary
    parameters = list(parameters)
    unknown = set(parameters) - set(summary[SUMMARY.parameter])
    if unknown:
        raise KeyError(f"Parameters not in summary: {sorted(unknown)}")
    return summary[summary[SUMMARY.parameter].isin(parameters)]


def credible_interval_excludes_zero(
    summary: pd.DataFrame, parameters: Iterable[str] | None = None
) -> Dict[str, bool]:
    """Map each parameter to whether its credible interval excludes zero.

    Raises:
        KeyError: If a requested parameter is not in ``summary``.
    """
    rows = _rows_for(summary, parameters)
    return {
        row[SUMMARY.parameter]: interval_excludes_zero(
            row[SUMMARY.ci_lower], row[SUMMARY.ci_upper]
        )
        for _, row in rows.iterrows()
    }


def check_convergence(
    summary: pd.DataFrame, tolerance: float = 0.05, warn: bool = True
) -> List[str]:
    """Return parameters whose R-hat is farther than ``tolerance`` from 1.0.

    Args:
        summary (pandas.DataFrame): Output of ``summarize_posterior``.
        tolerance (float, optional): Accepted ``|R-hat - 1|``. Defaults to
            ``0.05``.
        warn (bool, optional): Emit a ``ConvergenceWarning`` when any
            parameter fails. Defaults to ``True``.

    Returns:
        list[str]: Names of parameters failing the check; empty when every
        chain agrees.
    """
    failing = [
        row[SUMMARY.parameter]
        for _, row in summary.iterrows()
        if not rhat_converged(row[SUMMARY.rhat], tolerance)
    ]
    if failing:
        logger.warning(
            "R-hat outside 1 +/- %.3f for %s; chains may not have converged",
            tolerance,
            failing,
        )
        if warn:
            warnings.warn(
                f"R-hat outside 1 +/- {tolerance} for parameters {failing}",
                ConvergenceWarning,
                stacklevel=2,
            )
    else:
        logger.info("All %d parameters have R-hat within 1 +/- %.3f", len(summary), tolerance)
    return failing


def posterior_predictive_check(
    fit: FitResult, tolerance: float = 0.1, warn: bool = True
) -> Dict[str, float]:
    """Compare simulated responses from the posterior with the observed ones.

    Args:
        fit (FitResult): Fit with posterior predictive samples.
        tolerance (float, optional): Largest accepted relative difference
            between simulated and observed mean or variance. Defaults to
            ``0.1``.
        warn (bool, optional): Emit a ``PredictiveCheckWarning`` when a
            statistic falls outside tolerance. Defaults to ``True``.

    Returns:
        dict[str, float]: See ``bayeslm.stats.diagnostics.predictive_statistics``,
        plus ``within_tolerance`` (1.0 or 0.0).

    Raises:
        ValueError: If the fit carries no posterior predictive samples.
    """
    stats = predictive_statistics(fit.observed(), fit.posterior_predictive())
    diffs = [stats["mean_relative_difference"], stats["variance_relative_difference"]]
    ok = all(np.isfinite(d) and abs(d) <= tolerance for d in diffs)
    stats["within_tolerance"] = float(ok)

    logger.info(
        "Posterior predictive: mean %.3f vs observed %.3f, variance %.3f vs observed %.3f",
        stats["simulated_mean"],
        stats["observed_mean"],
        stats["simulated_variance"],
        stats["observed_variance"],
    )
    if not ok:
        logger.warning(
            "Posterior predictive statistics differ from observed data by more than %.0f%%",
            tolerance * 100,
        )
        if warn:
            warnings.warn(
                "Simulated data does not reproduce observed mean/variance "
                f"within {tolerance:.0%}",
                PredictiveCheckWarning,
                stacklevel=2,
            )
    return stats


def interpret_effects(summary: pd.DataFrame, formula: Formula) -> List[str]:
    """Describe each predictor's effect in one plain sentence."""
    ci_prob = summary.attrs.get("ci_prob", 0.95)
    sentences = []
    for _, row in _rows_for(summary, formula.predictors).iterrows():
        name = row[SUMMARY.parameter]
        mean = row[SUMMARY.mean]
        lo, hi = row[SUMMARY.ci_lower], row[SUMMARY.ci_upper]
        direction = "increases" if mean > 0 else "decreases"
        if interval_excludes_zero(lo, hi):
            verdict = f"the {ci_prob:.0%} credible interval [{lo:.2f}, {hi:.2f}] excludes zero"
        else:
            verdict = (
                f"the {ci_prob:.0%} credible interval [{lo:.2f}, {hi:.2f}] includes zero, "
                "so the direction is uncertain"
            )
        sentences.append(
            f"Each unit of {name} {direction} the expected {formula.response} by "
            f"{abs(mean):.2f}, holding the other predictors fixed; {verdict}."
        )
    return sentences


def ols_reference(
    data: pd.DataFrame, formula: str | Formula, ci_prob: float = 0.95
) -> pd.DataFrame:
    """Ordinary least-squares estimates for the same formula, one row per coefficient."""
    if not isinstance(formula, Formula):
        formula = parse_formula(formula, data)
    X, y = design_matrix(data, formula)
    fit = ols_regression(X, y, intercept=formula.intercept, ci_prob=ci_prob)
    table = ols_table(fit, formula.predictors, intercept=formula.intercept)
    table.attrs["r2"] = fit["r2"]
    table.attrs["sigma"] = fit["sigma"]
    return table


def compare_with_ols(summary: pd.DataFrame, ols: pd.DataFrame) -> pd.DataFrame:
    """Join Bayesian posterior means with OLS estimates by parameter."""
    ols_part = ols[["Parameter", "Estimate", "SE"]].rename(
        columns={
            "Parameter": SUMMARY.parameter,
            "Estimate": "OLS estimate",
            "SE": "OLS SE",
        }
    )
    merged = (
        summary[[SUMMARY.parameter, SUMMARY.mean, SUMMARY.sd]]
        .rename(columns={SUMMARY.mean: "Posterior mean", SUMMARY.sd: "Posterior SD"})
        .merge(ols_part, on=SUMMARY.parameter, how="inner")
    )
    merged["Difference"] = merged["Posterior mean"] - merged["OLS estimate"]
    return merged


def prior_predictive_summary(
    data: pd.DataFrame,
    formula: str | Formula,
    prior: PriorSpec = DEFAULT_PRIOR,
    draws: int = 500,
    seed: int = 123,
) -> Dict[str, float]:
    """Summarize responses simulated from the prior alone.

    Returns:
        dict[str, float]: Mean and 2.5% / 97.5% quantiles of all simulated
        responses, plus the observed response range for comparison.
    """
    if not isinstance(formula, Formula):
        formula = parse_formula(formula, data)
    simulated = sample_prior_predictive(data, formula, prior, draws=draws, seed=seed)
    _, y = design_matrix(data, formula)
    lo, hi = np.quantile(simulated, [0.025, 0.975])
    return {
        "prior_predictive_mean": float(np.mean(simulated)),
        "prior_predictive_q025": float(lo),
        "prior_predictive_q975": float(hi),
        "observed_min": float(np.min(y)),
        "observed_max": float(np.max(y)),
        "draws": int(simulated.shape[0]),
    }


def print_summary(summary: pd.DataFrame, formula: Formula):
    ci_prob = summary.attrs.get("ci_prob", 0.95)
    print(f"\nPosterior summary for {formula} ({ci_prob:.0%} credible intervals):")
    if summary.empty:
        print("  (no parameters)")
        return

    for _, row in summary.iterrows():
        rhat = row[SUMMARY.rhat]
        rhat_text = f"{rhat:.3f}" if pd.notna(rhat) else "n/a"
        print(
            f" - {row[SUMMARY.parameter]}: mean = {row[SUMMARY.mean]:.3f} "
            f"(SD {row[SUMMARY.sd]:.3f}) | CI [{row[SUMMARY.ci_lower]:.3f}, "
            f"{row[SUMMARY.ci_upper]:.3f}] | R-hat = {rhat_text}"
        )
