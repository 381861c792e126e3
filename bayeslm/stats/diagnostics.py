"""Posterior sample diagnostics: intervals, R-hat, ESS, predictive statistics.

All functions take plain NumPy arrays. Posterior samples are shaped
``(chain, draw)``; posterior-predictive samples are shaped
``(sample, observation)``.
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

import arviz as az
import numpy as np


def equal_tailed_interval(samples: np.ndarray, prob: float = 0.95) -> Tuple[float, float]:
    """Return the central credible interval holding ``prob`` of the mass.

    Args:
        samples (numpy.ndarray): Posterior draws of one scalar parameter, any
            shape.
        prob (float, optional): Interval probability. Defaults to ``0.95``.

    Returns:
        tuple[float, float]: Lower and upper quantiles
        ``(1 - prob) / 2`` and ``(1 + prob) / 2``.

    Raises:
        ValueError: If ``prob`` is outside (0, 1) or no finite draws exist.
    """
    if not 0.0 < prob < 1.0:
        raise ValueError(f"Interval probability must lie in (0, 1), got {prob!r}")
    flat = np.asarray(samples, dtype=float).ravel()
    flat = flat[np.isfinite(flat)]
    if flat.size == 0:
        raise ValueError("No finite samples for credible interval.")
    tail = (1.0 - prob) / 2.0
    lo, hi = np.quantile(flat, [tail, 1.0 - tail])
    return float(lo), float(hi)


def interval_excludes_zero(lower: float, upper: float) -> bool:
    """True when both interval bounds are strictly on the same side of zero."""
    return bool((lower > 0 and upper > 0) or (lower < 0 and upper < 0))


def split_rhat(samples: np.ndarray) -> float:
    """Rank-normalized split R-hat for ``(chain, draw)`` samples.

    Returns NaN for a single chain with too few draws to split.
    """
    arr = np.atleast_2d(np.asarray(samples, dtype=float))
    if arr.shape[1] < 4:
        return math.nan
    return float(az.rhat(arr))


def bulk_ess(samples: np.ndarray) -> float:
    """Bulk effective sample size for ``(chain, draw)`` samples."""
    arr = np.atleast_2d(np.asarray(samples, dtype=float))
    if arr.shape[1] < 4:
        return math.nan
    return float(az.ess(arr, method="bulk"))


def rhat_converged(rhat: float, tolerance: float = 0.05) -> bool:
    """True when ``|rhat - 1| <= tolerance``. NaN never counts as converged."""
    return bool(np.isfinite(rhat) and abs(float(rhat) - 1.0) <= tolerance)


def bayesian_p_value(simulated: np.ndarray, observed: float) -> float:
    """Share of simulated statistics at least as large as the observed one."""
    sim = np.asarray(simulated, dtype=float)
    sim = sim[np.isfinite(sim)]
    if sim.size == 0:
        return math.nan
    return float(np.mean(sim >= observed))


def relative_difference(value: float, reference: float) -> float:
    """``(value - reference) / |reference|``; NaN when the reference is zero."""
    if not np.isfinite(reference) or reference == 0:
        return math.nan
    return float((value - reference) / abs(reference))


def predictive_statistics(y_obs: np.ndarray, y_rep: np.ndarray) -> Dict[str, float]:
    """Compare observed data with simulated datasets by mean and variance.

    Args:
        y_obs (numpy.ndarray): Observed response of length ``n``.
        y_rep (numpy.ndarray): Simulated responses shaped ``(samples, n)``.

    Returns:
        dict[str, float]: Observed and average simulated mean and variance
        (``ddof=1``), their relative differences, and Bayesian p-values for
        both statistics.

    Raises:
        ValueError: If ``y_rep`` columns do not match ``y_obs``.

    Note:
        Bayesian p-values near 0 or 1 flag a statistic the model fails to
        reproduce; values near 0.5 indicate agreement.
    """
    obs = np.asarray(y_obs, dtype=float).ravel()
    rep = np.atleast_2d(np.asarray(y_rep, dtype=float))
    if rep.shape[1] != obs.size:
        raise ValueError(
            f"Simulated data has {rep.shape[1]} observations, expected {obs.size}."
        )

    obs_mean = float(np.mean(obs))
    obs_var = float(np.var(obs, ddof=1))
    rep_means = rep.mean(axis=1)
    rep_vars = rep.var(axis=1, ddof=1)
    sim_mean = float(np.mean(rep_means))
    sim_var = float(np.mean(rep_vars))

    return {
        "observed_mean": obs_mean,
        "simulated_mean": sim_mean,
        "mean_relative_difference": relative_difference(sim_mean, obs_mean),
        "mean_p_value": bayesian_p_value(rep_means, obs_mean),
        "observed_variance": obs_var,
        "simulated_variance": sim_var,
        "variance_relative_difference": relative_difference(sim_var, obs_var),
        "variance_p_value": bayesian_p_value(rep_vars, obs_var),
        "n_simulations": int(rep.shape[0]),
    }
