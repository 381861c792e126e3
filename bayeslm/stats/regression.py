"""Provide ordinary least-squares fits used as a classical reference.

The Bayesian estimates are reported beside these OLS estimates: with a weak
prior the posterior means should land close to the least-squares
coefficients, which is a useful sanity check on the sampler output.
"""

from __future__ import annotations

import math
from typing import Dict, Sequence

import numpy as np
import pandas as pd
from scipy.stats import t as student_t


def ols_regression(
    X: np.ndarray,
    y: np.ndarray,
    intercept: bool = True,
    ci_prob: float = 0.95,
) -> Dict[str, object]:
    """Fit a multiple linear regression by ordinary least squares.

    Args:
        X (numpy.ndarray): Predictor matrix of shape ``(n, k)``.
        y (numpy.ndarray): Response vector of length ``n``.
        intercept (bool, optional): Prepend a column of ones. Defaults to
            ``True``.
        ci_prob (float, optional): Confidence level of the reported
            intervals. Defaults to ``0.95``.

    Returns:
        dict[str, object]: ``coef``, ``se``, ``ci_half`` (interval
        half-widths), ``t`` and ``p`` arrays ordered as the design columns
        (intercept first when present), plus scalars ``r2``, ``sigma``
        (residual standard error), ``n``, ``dof`` and ``mse``.

    Raises:
        ValueError: If there are fewer finite rows than coefficients plus one,
            the design is rank deficient, or the response has no variance.

    Note:
        Standard errors describe sampling scatter under homoscedastic
        Gaussian residuals only.

    References:
        Ordinary least squares via the normal equations,
        ``Cov(beta) = s^2 (X'X)^-1``.
    """
    X_arr = np.atleast_2d(np.asarray(X, dtype=float))
    if X_arr.shape[0] == 1 and np.ndim(X) == 1:
        X_arr = X_arr.T
    y_arr = np.asarray(y, dtype=float)
    mask = np.all(np.isfinite(X_arr), axis=1) & np.isfinite(y_arr)
    X_arr = X_arr[mask]
    y_arr = y_arr[mask]

    if intercept:
        X_arr = np.column_stack([np.ones(len(X_arr)), X_arr])
    n, k = X_arr.shape
    dof = n - k
    if dof < 1:
        raise ValueError("Insufficient valid data for regression.")
    if np.linalg.matrix_rank(X_arr) < k:
        raise ValueError("Design matrix is rank deficient.")

    coef, _, _, _ = np.linalg.lstsq(X_arr, y_arr, rcond=None)
    resid = y_arr - X_arr @ coef
    sse = float(np.sum(resid**2))
    sst = float(np.sum((y_arr - y_arr.mean()) ** 2))
    if sst <= 0:
        raise ValueError("Insufficient variance for regression.")
    r2 = 1.0 - sse / sst

    mse = sse / dof
    cov = mse * np.linalg.inv(X_arr.T @ X_arr)
    se = np.sqrt(np.diag(cov))
    t_crit = float(student_t.ppf(0.5 + ci_prob / 2.0, dof))
    with np.errstate(divide="ignore"):
        t_stat = np.where(se > 0, coef / se, np.inf)
    p = 2.0 * student_t.sf(np.abs(t_stat), dof)

    return {
        "coef": coef,
        "se": se,
        "ci_half": t_crit * se,
        "t": t_stat,
        "p": p,
        "r2": float(r2),
        "sigma": math.sqrt(mse),
        "n": int(n),
        "dof": int(dof),
        "mse": float(mse),
    }


def ols_table(
    fit: Dict[str, object], names: Sequence[str], intercept: bool = True
) -> pd.DataFrame:
    """Tabulate an ``ols_regression`` result with one row per coefficient."""
    labels = (["Intercept"] if intercept else []) + list(names)
    coef = np.asarray(fit["coef"], dtype=float)
    half = np.asarray(fit["ci_half"], dtype=float)
    if len(labels) != len(coef):
        raise ValueError(
            f"Expected {len(coef)} coefficient names, got {len(labels)}: {labels}"
        )
    return pd.DataFrame(
        {
            "Parameter": labels,
            "Estimate": coef,
            "SE": np.asarray(fit["se"], dtype=float),
            "CI lower": coef - half,
            "CI upper": coef + half,
            "p-value": np.asarray(fit["p"], dtype=float),
        }
    )
