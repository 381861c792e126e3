"""Bayesian linear regression with PyMC.

The likelihood is linear-Gaussian::

    y_i ~ Normal(Intercept + x_i . beta, sigma)

with a user-supplied prior on each coefficient in ``beta``. Predictors are
centred before sampling, which removes most of the posterior correlation
between the intercept and the slopes; the intercept on the original predictor
scale is recovered as a deterministic quantity, so every reported coefficient
refers to the raw columns.

Sampling is delegated entirely to PyMC's NUTS sampler. The iteration count
follows the usual "total per chain" convention: the first half of each chain
is warm-up (step-size and mass-matrix tuning) and is discarded.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import arviz as az
import numpy as np
import pandas as pd
import pymc as pm

from .formula import Formula, design_matrix, parse_formula
from .priors import DEFAULT_PRIOR, PriorSpec

logger = logging.getLogger(__name__)

INTERCEPT = "Intercept"
SIGMA = "sigma"
_CENTRED_INTERCEPT = "Intercept_centred"


@dataclass
class FitResult:
    """Posterior samples and the settings that produced them.

    Attributes:
        idata: ArviZ ``InferenceData`` with ``posterior``, ``sample_stats``,
            ``observed_data`` and, when requested, ``posterior_predictive``.
        formula: Parsed model formula.
        prior: Coefficient prior.
        chains, iterations, warmup, seed: Sampler settings.
        n_obs: Number of complete rows used in the fit.
    """

    idata: az.InferenceData
    formula: Formula
    prior: PriorSpec
    chains: int
    iterations: int
    warmup: int
    seed: int
    n_obs: int

    @property
    def draws(self) -> int:
        return self.iterations - self.warmup

    @property
    def parameter_names(self) -> list[str]:
        names = list(self.formula.predictors) + [SIGMA]
        if self.formula.intercept:
            names = [INTERCEPT] + names
        return names

    def samples(self, name: str) -> np.ndarray:
        """Posterior draws of one parameter shaped ``(chain, draw)``."""
        if name not in self.idata.posterior:
            raise KeyError(f"Unknown parameter '{name}'. Known: {self.parameter_names}")
        return np.asarray(self.idata.posterior[name].values, dtype=float)

    def observed(self) -> np.ndarray:
        return np.asarray(
            self.idata.observed_data[self.formula.response].values, dtype=float
        )

    def posterior_predictive(self) -> np.ndarray:
        """Simulated responses shaped ``(chain * draw, observation)``."""
        if "posterior_predictive" not in self.idata.groups():
            raise ValueError(
                "Fit has no posterior predictive samples; refit with "
                "posterior_predictive=True."
            )
        values = np.asarray(
            self.idata.posterior_predictive[self.formula.response].values, dtype=float
        )
        return values.reshape(-1, values.shape[-1])


def _validate_counts(chains: int, iterations: int) -> None:
    if int(chains) != chains or chains <= 0:
        raise ValueError(f"chains must be a positive integer, got {chains!r}")
    if int(iterations) != iterations or iterations < 2:
        raise ValueError(f"iterations must be an integer >= 2, got {iterations!r}")


def build_model(
    X: np.ndarray,
    y: np.ndarray,
    formula: Formula,
    prior: PriorSpec = DEFAULT_PRIOR,
    intercept_prior: PriorSpec | None = None,
) -> pm.Model:
    """Construct the PyMC regression model without sampling it.

    Args:
        X (numpy.ndarray): Predictor matrix ``(n, k)`` ordered as
            ``formula.predictors``.
        y (numpy.ndarray): Response vector of length ``n``.
        formula (Formula): Parsed formula naming the variables.
        prior (PriorSpec): Prior applied independently to each coefficient.
        intercept_prior (PriorSpec, optional): Prior on the intercept at the
            centred predictor values. Defaults to the coefficient family
            centred on ``mean(y)`` with scale ``2.5 * sd(y)``.

    Returns:
        pymc.Model: Model with one free variable per coefficient, a
        deterministic ``Intercept`` on the raw scale, ``sigma``, and the
        observed response named after ``formula.response``.

    Note:
        ``sigma`` has an ``Exponential(1 / sd(y))`` prior, which keeps the
        residual scale weakly informed by the units of the response.
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    y_sd = float(np.std(y, ddof=1)) if len(y) > 1 else 1.0
    if not np.isfinite(y_sd) or y_sd <= 0:
        y_sd = 1.0

    x_means = X.mean(axis=0) if formula.intercept else np.zeros(X.shape[1])
    X_centred = X - x_means

    with pm.Model() as model:
        betas = [prior.to_distribution(name) for name in formula.predictors]
        mu = sum(beta * X_centred[:, j] for j, beta in enumerate(betas))

        if formula.intercept:
            if intercept_prior is None:
                intercept_prior = prior.with_location(float(np.mean(y)), 2.5 * y_sd)
            alpha = intercept_prior.to_distribution(_CENTRED_INTERCEPT)
            mu = mu + alpha
            pm.Deterministic(
                INTERCEPT,
                alpha - sum(beta * x_means[j] for j, beta in enumerate(betas)),
            )

        sigma = pm.Exponential(SIGMA, lam=1.0 / y_sd)
        pm.Normal(formula.response, mu=mu, sigma=sigma, observed=y)

    return model


def fit_bayesian_regression(
    data: pd.DataFrame,
    formula: str | Formula,
    prior: PriorSpec = DEFAULT_PRIOR,
    chains: int = 4,
    iterations: int = 500,
    seed: int = 123,
    *,
    cores: int | None = None,
    target_accept: float = 0.9,
    intercept_prior: PriorSpec | None = None,
    posterior_predictive: bool = True,
) -> FitResult:
    """Draw posterior samples for a linear regression with PyMC NUTS.

    Args:
        data (pandas.DataFrame): Observations; read only.
        formula (str | Formula): ``"response ~ predictor + ..."`` or a parsed
            formula.
        prior (PriorSpec, optional): Coefficient prior. Defaults to
            ``normal(0, 10)``.
        chains (int, optional): Independent chains. Defaults to ``4``.
        iterations (int, optional): Iterations per chain including warm-up.
            Defaults to ``500``.
        seed (int, optional): Random seed for sampling and predictive draws.
            Defaults to ``123``.
        cores (int, optional): Worker processes; ``None`` lets PyMC decide.
        target_accept (float, optional): NUTS target acceptance rate.
        intercept_prior (PriorSpec, optional): Override for the intercept
            prior, see ``build_model``.
        posterior_predictive (bool, optional): Also draw one simulated dataset
            per posterior draw. Defaults to ``True``.

    Returns:
        FitResult: Posterior samples plus the settings used.

    Raises:
        FormulaError: If the formula is malformed.
        KeyError: If formula columns are missing from ``data``.
        ValueError: If ``chains`` or ``iterations`` are invalid.

    Note:
        No convergence check is enforced here; see
        ``bayeslm.analysis.check_convergence``. Repeating a call with the same
        data, settings, and seed reproduces the same draws.
    """
    _validate_counts(chains, iterations)
    if not isinstance(formula, Formula):
        formula = parse_formula(formula, data)
    X, y = design_matrix(data, formula)

    warmup = int(iterations) // 2
    draws = int(iterations) - warmup
    logger.info(
        "Sampling %s with prior %s: %d chains x %d iterations (%d warm-up), seed %d",
        formula,
        prior,
        chains,
        iterations,
        warmup,
        seed,
    )

    model = build_model(X, y, formula, prior, intercept_prior)
    start = time.time()
    with model:
        idata = pm.sample(
            draws=draws,
            tune=warmup,
            chains=int(chains),
            cores=cores,
            random_seed=int(seed),
            target_accept=target_accept,
            progressbar=False,
            return_inferencedata=True,
        )
        if posterior_predictive:
            pm.sample_posterior_predictive(
                idata,
                random_seed=int(seed),
                extend_inferencedata=True,
                progressbar=False,
            )
    logger.info("Sampling completed in %.2f seconds", time.time() - start)

    divergences = _count_divergences(idata)
    if divergences:
        logger.warning("Sampler reported %d divergent transitions", divergences)

    return FitResult(
        idata=idata,
        formula=formula,
        prior=prior,
        chains=int(chains),
        iterations=int(iterations),
        warmup=warmup,
        seed=int(seed),
        n_obs=int(len(y)),
    )


def sample_prior_predictive(
    data: pd.DataFrame,
    formula: str | Formula,
    prior: PriorSpec = DEFAULT_PRIOR,
    draws: int = 500,
    seed: int = 123,
) -> np.ndarray:
    """Simulate responses from the prior alone, shaped ``(draws, n)``."""
    if int(draws) != draws or draws <= 0:
        raise ValueError(f"draws must be a positive integer, got {draws!r}")
    if not isinstance(formula, Formula):
        formula = parse_formula(formula, data)
    X, y = design_matrix(data, formula)
    with build_model(X, y, formula, prior):
        prior_idata = pm.sample_prior_predictive(int(draws), random_seed=int(seed))
    values = np.asarray(prior_idata.prior_predictive[formula.response].values, dtype=float)
    return values.reshape(-1, values.shape[-1])


def _count_divergences(idata: az.InferenceData) -> int:
    stats = getattr(idata, "sample_stats", None)
    if stats is None or "diverging" not in stats:
        return 0
    return int(np.asarray(stats["diverging"].values).sum())

