"""Pytest configuration for repository-relative imports and shared fits."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from bayeslm.analysis import summarize_posterior  # noqa: E402
from bayeslm.data_processing import load_iris_data  # noqa: E402
from bayeslm.model import fit_bayesian_regression  # noqa: E402
from bayeslm.priors import normal  # noqa: E402

DEFAULT_FORMULA = "petal_length ~ sepal_length + sepal_width"


@pytest.fixture(scope="session")
def iris():
    return load_iris_data()


@pytest.fixture(scope="session")
def default_fit(iris):
    """The walkthrough's reference fit: normal(0, 10), 4 chains, 500 iterations, seed 123."""
    return fit_bayesian_regression(
        iris,
        DEFAULT_FORMULA,
        normal(0, 10),
        chains=4,
        iterations=500,
        seed=123,
        cores=1,
    )


@pytest.fixture(scope="session")
def default_summary(default_fit):
    return summarize_posterior(default_fit, ci_prob=0.95)
