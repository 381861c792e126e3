import numpy as np
import pytest

from bayeslm.stats.regression import ols_regression, ols_table


def test_ols_recovers_exact_coefficients():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(50, 2))
    y = 1.5 + 2.0 * X[:, 0] - 0.5 * X[:, 1]
    fit = ols_regression(X, y)
    assert np.allclose(fit["coef"], [1.5, 2.0, -0.5])
    assert fit["r2"] == pytest.approx(1.0)
    assert fit["dof"] == 47


def test_ols_intervals_cover_truth_with_noise():
    rng = np.random.default_rng(1)
    X = rng.normal(size=(200, 1))
    y = 0.3 + 1.2 * X[:, 0] + rng.normal(scale=0.5, size=200)
    fit = ols_regression(X[:, 0], y)
    lo = fit["coef"] - fit["ci_half"]
    hi = fit["coef"] + fit["ci_half"]
    assert lo[1] < 1.2 < hi[1]
    assert fit["sigma"] == pytest.approx(0.5, abs=0.1)
    assert fit["p"][1] < 1e-6


def test_ols_without_intercept():
    X = np.arange(1.0, 11.0)
    fit = ols_regression(X, 3.0 * X, intercept=False)
    assert fit["coef"].shape == (1,)
    assert fit["coef"][0] == pytest.approx(3.0)


def test_ols_insufficient_data_raises():
    with pytest.raises(ValueError, match="Insufficient"):
        ols_regression(np.array([[1.0, 2.0], [2.0, 1.0]]), np.array([1.0, 2.0]))


def test_ols_rank_deficient_raises():
    x = np.arange(10.0)
    with pytest.raises(ValueError, match="rank"):
        ols_regression(np.column_stack([x, 2 * x]), x + 1.0)


def test_ols_table_labels():
    X = np.column_stack([np.arange(10.0), np.arange(10.0) ** 2])
    y = 1.0 + X[:, 0] + 0.1 * X[:, 1] + np.sin(np.arange(10.0))
    table = ols_table(ols_regression(X, y), ["a", "b"])
    assert list(table["Parameter"]) == ["Intercept", "a", "b"]
    assert (table["CI lower"] < table["Estimate"]).all()
    with pytest.raises(ValueError, match="coefficient names"):
        ols_table(ols_regression(X, y), ["a"])
