import numpy as np
import pymc as pm
import pytest

from bayeslm.priors import DEFAULT_PRIOR, PriorSpec, cauchy, normal, parse_prior, student_t


def test_default_prior_is_normal_0_10():
    assert DEFAULT_PRIOR == PriorSpec("normal", 0.0, 10.0)
    assert DEFAULT_PRIOR.describe() == "normal(0, 10)"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("normal(0, 10)", normal(0, 10)),
        ("normal( -1.5 ,2 )", normal(-1.5, 2)),
        ("cauchy(0, 2.5)", cauchy(0, 2.5)),
        ("student_t(3, 0, 2.5)", student_t(3, 0, 2.5)),
    ],
)
def test_parse_prior(text, expected):
    assert parse_prior(text) == expected


def test_parse_prior_round_trips_description():
    spec = student_t(4, 1, 2)
    assert parse_prior(spec.describe()) == spec


@pytest.mark.parametrize(
    "text",
    ["normal(0)", "normal(0, 10, 1)", "laplace(0, 1)", "normal(a, 1)", "normal 0 10"],
)
def test_parse_prior_rejects_bad_text(text):
    with pytest.raises(ValueError):
        parse_prior(text)


def test_invalid_scale_and_family_raise():
    with pytest.raises(ValueError, match="scale"):
        normal(0, 0)
    with pytest.raises(ValueError, match="scale"):
        normal(0, float("inf"))
    with pytest.raises(ValueError, match="family"):
        PriorSpec("gamma", 0.0, 1.0)
    with pytest.raises(ValueError, match="df"):
        PriorSpec("student_t", 0.0, 1.0)


def test_with_location_keeps_family():
    moved = student_t(3, 0, 1).with_location(5.0, 2.0)
    assert moved == student_t(3, 5.0, 2.0)
    assert normal(0, 10).with_location(1.0).scale == 10.0


def test_to_distribution_draws_match_prior():
    with pm.Model() as model:
        rv = normal(2.0, 0.5).to_distribution("beta")
    assert "beta" in model.named_vars
    draws = pm.draw(rv, draws=4000, random_seed=1)
    assert abs(np.mean(draws) - 2.0) < 0.05
    assert abs(np.std(draws) - 0.5) < 0.05


@pytest.mark.parametrize("spec", [cauchy(0, 1), student_t(3, 0, 1)])
def test_heavy_tailed_priors_build(spec):
    with pm.Model() as model:
        spec.to_distribution("beta")
    assert "beta" in model.named_vars
