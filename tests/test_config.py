import pytest

from bayeslm.config import DEFAULT_CONFIG, AnalysisConfig
from bayeslm.formula import FormulaError
from bayeslm.priors import normal


def test_default_config_matches_walkthrough():
    cfg = DEFAULT_CONFIG
    assert cfg.formula == "petal_length ~ sepal_length + sepal_width"
    assert cfg.prior == normal(0, 10)
    assert (cfg.chains, cfg.iterations, cfg.seed) == (4, 500, 123)
    assert cfg.ci_prob == 0.95
    assert cfg.warmup == 250
    assert cfg.draws == 250


def test_odd_iterations_split():
    cfg = AnalysisConfig(iterations=501)
    assert cfg.warmup == 250
    assert cfg.draws == 251


def test_replace_returns_validated_copy():
    cfg = DEFAULT_CONFIG.replace(chains=2, seed=7)
    assert cfg.chains == 2 and cfg.seed == 7
    assert DEFAULT_CONFIG.chains == 4
    with pytest.raises(ValueError, match="chains"):
        DEFAULT_CONFIG.replace(chains=0)


@pytest.mark.parametrize(
    "changes",
    [
        {"iterations": 0},
        {"iterations": 1},
        {"ppc_draws": -1},
        {"ci_prob": 1.0},
        {"ci_prob": 0.0},
        {"target_accept": 1.5},
        {"cores": 0},
        {"rhat_tolerance": 0.0},
    ],
)
def test_invalid_settings_raise(changes):
    with pytest.raises(ValueError):
        AnalysisConfig(**changes)


def test_invalid_formula_fails_fast():
    with pytest.raises(FormulaError):
        AnalysisConfig(formula="petal_length sepal_length")
