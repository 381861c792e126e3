import pandas as pd
import pytest

from bayeslm.reporting import (
    add_formatted_reporting_columns,
    format_summary_table,
    format_value_to_uncertainty_decimals,
    render_front_matter,
    render_report,
    uncertainty_decimal_places,
)
from bayeslm.schema import SUMMARY


@pytest.mark.parametrize(
    "uncertainty, expected",
    [(0.03, 2), (0.012, 3), (0.15, 2), (2.0, 0), (12.0, 0), (0.0049, 3)],
)
def test_uncertainty_decimal_places(uncertainty, expected):
    assert uncertainty_decimal_places(uncertainty) == expected


def test_format_value_matches_uncertainty():
    assert format_value_to_uncertainty_decimals(1.77563, 0.064) == "1.78"
    assert format_value_to_uncertainty_decimals(-0.3351, 0.12) == "-0.34"
    assert format_value_to_uncertainty_decimals(42.7, 3.0) == "43"


@pytest.mark.parametrize("bad", [0.0, -1.0, float("nan")])
def test_invalid_uncertainty_raises(bad):
    with pytest.raises(ValueError):
        uncertainty_decimal_places(bad)


def test_missing_uncertainty_rejected():
    df = pd.DataFrame({"Mean": [1.0, 2.0], "SD": [0.1, None]})
    with pytest.raises(ValueError, match="Uncertainty metadata missing/invalid"):
        add_formatted_reporting_columns(df, [("Mean", "SD")])
    with pytest.raises(KeyError, match="SE"):
        add_formatted_reporting_columns(df, [("Mean", "SE")])


def _summary():
    df = pd.DataFrame(
        {
            SUMMARY.parameter: ["Intercept", "x", "sigma"],
            SUMMARY.mean: [-2.5248, 1.7756, 0.6435],
            SUMMARY.sd: [0.56, 0.064, 0.037],
            SUMMARY.ci_lower: [-3.61, 1.652, 0.574],
            SUMMARY.ci_upper: [-1.41, 1.901, 0.721],
            SUMMARY.rhat: [1.001, 1.002, 1.000],
            SUMMARY.ess_bulk: [820.0, 900.0, 760.0],
        }
    )
    df.attrs["ci_prob"] = 0.95
    return df


def test_format_summary_table_keeps_numbers():
    summary = _summary()
    out = format_summary_table(summary)
    assert list(out["Mean (reported)"]) == ["-2.5", "1.78", "0.64"]
    assert list(out["CI lower (reported)"]) == ["-3.6", "1.65", "0.57"]
    assert out[SUMMARY.mean].equals(summary[SUMMARY.mean])
    assert "Mean (reported)" not in summary.columns


def test_front_matter():
    text = render_front_matter(
        {"title": 'A "quoted" title', "date": "2024-01-01", "categories": ["bayes", "R"]}
    )
    lines = text.splitlines()
    assert lines[0] == "---" and lines[-1] == "---"
    assert 'title: "A \\"quoted\\" title"' in lines
    assert lines[lines.index("categories:") + 1] == '  - "bayes"'


def _render(failing=(), figures=None, prior_predictive=None):
    species = pd.DataFrame(
        {"Species": ["setosa"], "Feature": ["petal_length"], "Mean": [1.462], "SD": [0.17], "n": [50]}
    )
    ols = pd.DataFrame(
        {
            "Parameter": ["x"],
            "Posterior mean": [1.7756],
            "Posterior SD": [0.064],
            "OLS estimate": [1.7756],
            "OLS SE": [0.064],
            "Difference": [0.0],
        }
    )
    ppc = {
        "simulated_mean": 3.76,
        "observed_mean": 3.758,
        "mean_p_value": 0.5,
        "simulated_variance": 3.1,
        "observed_variance": 3.116,
        "variance_p_value": 0.45,
    }
    return render_report(
        {"title": "Bayes", "author": "bayeslm", "date": "2024-01-01", "categories": ["bayes"]},
        formula="y ~ x",
        prior="normal(0, 10)",
        sampler={"chains": 4, "iterations": 500, "warmup": 250, "seed": 123},
        species_table=species,
        summary=_summary(),
        ols_comparison=ols,
        ppc=ppc,
        interpretation=["Each unit of x increases the expected y by 1.78."],
        failing_rhat=list(failing),
        figures=figures or {},
        prior_predictive=prior_predictive,
    )


def test_render_report_sections():
    text = _render(figures={"posterior_distributions": "figures/posterior_distributions.png"})
    assert text.startswith("---\n")
    assert text.endswith("\n")
    for heading in (
        "## Bayes' rule",
        "## Data",
        "## Prior and model",
        "## Fitting",
        "## Posterior",
        "## Posterior predictive check",
    ):
        assert heading in text
    assert "`normal(0, 10)`" in text
    assert "4 chains of 500 iterations (250 warm-up), seed 123" in text
    assert "| x | 1.78 | 0.06 | 1.65 | 1.90 | 1.002 | 900.000 |" in text
    assert "![Posterior distributions](figures/posterior_distributions.png)" in text
    assert "All R-hat values are close to 1.0" in text


def test_render_report_flags_convergence_and_prior_range():
    text = _render(
        failing=["x"],
        prior_predictive={
            "prior_predictive_q025": -40.0,
            "prior_predictive_q975": 48.0,
            "observed_min": 1.0,
            "observed_max": 6.9,
        },
    )
    assert "**Warning:** R-hat is outside tolerance for x" in text
    assert "[-40.0, 48.0]" in text
    assert "![" not in text
