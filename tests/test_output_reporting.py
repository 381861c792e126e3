"""Tests for the CSV and report export layer."""

import pandas as pd
import pytest

from bayeslm.output import save_outputs
from bayeslm.schema import SUMMARY


def _tables():
    summary = pd.DataFrame(
        {
            SUMMARY.parameter: ["Intercept", "x", "sigma"],
            SUMMARY.mean: [0.5, 1.7756, 0.64],
            SUMMARY.sd: [0.2, 0.064, 0.037],
            SUMMARY.ci_lower: [0.1, 1.65, 0.57],
            SUMMARY.ci_upper: [0.9, 1.90, 0.72],
            SUMMARY.rhat: [1.0, 1.0, 1.0],
            SUMMARY.ess_bulk: [800.0, 900.0, 700.0],
        }
    )
    ols = pd.DataFrame({"Parameter": ["x"], "Posterior mean": [1.7756], "OLS estimate": [1.77]})
    ppc = {"observed_mean": 3.758, "simulated_mean": 3.76, "n_simulations": 1000}
    species = pd.DataFrame({"Species": ["setosa"], "Feature": ["petal_length"], "Mean": [1.46]})
    return summary, ols, ppc, species


def test_save_outputs_writes_tables_and_report(tmp_path):
    summary, ols, ppc, species = _tables()
    paths = save_outputs(summary, ols, ppc, species, "---\ntitle: x\n---\n", str(tmp_path))

    assert set(paths) == {
        "posterior_summary",
        "ols_reference",
        "posterior_predictive_check",
        "species_summary",
        "report",
    }
    saved = pd.read_csv(paths["posterior_summary"])
    assert saved[SUMMARY.mean].tolist() == pytest.approx([0.5, 1.7756, 0.64])
    assert saved["Mean (reported)"].astype(str).tolist() == ["0.5", "1.78", "0.64"]

    ppc_saved = pd.read_csv(paths["posterior_predictive_check"])
    assert list(ppc_saved["Statistic"]) == list(ppc)
    assert (tmp_path / "report.md").read_text(encoding="utf-8").startswith("---")


def test_save_outputs_without_report(tmp_path):
    paths = save_outputs(*_tables(), output_dir=str(tmp_path / "nested"))
    assert "report" not in paths
    assert (tmp_path / "nested" / "species_summary.csv").exists()


def test_save_outputs_fails_when_uncertainty_missing(tmp_path):
    summary, ols, ppc, species = _tables()
    summary.loc[1, SUMMARY.sd] = float("nan")
    with pytest.raises(ValueError, match="Uncertainty metadata missing/invalid"):
        save_outputs(summary, ols, ppc, species, output_dir=str(tmp_path))
