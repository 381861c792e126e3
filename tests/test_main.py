"""Smoke tests for the command-line entrypoint."""

import logging
import os

import pytest

from main import build_arg_parser, config_from_args, main


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    saved = list(logging.root.handlers)
    yield
    for handler in logging.root.handlers:
        if handler not in saved:
            handler.close()
    logging.root.handlers[:] = saved


def test_arg_parser_defaults():
    config = config_from_args(build_arg_parser().parse_args([]))
    assert config.formula == "petal_length ~ sepal_length + sepal_width"
    assert config.prior.describe() == "normal(0, 10)"
    assert (config.chains, config.iterations, config.seed) == (4, 500, 123)
    assert config.make_plots is True


def test_main_writes_report(tmp_path):
    outdir = str(tmp_path / "out")
    code = main(
        [
            "--chains", "2",
            "--iterations", "200",
            "--cores", "1",
            "--outdir", outdir,
            "--no-plots",
            "--log-file", "",
        ]
    )
    assert code == 0
    for name in (
        "posterior_summary.csv",
        "ols_reference.csv",
        "posterior_predictive_check.csv",
        "species_summary.csv",
        "report.md",
    ):
        assert os.path.exists(os.path.join(outdir, name))
    with open(os.path.join(outdir, "report.md"), encoding="utf-8") as handle:
        report = handle.read()
    assert report.startswith("---\n")
    assert "## Posterior predictive check" in report
    assert not os.path.exists(os.path.join(outdir, "figures"))


def test_main_rejects_bad_prior(tmp_path, capsys):
    code = main(["--prior", "laplace(0, 1)", "--outdir", str(tmp_path), "--log-file", ""])
    assert code == 1
    assert "Walkthrough aborted" in capsys.readouterr().out


def test_main_rejects_unknown_column(tmp_path):
    code = main(
        ["--formula", "petal_length ~ petal_area", "--outdir", str(tmp_path), "--log-file", ""]
    )
    assert code == 1
