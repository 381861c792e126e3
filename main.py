#!/usr/bin/env python3
"""
Main script for running the Bayesian linear regression walkthrough.
"""

# Pipeline overview (README-style):
# 1) Load the iris measurements (150 rows, 3 species, 4 features).
# 2) Draw per-feature histograms and tabulate per-species statistics.
# 3) Declare the coefficient prior (normal(0, 10) by default) and summarize
#    what it implies on its own through a prior predictive simulation.
# 4) Fit the regression with PyMC NUTS: 4 chains, 500 iterations, seed 123.
# 5) Summarize the posterior (mean, credible interval, R-hat), compare with
#    least squares, run the posterior predictive check, and write figures,
#    tables, and a Markdown report with front matter.

import argparse
import logging
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bayeslm.analysis import (
    check_convergence,
    compare_with_ols,
    interpret_effects,
    ols_reference,
    posterior_predictive_check,
    print_summary,
    prior_predictive_summary,
    summarize_posterior,
)
from bayeslm.config import DEFAULT_CONFIG, AnalysisConfig
from bayeslm.data_processing import describe_by_species, load_iris_data
from bayeslm.model import fit_bayesian_regression
from bayeslm.output import save_outputs
from bayeslm.plotting import plot_all_posterior, plot_feature_histograms
from bayeslm.priors import parse_prior
from bayeslm.reporting import render_report

DEFAULT_LOG_FILE = "bayesian_regression.log"


def configure_logging(log_file=DEFAULT_LOG_FILE):
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w"))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def build_arg_parser():
    """Build command-line parser for the walkthrough."""
    parser = argparse.ArgumentParser(
        description="Bayesian linear regression walkthrough on the iris data."
    )
    parser.add_argument(
        "--formula",
        default=DEFAULT_CONFIG.formula,
        help=f"Model formula (default: '{DEFAULT_CONFIG.formula}').",
    )
    parser.add_argument(
        "--prior",
        default=DEFAULT_CONFIG.prior.describe(),
        help="Coefficient prior, e.g. 'normal(0, 10)', 'student_t(3, 0, 2.5)'.",
    )
    parser.add_argument("--chains", type=int, default=DEFAULT_CONFIG.chains)
    parser.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_CONFIG.iterations,
        help="Iterations per chain, warm-up included (first half is warm-up).",
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_CONFIG.seed)
    parser.add_argument(
        "--cores", type=int, default=None, help="Worker processes for the chains."
    )
    parser.add_argument(
        "--ci-prob",
        type=float,
        default=DEFAULT_CONFIG.ci_prob,
        help="Credible interval probability (default: 0.95).",
    )
    parser.add_argument(
        "--outdir",
        default=DEFAULT_CONFIG.output_dir,
        help=f"Output directory (default: {DEFAULT_CONFIG.output_dir}).",
    )
    parser.add_argument(
        "--no-plots", action="store_true", help="Skip figure rendering."
    )
    parser.add_argument(
        "--log-file",
        default=DEFAULT_LOG_FILE,
        help="Log file path; pass an empty string to log to stdout only.",
    )
    return parser


def config_from_args(args):
    return DEFAULT_CONFIG.replace(
        formula=args.formula,
        prior=parse_prior(args.prior),
        chains=args.chains,
        iterations=args.iterations,
        seed=args.seed,
        cores=args.cores,
        ci_prob=args.ci_prob,
        output_dir=args.outdir,
        make_plots=not args.no_plots,
    )


def run_walkthrough(config: AnalysisConfig):
    """Run every stage of the walkthrough and return the written artifact paths."""

    start_time = time.time()
    output_dir = config.output_dir
    os.makedirs(output_dir, exist_ok=True)
    logging.info("Output directory ensured: %s", output_dir)
    figures = {}

    step_start = time.time()
    iris = load_iris_data()
    species_table = describe_by_species(iris)
    logging.info("Data acquisition completed in %.2f seconds", time.time() - step_start)

    if config.make_plots:
        path = plot_feature_histograms(iris, output_dir)
        figures["feature_histograms"] = os.path.relpath(path, output_dir)
        logging.info("Feature histograms: %s", path)

    step_start = time.time()
    prior_pred = prior_predictive_summary(
        iris, config.formula, config.prior, seed=config.seed
    )
    logging.info(
        "Prior %s implies responses in [%.1f, %.1f] (95%%)",
        config.prior,
        prior_pred["prior_predictive_q025"],
        prior_pred["prior_predictive_q975"],
    )
    logging.info("Prior predictive completed in %.2f seconds", time.time() - step_start)

    step_start = time.time()
    fit = fit_bayesian_regression(
        iris,
        config.formula,
        config.prior,
        chains=config.chains,
        iterations=config.iterations,
        seed=config.seed,
        cores=config.cores,
        target_accept=config.target_accept,
    )
    logging.info("Model fitting completed in %.2f seconds", time.time() - step_start)

    step_start = time.time()
    summary = summarize_posterior(fit, ci_prob=config.ci_prob)
    print_summary(summary, fit.formula)
    failing = check_convergence(summary, tolerance=config.rhat_tolerance)
    ppc = posterior_predictive_check(fit)
    interpretation = interpret_effects(summary, fit.formula)
    for sentence in interpretation:
        logging.info(sentence)
    ols_comparison = compare_with_ols(
        summary, ols_reference(iris, fit.formula, ci_prob=config.ci_prob)
    )
    logging.info("Posterior analysis completed in %.2f seconds", time.time() - step_start)

    if config.make_plots:
        for path in plot_all_posterior(fit, summary, output_dir, n_draws=config.ppc_draws):
            key = os.path.splitext(os.path.basename(path))[0]
            figures[key] = os.path.relpath(path, output_dir)
            logging.info("  - Figure: %s", path)

    metadata = {
        "title": config.title,
        "author": config.author,
        "date": config.report_date,
        "categories": list(config.categories),
        "image": config.image,
    }
    report = render_report(
        metadata,
        formula=str(fit.formula),
        prior=config.prior.describe(),
        sampler={
            "chains": fit.chains,
            "iterations": fit.iterations,
            "warmup": fit.warmup,
            "seed": fit.seed,
        },
        species_table=species_table,
        summary=summary,
        ols_comparison=ols_comparison,
        ppc=ppc,
        interpretation=interpretation,
        failing_rhat=failing,
        figures=figures,
        prior_predictive=prior_pred,
    )
    paths = save_outputs(
        summary, ols_comparison, ppc, species_table, report, output_dir=output_dir
    )

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Analysis pipeline completed successfully")
    return paths


def main(argv=None):
    """CLI entrypoint; returns 0 on success and 1 on configuration or data errors."""
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_file)
    logging.info("Initializing Bayesian regression walkthrough")

    try:
        config = config_from_args(args)
        run_walkthrough(config)
    except (KeyError, ValueError) as exc:
        logging.error("Walkthrough aborted: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
