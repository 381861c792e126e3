"""
A Python package walking through Bayesian linear regression on the iris data.

Fits a linear regression of one iris measurement on others with PyMC, then
summarizes, diagnoses, and visualizes the posterior.

Modules:
    - data_processing: Loads the iris measurements and per-species summaries.
    - formula: Parses ``response ~ predictors`` formulas into design matrices.
    - priors: Coefficient prior specifications rendered into PyMC variables.
    - model: Builds and samples the PyMC regression model.
    - analysis: Posterior summaries, convergence and predictive checks.
    - plotting: Exploratory and posterior figures.
    - reporting / output: Formatted tables and the Markdown report.
"""

__version__ = "1.0.0"

from .analysis import (
    ConvergenceWarning,
    PredictiveCheckWarning,
    check_convergence,
    compare_with_ols,
    credible_interval_excludes_zero,
    interpret_effects,
    ols_reference,
    posterior_predictive_check,
    print_summary,
    prior_predictive_summary,
    summarize_posterior,
)
from .config import DEFAULT_CONFIG, AnalysisConfig
from .data_processing import describe_by_species, load_iris_data
from .formula import Formula, FormulaError, parse_formula
from .model import FitResult, fit_bayesian_regression
from .priors import PriorSpec, cauchy, normal, parse_prior, student_t

__all__ = [
    # Data
    "load_iris_data",
    "describe_by_species",
    # Model specification
    "Formula",
    "FormulaError",
    "parse_formula",
    "PriorSpec",
    "normal",
    "student_t",
    "cauchy",
    "parse_prior",
    "AnalysisConfig",
    "DEFAULT_CONFIG",
    # Fitting
    "FitResult",
    "fit_bayesian_regression",
    # Posterior analysis
    "summarize_posterior",
    "credible_interval_excludes_zero",
    "check_convergence",
    "posterior_predictive_check",
    "interpret_effects",
    "ols_reference",
    "compare_with_ols",
    "prior_predictive_summary",
    "print_summary",
    "ConvergenceWarning",
    "PredictiveCheckWarning",
]
