"""Run configuration for the Bayesian regression walkthrough."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date

from .formula import parse_formula
from .priors import DEFAULT_PRIOR, PriorSpec

DEFAULT_FORMULA = "petal_length ~ sepal_length + sepal_width"
DEFAULT_CHAINS = 4
DEFAULT_ITERATIONS = 500
DEFAULT_SEED = 123
DEFAULT_OUTPUT_DIR = "output"


@dataclass(frozen=True)
class AnalysisConfig:
    """Every tunable of one analysis run.

    Attributes:
        formula: Model formula, ``response ~ predictor + ...``.
        prior: Prior for the regression coefficients.
        chains: Number of independent MCMC chains.
        iterations: Iterations per chain, warm-up included. The first half is
            used for tuning and discarded.
        seed: Random seed passed to the sampler and predictive draws.
        cores: Worker processes for the chains; ``None`` lets PyMC decide.
        target_accept: NUTS target acceptance rate.
        ci_prob: Probability mass of the reported credible interval.
        rhat_tolerance: Largest accepted ``|R-hat - 1|``.
        ppc_draws: Simulated datasets drawn in the predictive-check figure.
        output_dir: Directory for figures, tables, and the report.
        make_plots: Whether to render figures.
        title, author, report_date, categories, image: Report front matter.
    """

    formula: str = DEFAULT_FORMULA
    prior: PriorSpec = DEFAULT_PRIOR
    chains: int = DEFAULT_CHAINS
    iterations: int = DEFAULT_ITERATIONS
    seed: int = DEFAULT_SEED
    cores: int | None = None
    target_accept: float = 0.9
    ci_prob: float = 0.95
    rhat_tolerance: float = 0.05
    ppc_draws: int = 50
    output_dir: str = DEFAULT_OUTPUT_DIR
    make_plots: bool = True
    title: str = "Bayesian Linear Regression on the Iris Data"
    author: str = "bayeslm"
    report_date: str = field(default_factory=lambda: date.today().isoformat())
    categories: tuple[str, ...] = ("bayesian", "regression", "statistics")
    image: str = "figures/posterior_distributions.png"

    def __post_init__(self):
        for name in ("chains", "iterations", "ppc_draws"):
            value = getattr(self, name)
            if int(value) != value or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.iterations < 2:
            raise ValueError("iterations must be >= 2 to leave draws after warm-up")
        if self.cores is not None and self.cores <= 0:
            raise ValueError(f"cores must be positive or None, got {self.cores!r}")
        if not 0.0 < self.ci_prob < 1.0:
            raise ValueError(f"ci_prob must lie in (0, 1), got {self.ci_prob!r}")
        if not 0.0 < self.target_accept < 1.0:
            raise ValueError(
                f"target_accept must lie in (0, 1), got {self.target_accept!r}"
            )
        if self.rhat_tolerance <= 0:
            raise ValueError(
                f"rhat_tolerance must be > 0, got {self.rhat_tolerance!r}"
            )
        # Fails fast on malformed formulas; '.' is resolved later against data.
        if "." not in self.formula.split("~")[-1]:
            parse_formula(self.formula)

    @property
    def warmup(self) -> int:
        return self.iterations // 2

    @property
    def draws(self) -> int:
        return self.iterations - self.warmup

    def replace(self, **changes) -> "AnalysisConfig":
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = AnalysisConfig()
