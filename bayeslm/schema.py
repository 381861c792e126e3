"""Define standardized column names for data and result DataFrames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IrisColumns:
    """Column labels of the iris table after loading.

    Attributes:
        sepal_length: Sepal length in cm.
        sepal_width: Sepal width in cm.
        petal_length: Petal length in cm.
        petal_width: Petal width in cm.
        species: Categorical species label (``setosa``, ``versicolor``,
            ``virginica``).
    """

    sepal_length: str = "sepal_length"
    sepal_width: str = "sepal_width"
    petal_length: str = "petal_length"
    petal_width: str = "petal_width"
    species: str = "species"

    @property
    def features(self) -> tuple[str, ...]:
        return (
            self.sepal_length,
            self.sepal_width,
            self.petal_length,
            self.petal_width,
        )


@dataclass(frozen=True)
class SummaryColumns:
    """Container for standardized posterior summary column labels.

    These column names are used by every posterior summary table, so the
    reporting, plotting, and CSV export layers agree on one vocabulary.

    Attributes:
        parameter: Model parameter name (``Intercept``, predictor names,
            ``sigma``).
        mean: Posterior mean, in the unit of the parameter.
        sd: Posterior standard deviation. Used as the reporting uncertainty
            when formatting the mean.
        ci_lower: Lower bound of the equal-tailed credible interval.
        ci_upper: Upper bound of the equal-tailed credible interval.
        rhat: Rank-normalized split R-hat. Values close to 1.0 indicate the
            chains agree on the same distribution.
        ess_bulk: Bulk effective sample size across all chains.
    """

    parameter: str = "Parameter"
    mean: str = "Mean"
    sd: str = "SD"
    ci_lower: str = "CI lower"
    ci_upper: str = "CI upper"
    rhat: str = "R-hat"
    ess_bulk: str = "ESS (bulk)"

    @property
    def columns(self) -> tuple[str, ...]:
        return (
            self.parameter,
            self.mean,
            self.sd,
            self.ci_lower,
            self.ci_upper,
            self.rhat,
            self.ess_bulk,
        )


IRIS = IrisColumns()
SUMMARY = SummaryColumns()
