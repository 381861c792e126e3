"""Prior distribution specifications for regression coefficients.

A ``PriorSpec`` is a plain description (family plus parameters) that can be
rendered into a PyMC random variable inside an active ``pm.Model`` context.
Keeping the description separate from the PyMC object lets the same prior be
validated, logged, parsed from the command line, and written into the report.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

import pymc as pm

FAMILIES = ("normal", "student_t", "cauchy")

_PRIOR_PATTERN = re.compile(r"^\s*([a-z_]+)\s*\((.*)\)\s*$")


@dataclass(frozen=True)
class PriorSpec:
    """Location-scale prior for regression coefficients.

    Attributes:
        family: One of ``normal``, ``student_t``, ``cauchy``.
        location: Centre of the distribution.
        scale: Spread of the distribution; must be finite and positive.
        df: Degrees of freedom, used only by ``student_t``.
    """

    family: str = "normal"
    location: float = 0.0
    scale: float = 10.0
    df: float | None = None

    def __post_init__(self):
        if self.family not in FAMILIES:
            raise ValueError(
                f"Unsupported prior family '{self.family}'. Expected one of {FAMILIES}."
            )
        if not math.isfinite(self.location):
            raise ValueError(f"Prior location must be finite, got {self.location!r}")
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"Prior scale must be finite and > 0, got {self.scale!r}")
        if self.family == "student_t":
            if self.df is None or not math.isfinite(self.df) or self.df <= 0:
                raise ValueError(
                    f"student_t prior needs finite df > 0, got {self.df!r}"
                )

    def with_location(self, location: float, scale: float | None = None) -> "PriorSpec":
        """Return the same family re-centred, optionally with a new scale."""
        return PriorSpec(
            family=self.family,
            location=float(location),
            scale=self.scale if scale is None else float(scale),
            df=self.df,
        )

    def to_distribution(self, name: str, **kwargs):
        """Create the PyMC random variable for this prior.

        Must be called inside a ``pm.Model`` context. Extra keyword arguments
        (``shape``, ``dims``) are passed through to PyMC.
        """
        if self.family == "normal":
            return pm.Normal(name, mu=self.location, sigma=self.scale, **kwargs)
        if self.family == "student_t":
            return pm.StudentT(
                name, nu=self.df, mu=self.location, sigma=self.scale, **kwargs
            )
        return pm.Cauchy(name, alpha=self.location, beta=self.scale, **kwargs)

    def describe(self) -> str:
        if self.family == "student_t":
            return f"student_t({self.df:g}, {self.location:g}, {self.scale:g})"
        return f"{self.family}({self.location:g}, {self.scale:g})"

    def __str__(self) -> str:
        return self.describe()


def normal(location: float = 0.0, scale: float = 10.0) -> PriorSpec:
    return PriorSpec("normal", float(location), float(scale))


def student_t(df: float, location: float = 0.0, scale: float = 2.5) -> PriorSpec:
    return PriorSpec("student_t", float(location), float(scale), df=float(df))


def cauchy(location: float = 0.0, scale: float = 2.5) -> PriorSpec:
    return PriorSpec("cauchy", float(location), float(scale))


def parse_prior(text: str) -> PriorSpec:
    """Parse the textual prior form, e.g. ``"normal(0, 10)"``.

    Args:
        text (str): ``normal(location, scale)``, ``cauchy(location, scale)``
            or ``student_t(df, location, scale)``.

    Returns:
        PriorSpec: Validated prior specification.

    Raises:
        ValueError: If the text does not match a supported family and arity,
            or a parameter is not a number.
    """
    match = _PRIOR_PATTERN.match(str(text))
    if not match:
        raise ValueError(f"Cannot parse prior {text!r}; expected e.g. 'normal(0, 10)'")
    family, raw_args = match.groups()
    try:
        args = [float(a) for a in raw_args.split(",") if a.strip()]
    except ValueError as exc:
        raise ValueError(f"Prior parameters must be numbers: {text!r}") from exc

    expected = {"normal": 2, "cauchy": 2, "student_t": 3}
    if family not in expected:
        raise ValueError(
            f"Unsupported prior family '{family}'. Expected one of {FAMILIES}."
        )
    if len(args) != expected[family]:
        raise ValueError(
            f"{family} prior takes {expected[family]} parameters, got {len(args)}"
        )

    if family == "normal":
        return normal(*args)
    if family == "cauchy":
        return cauchy(*args)
    return student_t(*args)


DEFAULT_PRIOR = normal(0.0, 10.0)
