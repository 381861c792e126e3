"""Parse ``response ~ predictors`` model formulas and build design matrices.

Only additive main effects are supported: each right-hand-side term is a
column name, ``.`` expands to every other numeric column, and ``- 1`` / ``+ 0``
drop the intercept.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

RESERVED_NAMES = ("Intercept", "sigma")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FormulaError(ValueError):
    """Raised when a model formula cannot be parsed."""


@dataclass(frozen=True)
class Formula:
    """Parsed additive regression formula."""

    response: str
    predictors: Tuple[str, ...]
    intercept: bool = True

    @property
    def columns(self) -> Tuple[str, ...]:
        return (self.response,) + self.predictors

    def __str__(self) -> str:
        rhs = " + ".join(self.predictors)
        if not self.intercept:
            rhs += " - 1"
        return f"{self.response} ~ {rhs}"


def _split_terms(rhs: str) -> list[tuple[str, str]]:
    # Leading sign is implicit "+".
    tokens = re.split(r"\s*([+-])\s*", rhs.strip())
    if tokens and tokens[0] == "":
        tokens = tokens[1:]
    else:
        tokens = ["+"] + tokens
    if len(tokens) % 2 != 0:
        raise FormulaError(f"Dangling operator in formula terms: {rhs!r}")
    return [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2)]


def parse_formula(text: str, data: pd.DataFrame | None = None) -> Formula:
    """Parse a formula string such as ``"petal_length ~ sepal_length + sepal_width"``.

    Args:
        text (str): Formula with exactly one ``~`` separating the response from
            ``+``-joined predictor terms.
        data (pandas.DataFrame, optional): Table used to expand ``.`` into
            every numeric column except the response. Required only when the
            formula uses ``.``.

    Returns:
        Formula: Parsed response, ordered unique predictors, and intercept
        flag.

    Raises:
        FormulaError: If the formula is malformed, uses reserved parameter
            names, repeats the response on the right-hand side, or leaves no
            predictors.
    """
    if not isinstance(text, str) or text.count("~") != 1:
        raise FormulaError(f"Formula must contain exactly one '~': {text!r}")

    lhs, rhs = (part.strip() for part in text.split("~"))
    if not lhs:
        raise FormulaError(f"Formula has no response: {text!r}")
    if not rhs:
        raise FormulaError(f"Formula has no predictors: {text!r}")
    if not _IDENTIFIER.match(lhs):
        raise FormulaError(f"Invalid response name {lhs!r}")

    intercept = True
    predictors: list[str] = []
    for sign, term in _split_terms(rhs):
        if term in ("0", "1"):
            if term == "0" or sign == "-":
                intercept = False
            continue
        if sign == "-":
            raise FormulaError(f"Removing term {term!r} is not supported")
        if term == ".":
            if data is None:
                raise FormulaError("Formula uses '.' but no data was supplied")
            numeric = data.select_dtypes(include="number").columns
            predictors.extend(str(c) for c in numeric if c != lhs)
            continue
        if not _IDENTIFIER.match(term):
            raise FormulaError(f"Invalid predictor term {term!r} in {text!r}")
        predictors.append(term)

    predictors = list(dict.fromkeys(predictors))
    if lhs in predictors:
        raise FormulaError(f"Response {lhs!r} also appears as a predictor")
    reserved = [name for name in (lhs, *predictors) if name in RESERVED_NAMES]
    if reserved:
        raise FormulaError(
            f"Names {reserved} are reserved for model parameters {RESERVED_NAMES}"
        )
    if not predictors:
        raise FormulaError(f"Formula has no predictors: {text!r}")

    return Formula(response=lhs, predictors=tuple(predictors), intercept=intercept)


def design_matrix(
    data: pd.DataFrame, formula: Formula
) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(X, y)`` float arrays for the complete rows of ``data``.

    Raises:
        KeyError: If a formula column is missing from ``data``.
        ValueError: If a formula column is not numeric or no complete rows
            remain.
    """
    missing = [c for c in formula.columns if c not in data.columns]
    if missing:
        raise KeyError(f"Formula columns missing from data: {missing}")

    frame = data.loc[:, list(formula.columns)]
    non_numeric = [
        c for c in formula.columns if not pd.api.types.is_numeric_dtype(frame[c])
    ]
    if non_numeric:
        raise ValueError(f"Formula columns must be numeric, got {non_numeric}")

    n_rows = len(frame)
    frame = frame.dropna()
    if len(frame) < n_rows:
        logger.warning(
            "Dropped %d of %d rows with missing values in %s",
            n_rows - len(frame),
            n_rows,
            list(formula.columns),
        )
    if frame.empty:
        raise ValueError("No complete rows available for the formula columns.")

    X = frame[list(formula.predictors)].to_numpy(dtype=float)
    y = frame[formula.response].to_numpy(dtype=float)
    return X, y
