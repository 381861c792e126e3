"""
Loads the iris measurements and builds descriptive tables.
"""

# The iris table ships with scikit-learn, so loading never touches the network.
# Columns are renamed to snake_case identifiers so they can be used directly in
# model formulas.

import logging

import numpy as np
import pandas as pd
from sklearn.datasets import load_iris

from .schema import IRIS

logger = logging.getLogger(__name__)

EXPECTED_ROWS = 150
EXPECTED_PER_SPECIES = 50

_SKLEARN_RENAME = {
    "sepal length (cm)": IRIS.sepal_length,
    "sepal width (cm)": IRIS.sepal_width,
    "petal length (cm)": IRIS.petal_length,
    "petal width (cm)": IRIS.petal_width,
}


def load_iris_data():
    """Load Fisher's iris measurements as a tidy DataFrame.

    Returns:
        pd.DataFrame: 150 rows with float columns ``sepal_length``,
        ``sepal_width``, ``petal_length``, ``petal_width`` (cm) and a
        categorical ``species`` column.

    Raises:
        ValueError: If the bundled table does not have the expected shape.
    """
    bunch = load_iris(as_frame=True)
    frame = bunch.frame.rename(columns=_SKLEARN_RENAME)
    species = pd.Categorical.from_codes(
        frame.pop("target").to_numpy(), categories=list(bunch.target_names)
    )
    frame[IRIS.species] = species
    frame = frame[list(IRIS.features) + [IRIS.species]]

    validate_iris_data(frame)
    logger.info(
        "Loaded iris data: %d rows, species %s",
        len(frame),
        list(frame[IRIS.species].cat.categories),
    )
    return frame


def validate_iris_data(df):
    """Check the iris table has 150 rows, 50 per species, and no missing values."""

    missing = [c for c in list(IRIS.features) + [IRIS.species] if c not in df.columns]
    if missing:
        raise ValueError(f"Iris data is missing columns: {missing}")
    if len(df) != EXPECTED_ROWS:
        raise ValueError(f"Expected {EXPECTED_ROWS} iris rows, got {len(df)}")
    counts = df[IRIS.species].value_counts()
    if not (counts == EXPECTED_PER_SPECIES).all():
        raise ValueError(f"Expected {EXPECTED_PER_SPECIES} rows per species, got {counts.to_dict()}")
    if df[list(IRIS.features)].isna().any().any():
        raise ValueError("Iris feature columns contain missing values.")


def describe_by_species(df):
    """Per-species mean and standard deviation of every numeric feature.

    Returns:
        pd.DataFrame: One row per (species, feature) with columns
        ``Species``, ``Feature``, ``Mean``, ``SD``, ``n``.
    """

    records = []
    numeric = df.select_dtypes(include="number").columns
    for species, group in df.groupby(IRIS.species, observed=True, sort=True):
        for feature in numeric:
            values = group[feature].to_numpy(dtype=float)
            values = values[np.isfinite(values)]
            records.append(
                {
                    "Species": str(species),
                    "Feature": feature,
                    "Mean": float(np.mean(values)) if len(values) else np.nan,
                    "SD": float(np.std(values, ddof=1)) if len(values) > 1 else np.nan,
                    "n": int(len(values)),
                }
            )
    return pd.DataFrame.from_records(records)
