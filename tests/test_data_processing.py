import numpy as np
import pandas as pd
import pytest

from bayeslm.data_processing import describe_by_species, validate_iris_data


def test_iris_shape_and_columns(iris):
    assert iris.shape == (150, 5)
    assert list(iris.columns) == [
        "sepal_length",
        "sepal_width",
        "petal_length",
        "petal_width",
        "species",
    ]
    assert iris["species"].value_counts().to_dict() == {
        "setosa": 50,
        "versicolor": 50,
        "virginica": 50,
    }
    assert not iris.isna().any().any()


def test_iris_feature_ranges_are_plausible(iris):
    # Fisher's measurements, in cm.
    assert iris["sepal_length"].between(4.0, 8.0).all()
    assert iris["petal_width"].between(0.1, 2.5).all()
    assert np.isclose(iris["petal_length"].mean(), 3.758, atol=0.01)


def test_validate_rejects_truncated_table(iris):
    with pytest.raises(ValueError, match="Expected 150"):
        validate_iris_data(iris.iloc[:100])


def test_describe_by_species(iris):
    table = describe_by_species(iris)
    assert list(table.columns) == ["Species", "Feature", "Mean", "SD", "n"]
    assert len(table) == 3 * 4
    assert (table["n"] == 50).all()

    setosa_petal = table[
        (table["Species"] == "setosa") & (table["Feature"] == "petal_length")
    ].iloc[0]
    assert np.isclose(setosa_petal["Mean"], 1.46, atol=0.02)


def test_describe_does_not_mutate_input(iris):
    before = iris.copy()
    describe_by_species(iris)
    pd.testing.assert_frame_equal(iris, before)
