"""Root pytest configuration for mindiff package tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from mindiff.config import SearchConfig


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Get tests directory path.

    Returns
    -------
    Path
        Path to tests directory
    """
    return Path(__file__).parent


@pytest.fixture
def six_items() -> pd.DataFrame:
    """Six items with scale values 1 to 6.

    Returns
    -------
    pd.DataFrame
        Table with a single ``value`` column.
    """
    return pd.DataFrame({"id": list("abcdef"), "value": [1, 2, 3, 4, 5, 6]})


@pytest.fixture
def four_items() -> pd.DataFrame:
    """Four items, two valued 10 and two valued 20.

    Returns
    -------
    pd.DataFrame
        Table with a single ``score`` column.
    """
    return pd.DataFrame({"score": [10, 10, 20, 20]})


@pytest.fixture
def pupils() -> pd.DataFrame:
    """Twelve pupils with age, test score, gender and class.

    Returns
    -------
    pd.DataFrame
        Table with two scale and two nominal columns.
    """
    rng = np.random.default_rng(7)
    return pd.DataFrame(
        {
            "age": rng.normal(10, 1, size=12).round(1),
            "score": rng.integers(0, 100, size=12),
            "gender": ["f", "m"] * 6,
            "class": ["a", "a", "b", "b", "c", "c"] * 2,
        }
    )


@pytest.fixture
def scale_config() -> SearchConfig:
    """Random search on the ``value`` column of ``six_items``.

    Returns
    -------
    SearchConfig
        Two sets, 200 repetitions, fixed seed.
    """
    return SearchConfig(
        sets_n=2, criteria_scale=["value"], repetitions=200, random_seed=42
    )
