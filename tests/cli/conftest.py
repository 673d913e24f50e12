"""Test fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pandas as pd
import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide Click CLI test runner.

    Returns
    -------
    CliRunner
        Click test runner.
    """
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Remove handlers installed by commands under test."""
    yield
    logger = logging.getLogger("mindiff")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def pupils_csv(tmp_path: Path, pupils: pd.DataFrame) -> Path:
    """Write the pupils table as a comma separated file.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.
    pupils : pd.DataFrame
        Pupils table.

    Returns
    -------
    Path
        Path to the CSV file.
    """
    path = tmp_path / "pupils.csv"
    pupils.to_csv(path, index=False)
    return path


@pytest.fixture
def scores_csv(tmp_path: Path, four_items: pd.DataFrame) -> Path:
    """Write four scored items as a semicolon separated file.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.
    four_items : pd.DataFrame
        Items with scores 10, 10, 20, 20.

    Returns
    -------
    Path
        Path to the CSV file.
    """
    path = tmp_path / "scores.csv"
    four_items.to_csv(path, sep=";", index=False)
    return path


@pytest.fixture
def mock_config_file(tmp_path: Path) -> Path:
    """Create a mindiff.yaml config file.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory.

    Returns
    -------
    Path
        Path to the config file.
    """
    config_file = tmp_path / "mindiff.yaml"
    config_file.write_text(
        """
profile: test
search:
  sets_n: 3
  criteria_scale: [score]
  repetitions: 25
  random_seed: 3
logging:
  level: CRITICAL
  console: false
"""
    )
    return config_file
