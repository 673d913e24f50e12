"""Pytest fixtures for config module tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def sample_yaml_file(tmp_path: Path) -> Path:
    """Create a sample YAML config file for testing.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory path provided by pytest.

    Returns
    -------
    Path
        Path to the created YAML config file.
    """
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        """
profile: test
search:
  sets_n: 3
  criteria_scale: [age, score]
  criteria_nominal: [gender]
  tolerance_nominal: [1]
  equalize: [mean, sd]
persistence:
  write_file: true
  path: out/best.csv
logging:
  level: DEBUG
"""
    )
    return config_file


@pytest.fixture
def malformed_yaml_file(tmp_path: Path) -> Path:
    """Create a malformed YAML file for testing.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory path provided by pytest.

    Returns
    -------
    Path
        Path to the malformed YAML file.
    """
    config_file = tmp_path / "malformed.yaml"
    config_file.write_text("profile: test\n  search:\n    sets_n: [not valid")
    return config_file
