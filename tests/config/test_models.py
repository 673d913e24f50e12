"""Tests for configuration models."""

from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
import pytest
import yaml
from pydantic import ValidationError

from mindiff.config import MinDiffConfig, PersistenceConfig, SearchConfig


class TestSearchConfig:
    """Tests for SearchConfig validation."""

    def test_defaults(self) -> None:
        """Test default search configuration."""
        config = SearchConfig()
        assert config.sets_n == 2
        assert config.criteria_scale == []
        assert config.criteria_nominal == []
        assert all(math.isinf(t) for t in config.tolerance_nominal)
        assert config.equalize == ["mean"]
        assert config.repetitions == 1
        assert config.mode == "random"
        assert config.group_column == "new_set"

    def test_mode_follows_exact(self) -> None:
        """Test the search mode is derived from the exact flag."""
        assert SearchConfig(exact=True).mode == "exact"

    @pytest.mark.parametrize(
        "fields",
        [
            {"sets_n": 1},
            {"repetitions": 0},
            {"max_attempts": 0},
            {"time_limit": 0},
            {"n_workers": 0},
            {"batch_size": 0},
            {"group_column": "  "},
            {"equalize": []},
            {"tolerance_nominal": []},
        ],
    )
    def test_invalid_values(self, fields: dict[str, object]) -> None:
        """Test out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            SearchConfig(**fields)

    def test_too_many_nominal_criteria(self) -> None:
        """Test at most two nominal criteria are accepted."""
        with pytest.raises(ValidationError, match="only two nominal criteria"):
            SearchConfig(criteria_nominal=["a", "b", "c"])

    def test_negative_tolerance(self) -> None:
        """Test negative tolerances are rejected."""
        with pytest.raises(ValidationError, match=">= 0"):
            SearchConfig(tolerance_nominal=[-1])

    def test_nan_tolerance(self) -> None:
        """Test NaN tolerances are rejected."""
        with pytest.raises(ValidationError, match=">= 0"):
            SearchConfig(tolerance_nominal=[float("nan")])

    def test_two_nominal_criteria_need_three_tolerances(self) -> None:
        """Test the joint tolerance is required for two nominal criteria."""
        with pytest.raises(ValidationError, match="three tolerance_nominal"):
            SearchConfig(criteria_nominal=["a", "b"], tolerance_nominal=[1, 1])
        config = SearchConfig(criteria_nominal=["a", "b"], tolerance_nominal=[1, 1, 2])
        assert config.tolerance_nominal == [1.0, 1.0, 2.0]

    def test_callable_equalizer(self) -> None:
        """Test callables are accepted next to equalizer names."""
        config = SearchConfig(equalize=["mean", np.median])
        assert config.equalize[1] is np.median

    def test_unknown_equalizer(self) -> None:
        """Test unknown equalizer names are rejected."""
        with pytest.raises(ValidationError, match="Unknown equalizer 'mode'"):
            SearchConfig(equalize=["mode"])

    def test_assignment_is_validated(self) -> None:
        """Test changing a field re-runs validation."""
        config = SearchConfig()
        with pytest.raises(ValidationError):
            config.sets_n = 1

    def test_group_column_is_stripped(self) -> None:
        """Test surrounding whitespace is removed from the column name."""
        assert SearchConfig(group_column=" set ").group_column == "set"


class TestPersistenceConfig:
    """Tests for PersistenceConfig."""

    def test_defaults(self) -> None:
        """Test snapshot defaults."""
        config = PersistenceConfig()
        assert config.write_file is False
        assert config.path == Path("newSet.csv")
        assert config.sep == ";"
        assert config.decimal == ","

    def test_empty_separator(self) -> None:
        """Test separators must be non-empty."""
        with pytest.raises(ValidationError):
            PersistenceConfig(sep="")

    @pytest.mark.parametrize("field", ["sep", "decimal"])
    def test_multi_character_marks_rejected(self, field: str) -> None:
        """Test separator and decimal mark must be single characters."""
        with pytest.raises(ValidationError):
            PersistenceConfig(**{field: ";;"})


class TestMinDiffConfig:
    """Tests for the main configuration model."""

    def test_sections(self) -> None:
        """Test every section is present with defaults."""
        config = MinDiffConfig()
        assert config.profile == "default"
        assert isinstance(config.search, SearchConfig)
        assert isinstance(config.persistence, PersistenceConfig)
        assert config.logging.level == "INFO"

    def test_to_dict_is_plain(self) -> None:
        """Test to_dict converts paths and callables to strings."""
        config = MinDiffConfig(search=SearchConfig(equalize=["mean", np.median]))
        data = config.to_dict()
        assert data["persistence"]["path"] == "newSet.csv"
        assert data["search"]["equalize"] == ["mean", "median"]
        json.dumps(data)

    def test_to_yaml_round_trip(self) -> None:
        """Test the YAML dump can be loaded back into a config."""
        config = MinDiffConfig(
            search=SearchConfig(sets_n=4, criteria_scale=["age"], tolerance_nominal=[2])
        )
        loaded = MinDiffConfig(**yaml.safe_load(config.to_yaml()))
        assert loaded.search.sets_n == 4
        assert loaded.search.criteria_scale == ["age"]
        assert loaded.search.tolerance_nominal == [2.0]
