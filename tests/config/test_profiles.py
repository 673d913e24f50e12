"""Tests for configuration profiles."""

from __future__ import annotations

import pytest

from mindiff.config.config import MinDiffConfig
from mindiff.config.profiles import (
    DEV_CONFIG,
    PROFILES,
    TEST_CONFIG,
    get_profile,
    list_profiles,
)


class TestDevConfig:
    """Tests for DEV_CONFIG profile."""

    def test_dev_config_is_valid(self) -> None:
        """Test DEV_CONFIG is a valid MinDiffConfig."""
        assert isinstance(DEV_CONFIG, MinDiffConfig)
        assert DEV_CONFIG.profile == "dev"

    def test_dev_has_debug_logging(self) -> None:
        """Test DEV_CONFIG has DEBUG logging level."""
        assert DEV_CONFIG.logging.level == "DEBUG"
        assert DEV_CONFIG.logging.console is True


class TestTestConfig:
    """Tests for TEST_CONFIG profile."""

    def test_test_config_is_reproducible(self) -> None:
        """Test TEST_CONFIG fixes the random seed."""
        assert TEST_CONFIG.profile == "test"
        assert TEST_CONFIG.search.random_seed == 42

    def test_test_config_bounds_rejections(self) -> None:
        """Test TEST_CONFIG cannot loop forever on infeasible tolerances."""
        assert TEST_CONFIG.search.max_attempts == 1000

    def test_test_config_is_quiet(self) -> None:
        """Test TEST_CONFIG disables console logging."""
        assert TEST_CONFIG.logging.level == "CRITICAL"
        assert TEST_CONFIG.logging.console is False


class TestProfileRegistry:
    """Tests for profile lookup."""

    def test_registry_contents(self) -> None:
        """Test all profiles are registered."""
        assert set(PROFILES) == {"default", "dev", "test"}
        assert list_profiles() == ["default", "dev", "test"]

    def test_default_profile(self) -> None:
        """Test the default profile uses model defaults."""
        config = get_profile("default")
        assert config.search.sets_n == 2
        assert config.search.equalize == ["mean"]
        assert config.search.max_attempts is None

    def test_get_profile_returns_copy(self) -> None:
        """Test modifying a returned profile leaves the registry intact."""
        config = get_profile("test")
        config.search.sets_n = 7
        assert TEST_CONFIG.search.sets_n == 2

    def test_unknown_profile(self) -> None:
        """Test unknown profile names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown profile 'prod'"):
            get_profile("prod")
