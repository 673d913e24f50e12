"""Configuration profiles for the mindiff package.

This module provides pre-configured profiles for interactive work and for
testing.
"""

from __future__ import annotations

from mindiff.config.config import MinDiffConfig
from mindiff.config.logging import LoggingConfig
from mindiff.config.search import SearchConfig

# development profile: verbose logging
DEV_CONFIG = MinDiffConfig(
    profile="dev",
    logging=LoggingConfig(
        level="DEBUG",  # log every rejected candidate
        console=True,
    ),
)
"""Development configuration profile.

Examples
--------
>>> from mindiff.config.profiles import DEV_CONFIG
>>> DEV_CONFIG.logging.level
'DEBUG'
"""

# test profile: reproducible, quiet
TEST_CONFIG = MinDiffConfig(
    profile="test",
    search=SearchConfig(
        repetitions=10,
        random_seed=42,  # reproducible tests
        max_attempts=1000,  # never loop forever on infeasible tolerances
    ),
    logging=LoggingConfig(
        level="CRITICAL",
        console=False,
    ),
)
"""Test configuration profile.

Examples
--------
>>> from mindiff.config.profiles import TEST_CONFIG
>>> TEST_CONFIG.search.random_seed
42
"""

# profile registry
PROFILES: dict[str, MinDiffConfig] = {
    "default": MinDiffConfig(),
    "dev": DEV_CONFIG,
    "test": TEST_CONFIG,
}
"""Registry of all available configuration profiles.

Examples
--------
>>> list(PROFILES.keys())
['default', 'dev', 'test']
"""


def get_profile(name: str) -> MinDiffConfig:
    """Get configuration profile by name.

    Parameters
    ----------
    name : str
        Profile name.

    Returns
    -------
    MinDiffConfig
        A copy of the profile, safe to modify.

    Raises
    ------
    ValueError
        If the profile does not exist.

    Examples
    --------
    >>> get_profile("dev").logging.level
    'DEBUG'
    """
    if name not in PROFILES:
        available = ", ".join(PROFILES)
        raise ValueError(f"Unknown profile '{name}'. Available: {available}")
    return PROFILES[name].model_copy(deep=True)


def list_profiles() -> list[str]:
    """Return the names of all available profiles."""
    return list(PROFILES)
