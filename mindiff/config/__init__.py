"""Configuration system for the mindiff package.

Examples
--------
>>> from mindiff.config import MinDiffConfig, get_profile
>>> get_profile("test").search.random_seed
42
>>> MinDiffConfig().search.mode
'random'
"""

from __future__ import annotations

from mindiff.config.config import MinDiffConfig
from mindiff.config.loader import load_config, load_yaml_file, merge_configs
from mindiff.config.logging import LoggingConfig, configure_logging
from mindiff.config.persistence import PersistenceConfig
from mindiff.config.profiles import (
    DEV_CONFIG,
    PROFILES,
    TEST_CONFIG,
    get_profile,
    list_profiles,
)
from mindiff.config.search import SearchConfig

__all__ = [
    # Main config
    "MinDiffConfig",
    # Config sections
    "SearchConfig",
    "PersistenceConfig",
    "LoggingConfig",
    "configure_logging",
    # Profiles
    "DEV_CONFIG",
    "TEST_CONFIG",
    "PROFILES",
    "get_profile",
    "list_profiles",
    # Loading
    "load_config",
    "load_yaml_file",
    "merge_configs",
]
