"""Main configuration model for the mindiff package."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from mindiff.config.logging import LoggingConfig
from mindiff.config.persistence import PersistenceConfig
from mindiff.config.search import SearchConfig


class MinDiffConfig(BaseModel):
    """Main configuration for the mindiff package.

    Parameters
    ----------
    profile : str
        Configuration profile name.
    search : SearchConfig
        Assignment search configuration.
    persistence : PersistenceConfig
        Snapshot writing configuration.
    logging : LoggingConfig
        Logging configuration.

    Examples
    --------
    >>> config = MinDiffConfig()
    >>> config.profile
    'default'
    >>> config.search.sets_n
    2
    >>> config.persistence.write_file
    False
    """

    profile: str = Field(default="default", description="Configuration profile name")
    search: SearchConfig = Field(
        default_factory=SearchConfig, description="Search configuration"
    )
    persistence: PersistenceConfig = Field(
        default_factory=PersistenceConfig, description="Persistence configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a plain dictionary.

        Paths become strings and equalizer callables their names, so the
        result can be dumped as YAML or JSON.

        Returns
        -------
        dict[str, Any]
            Configuration as a dictionary.

        Examples
        --------
        >>> MinDiffConfig().to_dict()["search"]["equalize"]
        ['mean']
        """
        return _plain(self.model_dump())

    def to_yaml(self) -> str:
        """Convert configuration to YAML string.

        Examples
        --------
        >>> 'profile: default' in MinDiffConfig().to_yaml()
        True
        """
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, Path):
        return str(value)
    if callable(value):
        return getattr(value, "__name__", repr(value))
    return value
