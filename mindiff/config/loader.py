"""Configuration loading.

A configuration is assembled from three layers, each overriding the
previous one: a named profile, an optional YAML file and keyword overrides
written as ``section__field`` (``search__sets_n=4``).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from mindiff.config.config import MinDiffConfig
from mindiff.config.profiles import get_profile

OVERRIDE_SEPARATOR = "__"


def merge_configs(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; any other value in ``override``
    (lists included) replaces the value in ``base``.

    Examples
    --------
    >>> merge_configs({"search": {"sets_n": 2, "exact": False}}, {"search": {"sets_n": 3}})
    {'search': {'sets_n': 3, 'exact': False}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_file(path: Path | str) -> dict[str, Any]:
    """Read a YAML configuration file.

    Parameters
    ----------
    path : Path | str
        File to read.

    Returns
    -------
    dict[str, Any]
        Parsed content; an empty file gives an empty dictionary.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    yaml.YAMLError
        If the file is not valid YAML or its top level is not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        content = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise yaml.YAMLError(
            f"Failed to parse YAML file {path}: top level must be a mapping, "
            f"not {type(content).__name__}"
        )
    return content


def _nest_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
    nested: dict[str, Any] = {}
    for key, value in overrides.items():
        *sections, field = key.split(OVERRIDE_SEPARATOR)
        target = nested
        for section in sections:
            target = target.setdefault(section, {})
        target[field] = value
    return nested


def load_config(
    config_path: Path | str | None = None,
    profile: str = "default",
    **overrides: Any,
) -> MinDiffConfig:
    """Build a configuration from a profile, a YAML file and overrides.

    Parameters
    ----------
    config_path : Path | str | None
        YAML file merged over the profile. Skipped when None.
    profile : str
        Base profile (``default``, ``dev`` or ``test``).
    **overrides : Any
        ``section__field`` values merged last.

    Returns
    -------
    MinDiffConfig
        Validated configuration.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` does not exist.
    yaml.YAMLError
        If the YAML file is malformed.
    ValueError
        If the profile is unknown.
    pydantic.ValidationError
        If the merged values are invalid.

    Examples
    --------
    >>> config = load_config(profile="test", search__sets_n=4)
    >>> config.search.sets_n, config.search.random_seed
    (4, 42)
    """
    layers: list[Mapping[str, Any]] = [get_profile(profile).model_dump()]
    if config_path is not None:
        layers.append(load_yaml_file(config_path))
    if overrides:
        layers.append(_nest_overrides(overrides))

    merged: dict[str, Any] = {}
    for layer in layers:
        merged = merge_configs(merged, layer)
    return MinDiffConfig(**merged)
