"""Search configuration models for the mindiff package."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mindiff.grouping.equalizers import resolve_equalizer


class SearchConfig(BaseModel):
    """Configuration for the assignment search.

    Parameters
    ----------
    sets_n : int
        Number of groups to create.
    criteria_scale : list[str]
        Continuous columns whose equalizer values are matched across groups.
    criteria_nominal : list[str]
        Categorical columns (at most two) balanced by frequency tolerances.
    tolerance_nominal : list[float]
        Tolerated max - min frequency differences: one value for one
        nominal criterion, three (criterion 1, criterion 2, joint) for two.
    equalize : list[str | Callable]
        Equalizer names or callables.
    repetitions : int
        Number of accepted random candidates to evaluate.
    exact : bool
        Enumerate every distinct assignment instead of sampling.
    random_seed : int | None
        Random seed for reproducibility.
    max_attempts : int | None
        Maximum consecutive rejected candidates in random mode before the
        search gives up. None retries forever.
    time_limit : float | None
        Wall-clock limit in seconds.
    n_workers : int
        Threads used to score random candidates.
    batch_size : int
        Candidates scored per batch when ``n_workers > 1``.
    group_column : str
        Name of the output column holding the group labels.

    Examples
    --------
    >>> config = SearchConfig(sets_n=3, criteria_scale=["age"])
    >>> config.mode
    'random'
    >>> config.equalize
    ['mean']
    """

    model_config = ConfigDict(validate_assignment=True)

    sets_n: int = Field(default=2, ge=2, description="Number of groups")
    criteria_scale: list[str] = Field(
        default_factory=list, description="Continuous criteria"
    )
    criteria_nominal: list[str] = Field(
        default_factory=list, description="Nominal criteria (max. 2)"
    )
    tolerance_nominal: list[float] = Field(
        default_factory=lambda: [math.inf, math.inf, math.inf],
        description="Tolerated frequency differences",
    )
    equalize: list[str | Callable[..., Any]] = Field(
        default_factory=lambda: ["mean"], description="Equalizer functions"
    )
    repetitions: int = Field(default=1, ge=1, description="Random repetitions")
    exact: bool = Field(default=False, description="Enumerate all assignments")
    random_seed: int | None = Field(default=None, description="Random seed")
    max_attempts: int | None = Field(
        default=None, ge=1, description="Max consecutive rejected candidates"
    )
    time_limit: float | None = Field(
        default=None, gt=0, description="Time limit in seconds"
    )
    n_workers: int = Field(default=1, ge=1, description="Scoring threads")
    batch_size: int = Field(default=64, ge=1, description="Parallel batch size")
    group_column: str = Field(default="new_set", description="Output column")

    @property
    def mode(self) -> Literal["random", "exact"]:
        """Search mode derived from ``exact``."""
        return "exact" if self.exact else "random"

    @field_validator("criteria_nominal")
    @classmethod
    def validate_criteria_nominal(cls, v: list[str]) -> list[str]:
        """Validate that at most two nominal criteria are given."""
        if len(v) > 2:
            raise ValueError(
                f"only two nominal criteria can be considered, got {len(v)}"
            )
        return v

    @field_validator("tolerance_nominal")
    @classmethod
    def validate_tolerance_nominal(cls, v: list[float]) -> list[float]:
        """Validate tolerances are non-negative (inf allowed)."""
        if not v:
            raise ValueError("tolerance_nominal must contain at least one value")
        for tolerance in v:
            if math.isnan(tolerance) or tolerance < 0:
                raise ValueError(f"tolerances must be >= 0, got {tolerance}")
        return v

    @field_validator("equalize")
    @classmethod
    def validate_equalize(
        cls, v: list[str | Callable[..., Any]]
    ) -> list[str | Callable[..., Any]]:
        """Validate equalizer names against the registry."""
        if not v:
            raise ValueError("at least one equalizer must be given")
        for spec in v:
            resolve_equalizer(spec)
        return v

    @field_validator("group_column")
    @classmethod
    def validate_group_column(cls, v: str) -> str:
        """Validate the output column name is non-empty."""
        if not v or not v.strip():
            raise ValueError("group_column must be non-empty")
        return v.strip()

    @model_validator(mode="after")
    def validate_tolerance_length(self) -> SearchConfig:
        """Validate three tolerances are given for two nominal criteria."""
        if len(self.criteria_nominal) == 2 and len(self.tolerance_nominal) < 3:
            raise ValueError(
                "three tolerance_nominal values must be passed if two "
                "nominal criteria are given"
            )
        return self
