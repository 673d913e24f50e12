"""Variance-based similarity objective for scale criteria.

Each scale criterion is standardized across all items. For every equalizer
the per-group values are computed and their variance across groups is
added to the score. Lower scores mean more similar groups; zero means that
every group has the same value for every criterion and equalizer.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from mindiff.grouping.equalizers import EQUALIZERS, Equalizer, EqualizerSpec, resolve_equalizers

type FloatArray = np.ndarray[tuple[int], np.dtype[np.float64]]


def standardize(values: Sequence[float] | np.ndarray[Any, Any] | pd.Series) -> FloatArray:
    """Scale values to zero mean and unit (sample) standard deviation.

    Missing values are ignored when computing mean and standard deviation
    and stay missing. A column without variation is mapped to zero.

    Examples
    --------
    >>> standardize([1.0, 2.0, 3.0]).tolist()
    [-1.0, 0.0, 1.0]
    """
    column = np.asarray(values, dtype=np.float64)
    observed = ~np.isnan(column)

    result = np.where(observed, 0.0, np.nan)
    if observed.sum() < 2:
        return result

    sd = float(np.std(column[observed], ddof=1))
    if sd == 0.0:
        return result
    return (column - float(np.mean(column[observed]))) / sd


def between_group_variance(group_values: FloatArray) -> float:
    """Sample variance of the finite per-group values.

    Fewer than two finite values carry no information on differences and
    contribute zero.
    """
    finite = group_values[np.isfinite(group_values)]
    if len(finite) < 2:
        return 0.0
    return float(np.var(finite, ddof=1))


class SimilarityObjective:
    """Scores assignments by the dissimilarity of groups on scale criteria.

    Parameters
    ----------
    scale_values : Sequence[array-like]
        Values of each scale criterion, one entry per item. Missing values
        are allowed.
    equalizers : Sequence[str | Equalizer], default=("mean",)
        Summary statistics to match across groups.

    Examples
    --------
    >>> objective = SimilarityObjective([[10, 10, 20, 20]])
    >>> objective.score([1, 2, 1, 2])
    0.0
    >>> objective.score([1, 1, 2, 2]) > 0
    True
    """

    def __init__(
        self,
        scale_values: Sequence[Sequence[float] | np.ndarray[Any, Any] | pd.Series],
        equalizers: Sequence[EqualizerSpec] = ("mean",),
    ) -> None:
        self._columns = [standardize(values) for values in scale_values]
        self._equalizers = resolve_equalizers(equalizers)

    def score(self, assignment: Sequence[Any] | np.ndarray[Any, Any]) -> float:
        """Compute the summed between-group variance of an assignment.

        Parameters
        ----------
        assignment : array-like
            Group label per item.

        Returns
        -------
        float
            Non-negative dissimilarity score.
        """
        _, groups = np.unique(np.asarray(assignment), return_inverse=True)
        n_groups = int(groups.max()) + 1 if len(groups) else 0

        total = 0.0
        for column in self._columns:
            for equalizer in self._equalizers:
                group_values = self._per_group(column, groups, n_groups, equalizer)
                total += between_group_variance(group_values)
        return total

    @staticmethod
    def _per_group(
        column: FloatArray,
        groups: np.ndarray[Any, np.dtype[np.intp]],
        n_groups: int,
        equalizer: Equalizer,
    ) -> FloatArray:
        observed = ~np.isnan(column)

        if equalizer is EQUALIZERS["mean"]:
            sums = np.bincount(groups[observed], weights=column[observed], minlength=n_groups)
            counts = np.bincount(groups[observed], minlength=n_groups)
            with np.errstate(invalid="ignore", divide="ignore"):
                return sums / counts

        return np.array(
            [
                equalizer(column[observed & (groups == g)])
                for g in range(n_groups)
            ],
            dtype=np.float64,
        )


def score(
    assignment: Sequence[Any] | np.ndarray[Any, Any],
    scale_values: Sequence[Sequence[float] | np.ndarray[Any, Any] | pd.Series],
    equalizers: Sequence[EqualizerSpec] = ("mean",),
) -> float:
    """Score an assignment on one or more scale criteria.

    Parameters
    ----------
    assignment : array-like
        Group label per item.
    scale_values : Sequence[array-like]
        Values of each scale criterion.
    equalizers : Sequence[str | Equalizer], default=("mean",)
        Summary statistics to match across groups.

    Returns
    -------
    float
        Sum over criteria and equalizers of the between-group variance of
        the standardized per-group statistic.

    Examples
    --------
    >>> score([1, 2, 1, 2], [[1.0, 2.0, 2.0, 1.0]])
    0.0
    """
    return SimilarityObjective(scale_values, equalizers).score(assignment)
