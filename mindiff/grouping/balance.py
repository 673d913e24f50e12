"""Categorical balance checks for candidate assignments.

For every nominal criterion a group x category contingency table is built.
The imbalance of a category is the difference between its largest and its
smallest count across groups; a criterion is balanced when no category
exceeds the tolerated imbalance. With two criteria the joint distribution
(group x category 1 x category 2) is checked against a third tolerance.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from mindiff.errors import ConfigurationError

type Codes = np.ndarray[tuple[int], np.dtype[np.intp]]


def encode_categories(values: Sequence[Any] | np.ndarray[Any, Any] | pd.Series) -> Codes:
    """Encode category values as integer codes.

    Missing values are encoded as -1 and later excluded from the tables.

    Examples
    --------
    >>> encode_categories(["a", "b", None, "a"]).tolist()
    [0, 1, -1, 0]
    """
    codes, _ = pd.factorize(pd.Series(values), use_na_sentinel=True)
    return codes.astype(np.intp)


def _group_codes(assignment: Sequence[Any] | np.ndarray[Any, Any]) -> tuple[Codes, int]:
    groups, codes = np.unique(np.asarray(assignment), return_inverse=True)
    return codes.astype(np.intp), len(groups)


def contingency_table(
    assignment: Sequence[Any] | np.ndarray[Any, Any],
    *category_codes: Codes,
) -> np.ndarray[Any, np.dtype[np.int64]]:
    """Count items per group and category combination.

    Parameters
    ----------
    assignment : array-like
        Group label per item.
    *category_codes : Codes
        One or more encoded category vectors (see ``encode_categories``).

    Returns
    -------
    np.ndarray
        Array of shape ``(n_groups, n_categories_1, ...)``. Items with a
        missing value in any of the categories are not counted.

    Examples
    --------
    >>> import numpy as np
    >>> table = contingency_table([1, 1, 2, 2], np.array([0, 1, 0, 0]))
    >>> table.tolist()
    [[1, 1], [2, 0]]
    """
    groups, n_groups = _group_codes(assignment)
    shape = (n_groups, *(int(codes.max(initial=-1)) + 1 for codes in category_codes))
    table = np.zeros(shape, dtype=np.int64)

    observed = np.ones(len(groups), dtype=bool)
    for codes in category_codes:
        observed &= codes >= 0

    index = (groups[observed], *(codes[observed] for codes in category_codes))
    np.add.at(table, index, 1)
    return table


def column_imbalance(table: np.ndarray[Any, Any]) -> np.ndarray[Any, np.dtype[np.int64]]:
    """Compute the max - min count across groups for every category cell.

    The first axis of ``table`` holds the groups; all remaining axes are
    flattened.

    Examples
    --------
    >>> import numpy as np
    >>> column_imbalance(np.array([[1, 1], [2, 0]])).tolist()
    [1, 1]
    """
    if table.size == 0:
        return np.zeros(0, dtype=np.int64)
    return (table.max(axis=0) - table.min(axis=0)).ravel()


def _max_imbalance(table: np.ndarray[Any, Any]) -> int:
    differences = column_imbalance(table)
    return int(differences.max()) if differences.size else 0


@dataclass(frozen=True)
class NominalImbalance:
    """Imbalance of one or two nominal criteria under an assignment.

    Attributes
    ----------
    marginal : tuple[int, ...]
        Largest category imbalance of each criterion.
    joint : int | None
        Largest imbalance over all category combinations of two criteria,
        None with a single criterion.
    """

    marginal: tuple[int, ...]
    joint: int | None = None

    def within(self, tolerances: Sequence[float]) -> bool:
        """Check the imbalances against their tolerances.

        Parameters
        ----------
        tolerances : Sequence[float]
            One tolerance per marginal imbalance, followed by the joint
            tolerance when ``joint`` is set.

        Returns
        -------
        bool
            True if no imbalance exceeds its tolerance.
        """
        for imbalance, tolerance in zip(self.marginal, tolerances, strict=False):
            if imbalance > tolerance:
                return False
        if self.joint is not None and self.joint > tolerances[len(self.marginal)]:
            return False
        return True


def resolve_tolerances(n_criteria: int, tolerances: Sequence[float]) -> tuple[float, ...]:
    """Select the tolerances that apply to ``n_criteria`` nominal criteria.

    Parameters
    ----------
    n_criteria : int
        Number of nominal criteria (1 or 2).
    tolerances : Sequence[float]
        Caller-supplied tolerance vector.

    Returns
    -------
    tuple[float, ...]
        One value for a single criterion, three values for two criteria.

    Raises
    ------
    ConfigurationError
        If the number of criteria is not 1 or 2, too few tolerances are
        given or a tolerance is negative.
    """
    if n_criteria < 1 or n_criteria > 2:
        raise ConfigurationError(
            f"only one or two nominal criteria can be balanced, got {n_criteria}"
        )

    needed = 1 if n_criteria == 1 else 3
    if len(tolerances) < needed:
        raise ConfigurationError(
            f"{needed} tolerance values must be passed for {n_criteria} "
            f"nominal criteria, got {len(tolerances)}"
        )

    selected = tuple(float(t) for t in tolerances[:needed])
    if any(t < 0 or np.isnan(t) for t in selected):
        raise ConfigurationError(f"tolerances must be >= 0, got {list(selected)}")
    return selected


class BalanceChecker:
    """Checks assignments against nominal balance tolerances.

    Category codes are computed once, so every check only builds the
    contingency tables.

    Parameters
    ----------
    nominal_values : Sequence[array-like]
        Values of one or two nominal criteria, one entry per item.
    tolerances : Sequence[float]
        Tolerance vector (length >= 1 for one criterion, >= 3 for two).

    Attributes
    ----------
    tolerances : tuple[float, ...]
        Tolerances in effect.

    Examples
    --------
    >>> checker = BalanceChecker([["a", "a", "b", "b"]], [0])
    >>> checker.check([1, 2, 1, 2])
    True
    >>> checker.check([1, 1, 2, 2])
    False
    """

    def __init__(
        self,
        nominal_values: Sequence[Sequence[Any] | np.ndarray[Any, Any] | pd.Series],
        tolerances: Sequence[float],
    ) -> None:
        self.tolerances = resolve_tolerances(len(nominal_values), tolerances)
        self._codes = [encode_categories(values) for values in nominal_values]

    def imbalance(self, assignment: Sequence[Any] | np.ndarray[Any, Any]) -> NominalImbalance:
        """Measure the nominal imbalance of an assignment."""
        marginal = tuple(
            _max_imbalance(contingency_table(assignment, codes))
            for codes in self._codes
        )
        joint = None
        if len(self._codes) == 2:
            joint = _max_imbalance(contingency_table(assignment, *self._codes))
        return NominalImbalance(marginal=marginal, joint=joint)

    def check(self, assignment: Sequence[Any] | np.ndarray[Any, Any]) -> bool:
        """Return True if the assignment is within all tolerances."""
        return self.imbalance(assignment).within(self.tolerances)


def nominal_imbalance(
    assignment: Sequence[Any] | np.ndarray[Any, Any],
    nominal_values: Sequence[Sequence[Any] | np.ndarray[Any, Any] | pd.Series],
) -> NominalImbalance:
    """Measure the imbalance of one or two nominal criteria.

    Parameters
    ----------
    assignment : array-like
        Group label per item.
    nominal_values : Sequence[array-like]
        Values of each nominal criterion.

    Returns
    -------
    NominalImbalance
        Marginal and, for two criteria, joint imbalance.
    """
    tolerances = [np.inf] * 3
    return BalanceChecker(nominal_values, tolerances).imbalance(assignment)


def is_balanced(
    assignment: Sequence[Any] | np.ndarray[Any, Any],
    nominal_values: Sequence[Sequence[Any] | np.ndarray[Any, Any] | pd.Series],
    tolerances: Sequence[float],
) -> bool:
    """Decide whether an assignment satisfies the nominal tolerances.

    Parameters
    ----------
    assignment : array-like
        Group label per item.
    nominal_values : Sequence[array-like]
        Values of one or two nominal criteria.
    tolerances : Sequence[float]
        One tolerance for one criterion; three (criterion 1, criterion 2,
        joint) for two criteria. ``inf`` always passes.

    Returns
    -------
    bool
        True if every imbalance is within its tolerance.

    Examples
    --------
    >>> is_balanced([1, 2, 1, 2], [["x", "x", "y", "y"]], [0])
    True
    """
    return BalanceChecker(nominal_values, tolerances).check(assignment)
