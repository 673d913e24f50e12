"""Group label multisets and the size of their permutation space.

The label multiset is fixed for a whole search: only the order of the
labels (which item receives which label) varies between candidates.
"""

from __future__ import annotations

from collections.abc import Sequence
from math import comb
from typing import Any

import numpy as np

type Labels = np.ndarray[tuple[int], np.dtype[np.int64]]


def make_labels(n_items: int, sets_n: int) -> Labels:
    """Create the label multiset for ``n_items`` items and ``sets_n`` groups.

    Labels ``1..sets_n`` are assigned cyclically, so when ``n_items`` is not
    divisible by ``sets_n`` the remaining items receive labels
    ``1..remainder`` and group sizes differ by at most one.

    Parameters
    ----------
    n_items : int
        Number of items to assign (>= 1).
    sets_n : int
        Number of groups (>= 2).

    Returns
    -------
    Labels
        Integer label vector of length ``n_items``.

    Raises
    ------
    ValueError
        If ``n_items < 1``, ``sets_n < 2`` or ``sets_n > n_items``.

    Examples
    --------
    >>> make_labels(7, 3).tolist()
    [1, 2, 3, 1, 2, 3, 1]
    """
    if n_items < 1:
        raise ValueError(f"n_items must be >= 1, got {n_items}")
    if sets_n < 2:
        raise ValueError(f"sets_n must be >= 2, got {sets_n}")
    if sets_n > n_items:
        raise ValueError(
            f"sets_n ({sets_n}) exceeds the number of items ({n_items})"
        )

    return (np.arange(n_items, dtype=np.int64) % sets_n) + 1


def group_sizes(labels: Sequence[Any] | np.ndarray[Any, Any]) -> list[int]:
    """Count the members of each group, in ascending label order.

    Examples
    --------
    >>> group_sizes([1, 2, 3, 1, 2, 3, 1])
    [3, 2, 2]
    """
    _, counts = np.unique(np.asarray(labels), return_counts=True)
    return [int(c) for c in counts]


def count_permutations(sizes: Sequence[int]) -> int:
    """Count the distinct permutations of a multiset with the given group sizes.

    Equals the multinomial coefficient ``N! / (n_1! ... n_k!)`` but is
    accumulated as a product of binomial coefficients, choosing the members
    of each group from the pool left over by the previous groups. Python
    integers are exact, so the result never overflows; it can still be far
    too large to enumerate.

    Parameters
    ----------
    sizes : Sequence[int]
        Number of items per group.

    Returns
    -------
    int
        Number of distinct label permutations.

    Raises
    ------
    ValueError
        If any size is negative.

    Examples
    --------
    >>> count_permutations([2, 2])
    6
    >>> count_permutations([3, 3, 3])
    1680
    """
    if any(n < 0 for n in sizes):
        raise ValueError(f"group sizes must be non-negative, got {list(sizes)}")

    remaining = sum(sizes)
    total = 1
    # the last group takes whatever is left, C(n_k, n_k) == 1
    for size in sizes[:-1]:
        total *= comb(remaining, size)
        remaining -= size
    return total
