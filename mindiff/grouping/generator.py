"""Candidate generation for group assignments.

Two strategies produce permutations of a fixed label multiset:

- Random: an unbiased shuffle drawn from a NumPy random generator
- Exact: the lexicographically next permutation, so that repeated calls
  enumerate every distinct assignment exactly once
"""

from __future__ import annotations

from typing import Literal

import numpy as np

from mindiff.grouping.labels import Labels

type SearchMode = Literal["random", "exact"]


def shuffle_labels(labels: Labels, rng: np.random.Generator) -> Labels:
    """Return a uniformly random permutation of ``labels``.

    The input array is left untouched.

    Parameters
    ----------
    labels : Labels
        Label multiset to permute.
    rng : np.random.Generator
        Source of randomness.

    Returns
    -------
    Labels
        Shuffled copy of ``labels``.
    """
    return rng.permutation(labels)


def next_permutation(labels: Labels) -> Labels:
    """Return the lexicographically next permutation of a label multiset.

    Labels are compared as an ordered alphabet and the assignment vector
    element-wise from left to right. The maximal permutation (a
    non-increasing sequence) wraps around to the ascending one.

    Parameters
    ----------
    labels : Labels
        Current permutation.

    Returns
    -------
    Labels
        Next permutation, as a new array.

    Examples
    --------
    >>> import numpy as np
    >>> next_permutation(np.array([1, 2, 2, 1])).tolist()
    [2, 1, 1, 2]
    >>> next_permutation(np.array([2, 2, 1, 1])).tolist()
    [1, 1, 2, 2]
    """
    result = np.array(labels, copy=True)
    n = len(result)

    # pivot: last position followed by a larger value
    pivot = n - 2
    while pivot >= 0 and result[pivot] >= result[pivot + 1]:
        pivot -= 1

    if pivot < 0:
        result.sort()
        return result

    # the suffix is non-increasing, so the rightmost larger value is the
    # smallest value that exceeds the pivot
    successor = n - 1
    while result[successor] <= result[pivot]:
        successor -= 1

    result[pivot], result[successor] = result[successor], result[pivot]
    result[pivot + 1 :] = result[pivot + 1 :][::-1]
    return result


class CandidateGenerator:
    """Produces successive candidate assignments for a label multiset.

    Parameters
    ----------
    labels : Labels
        Label multiset; only its composition matters.
    mode : {"random", "exact"}, default="random"
        Generation strategy.
    rng : np.random.Generator | None, default=None
        Random generator for random mode. A fresh unseeded generator is
        created when None.
    start : Labels | None, default=None
        Exact mode only: permutation emitted by the previous call, so that
        an interrupted enumeration can continue where it stopped.

    Attributes
    ----------
    mode : str
        Generation strategy.
    cursor : Labels | None
        Last emitted permutation in exact mode, None before the first call.

    Examples
    --------
    >>> import numpy as np
    >>> gen = CandidateGenerator(np.array([2, 1, 2, 1]), mode="exact")
    >>> gen.next().tolist()
    [1, 1, 2, 2]
    >>> gen.next().tolist()
    [1, 2, 1, 2]
    """

    def __init__(
        self,
        labels: Labels,
        mode: SearchMode = "random",
        rng: np.random.Generator | None = None,
        start: Labels | None = None,
    ) -> None:
        if mode not in ("random", "exact"):
            raise ValueError(f"Unknown search mode: {mode}")

        self.mode = mode
        self._labels = np.sort(np.asarray(labels))
        self._rng = rng if rng is not None else np.random.default_rng()
        self.cursor: Labels | None = (
            np.array(start, copy=True) if start is not None else None
        )

    def next(self) -> Labels:
        """Return the next candidate assignment.

        Returns
        -------
        Labels
            A permutation of the label multiset.
        """
        if self.mode == "random":
            return shuffle_labels(self._labels, self._rng)

        if self.cursor is None:
            self.cursor = self._labels.copy()
        else:
            self.cursor = next_permutation(self.cursor)
        return self.cursor.copy()
