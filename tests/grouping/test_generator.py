"""Tests for candidate generation."""

from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from mindiff.grouping.generator import CandidateGenerator, next_permutation, shuffle_labels
from mindiff.grouping.labels import count_permutations, group_sizes, make_labels


def test_next_permutation_basic() -> None:
    """Test successor of a simple sequence."""
    assert next_permutation(np.array([1, 2, 3])).tolist() == [1, 3, 2]
    assert next_permutation(np.array([1, 3, 2])).tolist() == [2, 1, 3]


def test_next_permutation_with_repeated_labels() -> None:
    """Test successor with repeated labels."""
    assert next_permutation(np.array([1, 1, 2, 2])).tolist() == [1, 2, 1, 2]
    assert next_permutation(np.array([1, 2, 2, 1])).tolist() == [2, 1, 1, 2]


def test_next_permutation_wraps_around() -> None:
    """Test the maximal permutation wraps to the ascending one."""
    assert next_permutation(np.array([3, 2, 2, 1])).tolist() == [1, 2, 2, 3]


def test_next_permutation_does_not_modify_input() -> None:
    """Test input array is left untouched."""
    labels = np.array([1, 2, 1])
    next_permutation(labels)
    assert labels.tolist() == [1, 2, 1]


@pytest.mark.parametrize(("n_items", "sets_n"), [(4, 2), (6, 3), (7, 3), (8, 2)])
def test_exact_enumeration_is_complete_and_ordered(n_items: int, sets_n: int) -> None:
    """Test every permutation is emitted once, in increasing order, before wrapping."""
    labels = make_labels(n_items, sets_n)
    expected = count_permutations(group_sizes(labels))

    generator = CandidateGenerator(labels, mode="exact")
    first = generator.next()
    seen = [tuple(first.tolist())]
    while True:
        candidate = generator.next()
        if np.array_equal(candidate, first):
            break
        seen.append(tuple(candidate.tolist()))

    assert len(seen) == expected
    assert len(set(seen)) == expected
    assert seen == sorted(seen)
    assert all(Counter(s) == Counter(labels.tolist()) for s in seen)


def test_exact_generator_starts_sorted() -> None:
    """Test exact mode begins with the ascending multiset."""
    generator = CandidateGenerator(np.array([2, 1, 2, 1]), mode="exact")
    assert generator.cursor is None
    assert generator.next().tolist() == [1, 1, 2, 2]
    assert generator.cursor.tolist() == [1, 1, 2, 2]


def test_exact_generator_resumes_from_start() -> None:
    """Test a generator started from a cursor continues the sequence."""
    labels = make_labels(6, 2)
    full = CandidateGenerator(labels, mode="exact")
    sequence = [full.next() for _ in range(5)]

    resumed = CandidateGenerator(labels, mode="exact", start=sequence[2])
    assert resumed.next().tolist() == sequence[3].tolist()
    assert resumed.next().tolist() == sequence[4].tolist()


def test_random_generator_preserves_composition() -> None:
    """Test shuffles keep the label counts."""
    labels = make_labels(10, 3)
    generator = CandidateGenerator(labels, rng=np.random.default_rng(0))
    for _ in range(20):
        candidate = generator.next()
        assert group_sizes(candidate) == group_sizes(labels)


def test_random_generator_is_reproducible() -> None:
    """Test the same seed yields the same candidates."""
    labels = make_labels(10, 2)
    a = CandidateGenerator(labels, rng=np.random.default_rng(3))
    b = CandidateGenerator(labels, rng=np.random.default_rng(3))
    for _ in range(5):
        assert a.next().tolist() == b.next().tolist()


def test_shuffle_labels_covers_all_permutations() -> None:
    """Test random shuffles reach every distinct assignment."""
    labels = make_labels(4, 2)
    rng = np.random.default_rng(11)
    seen = {tuple(shuffle_labels(labels, rng).tolist()) for _ in range(500)}
    assert len(seen) == 6


def test_unknown_mode() -> None:
    """Test unknown modes raise ValueError."""
    with pytest.raises(ValueError, match="Unknown search mode"):
        CandidateGenerator(make_labels(4, 2), mode="greedy")  # type: ignore[arg-type]
