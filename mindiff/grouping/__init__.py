"""Assignment search engine.

This module assigns items to groups and minimizes differences between the
groups. It includes:

- Label multisets and the number of distinct assignments
- CandidateGenerator: random shuffles or lexicographic enumeration
- BalanceChecker: frequency tolerances for up to two nominal criteria
- SimilarityObjective: between-group variance of equalizer values
- SearchController: the search loop, with resumable immutable state
"""

from mindiff.grouping.balance import BalanceChecker, NominalImbalance, is_balanced
from mindiff.grouping.equalizers import (
    EQUALIZERS,
    list_equalizers,
    register_equalizer,
    resolve_equalizer,
)
from mindiff.grouping.generator import CandidateGenerator, next_permutation, shuffle_labels
from mindiff.grouping.labels import count_permutations, group_sizes, make_labels
from mindiff.grouping.objective import SimilarityObjective, score, standardize
from mindiff.grouping.search import (
    SearchController,
    SearchResult,
    SearchState,
    SearchStatus,
    create_groups,
)

__all__ = [
    "BalanceChecker",
    "NominalImbalance",
    "is_balanced",
    "EQUALIZERS",
    "list_equalizers",
    "register_equalizer",
    "resolve_equalizer",
    "CandidateGenerator",
    "next_permutation",
    "shuffle_labels",
    "count_permutations",
    "group_sizes",
    "make_labels",
    "SimilarityObjective",
    "score",
    "standardize",
    "SearchController",
    "SearchResult",
    "SearchState",
    "SearchStatus",
    "create_groups",
]
