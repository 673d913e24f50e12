"""Assign items to groups so that the groups are as similar as possible.

Groups are balanced on continuous criteria by minimizing the variance of
per-group summary statistics and, optionally, on up to two nominal criteria
through frequency tolerances.
"""

from __future__ import annotations

from mindiff.grouping.search import SearchResult, SearchStatus, create_groups

__version__ = "0.2.0"
__author__ = "Martin Papenberg"

__all__ = ["SearchResult", "SearchStatus", "create_groups", "__version__"]
