"""Exceptions raised by the mindiff package."""

from __future__ import annotations


class MinDiffError(Exception):
    """Base exception for mindiff errors."""

    pass


class ConfigurationError(MinDiffError, ValueError):
    """Exception raised when a search is configured inconsistently.

    Raised before any candidate is generated, e.g. for unknown criterion
    columns, too many nominal criteria or a tolerance vector of the wrong
    length.

    Examples
    --------
    >>> try:
    ...     raise ConfigurationError("`age` is not a column in the data")
    ... except ValueError as e:
    ...     print(e)
    `age` is not a column in the data
    """

    pass


class IncompatiblePriorError(ConfigurationError):
    """Exception raised when a prior assignment cannot seed the search.

    Parameters
    ----------
    message
        Error message.
    n_labels
        Number of distinct labels found in the prior assignment.
    sets_n
        Number of groups requested for the search.

    Attributes
    ----------
    n_labels : int | None
        Distinct labels in the prior assignment.
    sets_n : int | None
        Requested number of groups.
    """

    def __init__(
        self,
        message: str,
        n_labels: int | None = None,
        sets_n: int | None = None,
    ) -> None:
        self.n_labels = n_labels
        self.sets_n = sets_n
        super().__init__(message)


class PersistenceError(MinDiffError):
    """Exception raised when a persistence sink fails to write a table."""

    pass
