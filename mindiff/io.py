"""Table loading and persistence sinks.

The search engine only needs a ``write(table)`` capability to save
snapshots of the best assignment; ``CsvSink`` implements it with pandas in
the semicolon/decimal-comma layout of ``newSet.csv`` snapshots.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import pandas as pd

from mindiff.errors import PersistenceError

logger = logging.getLogger(__name__)


class TableSink(Protocol):
    """Anything that can persist an assignment table."""

    def write(self, table: pd.DataFrame) -> None:
        """Persist ``table``."""
        ...


def read_table(path: str | Path, sep: str | None = None, **csv_kwargs: Any) -> pd.DataFrame:
    """Load a delimited text file into a DataFrame.

    Parameters
    ----------
    path : str | Path
        Path to the CSV/TSV file.
    sep : str | None, default=None
        Field separator. When None, pandas sniffs it from the file.
    **csv_kwargs : Any
        Additional keyword arguments passed to ``pandas.read_csv``.

    Returns
    -------
    pd.DataFrame
        Loaded table.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    if sep is None:
        csv_kwargs.setdefault("engine", "python")
    return pd.read_csv(path, sep=sep, **csv_kwargs)


def write_table(
    table: pd.DataFrame,
    path: str | Path,
    sep: str = ",",
    decimal: str = ".",
) -> None:
    """Write a table as delimited text without the index.

    Raises
    ------
    PersistenceError
        If the file cannot be written or the separator or decimal mark
        is not a single character.
    """
    try:
        table.to_csv(path, sep=sep, decimal=decimal, index=False)
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e


class CsvSink:
    """Writes every table it receives to the same delimited file.

    Parameters
    ----------
    path : str | Path, default="newSet.csv"
        Output file, overwritten on each write.
    sep : str, default=";"
        Field separator.
    decimal : str, default=","
        Decimal mark.

    Attributes
    ----------
    path : Path
        Output file.
    writes : int
        Number of successful writes.

    Examples
    --------
    >>> sink = CsvSink("best.csv")  # doctest: +SKIP
    >>> sink.write(table)  # doctest: +SKIP
    """

    def __init__(
        self,
        path: str | Path = "newSet.csv",
        sep: str = ";",
        decimal: str = ",",
    ) -> None:
        self.path = Path(path)
        self.sep = sep
        self.decimal = decimal
        self.writes = 0

    def write(self, table: pd.DataFrame) -> None:
        """Overwrite the output file with ``table``.

        Raises
        ------
        PersistenceError
            If the file cannot be written.
        """
        write_table(table, self.path, sep=self.sep, decimal=self.decimal)
        self.writes += 1
        logger.debug(f"Wrote assignment snapshot to {self.path}")
