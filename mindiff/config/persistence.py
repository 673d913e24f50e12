"""Persistence configuration models for the mindiff package."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class PersistenceConfig(BaseModel):
    """Configuration for writing intermediate and final assignments.

    Parameters
    ----------
    write_file : bool
        Write every improved assignment to ``path``.
    path : Path
        Output file for snapshots.
    sep : str
        Field separator.
    decimal : str
        Decimal mark.

    Examples
    --------
    >>> config = PersistenceConfig()
    >>> config.path
    PosixPath('newSet.csv')
    >>> config.sep
    ';'
    """

    write_file: bool = Field(default=False, description="Write snapshots")
    path: Path = Field(default=Path("newSet.csv"), description="Snapshot file")
    sep: str = Field(
        default=";", min_length=1, max_length=1, description="Field separator"
    )
    decimal: str = Field(
        default=",", min_length=1, max_length=1, description="Decimal mark"
    )
