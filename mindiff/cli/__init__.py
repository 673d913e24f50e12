"""Command-line interface for the mindiff package."""

from __future__ import annotations

from mindiff.cli.main import cli

__all__ = ["cli"]
