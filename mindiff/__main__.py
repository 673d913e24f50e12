"""CLI entry point for mindiff package.

Allows running via: python -m mindiff
"""

from __future__ import annotations

from mindiff.cli.main import cli

if __name__ == "__main__":
    cli()
