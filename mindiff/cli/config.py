"""Configuration commands for mindiff CLI.

This module provides commands for viewing and validating configuration.
"""

from __future__ import annotations

from pathlib import Path

import click

from mindiff.cli.utils import (
    format_output,
    get_nested_value,
    load_config_for_cli,
    print_error,
    print_success,
)
from mindiff.config import list_profiles


@click.group()
def config() -> None:
    r"""Manage configuration commands.

    \b
    Examples:
        $ mindiff config show
        $ mindiff config show --format json
        $ mindiff config show --key search.sets_n
        $ mindiff config validate my-config.yaml
        $ mindiff config profiles
    """


@config.command()
@click.option(
    "--format",
    "-f",
    "format_type",
    type=click.Choice(["yaml", "json", "table"], case_sensitive=False),
    default="yaml",
    help="Output format (default: yaml)",
)
@click.option(
    "--key",
    "-k",
    type=str,
    default=None,
    help="Show specific config value (e.g., search.sets_n)",
)
@click.pass_context
def show(ctx: click.Context, format_type: str, key: str | None) -> None:
    r"""Display current configuration.

    Shows the merged configuration from profile and configuration file.

    \b
    Examples:
        $ mindiff config show
        $ mindiff --profile test config show --format json
    """
    cfg = load_config_for_cli(
        config_file=ctx.obj.get("config_file"),
        profile=ctx.obj.get("profile", "default"),
        verbose=ctx.obj.get("verbose", False),
    )
    config_dict = cfg.to_dict()

    if key:
        try:
            click.echo(get_nested_value(config_dict, key))
        except KeyError as e:
            print_error(f"Configuration key not found: {e}")
        return

    click.echo(format_output(config_dict, format_type.lower()))  # type: ignore[arg-type]


@config.command()
@click.argument(
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def validate(ctx: click.Context, config_file: Path) -> None:
    r"""Validate a configuration file.

    \b
    Examples:
        $ mindiff config validate my-config.yaml
    """
    load_config_for_cli(
        config_file=config_file,
        profile=ctx.obj.get("profile", "default"),
    )
    print_success(f"Configuration is valid: {config_file}")


@config.command()
def profiles() -> None:
    """List available configuration profiles."""
    for name in list_profiles():
        click.echo(name)
