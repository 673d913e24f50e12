"""Shared helpers for the mindiff command line.

Status messages and the progress display go to stderr, so that ``assign``
can print its result table to stdout.
"""

from __future__ import annotations

import json
import sys
from io import StringIO
from pathlib import Path
from typing import Any, Literal, NoReturn

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mindiff.config import MinDiffConfig, load_config

console = Console(stderr=True)

type OutputFormat = Literal["yaml", "json", "table"]


def load_config_for_cli(
    config_file: str | Path | None,
    profile: str,
    verbose: bool = False,
    **overrides: Any,
) -> MinDiffConfig:
    """Load the configuration for a command, exiting with status 1 on errors.

    Parameters
    ----------
    config_file : str | Path | None
        YAML file given with ``--config-file``.
    profile : str
        Profile given with ``--profile``.
    verbose : bool
        Report which sources were used.
    **overrides : Any
        ``section__field`` values taken from command options.

    Returns
    -------
    MinDiffConfig
        Validated configuration.
    """
    path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path=path, profile=profile, **overrides)
    except FileNotFoundError:
        print_error(f"Configuration file not found: {config_file}")
    except (ValidationError, yaml.YAMLError, ValueError) as e:
        print_error(f"Failed to load configuration: {e}")

    if verbose:
        sources = [f"profile '{profile}'"]
        if path is not None:
            sources.append(str(path))
        if overrides:
            sources.append("command options")
        console.print(f"[green]✓[/green] Loaded configuration from {', '.join(sources)}")
    return config


def flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested dictionaries into dotted keys.

    Examples
    --------
    >>> flatten({"search": {"sets_n": 2, "exact": False}, "profile": "dev"})
    {'search.sets_n': 2, 'search.exact': False, 'profile': 'dev'}
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, prefix=f"{name}."))
        else:
            flat[name] = value
    return flat


def format_output(data: dict[str, Any], format_type: OutputFormat) -> str:
    """Render a plain configuration dictionary.

    Parameters
    ----------
    data : dict[str, Any]
        Values produced by ``MinDiffConfig.to_dict``.
    format_type : {"yaml", "json", "table"}
        Output format; ``table`` lists one dotted key per row.

    Returns
    -------
    str
        Rendered text.

    Raises
    ------
    ValueError
        If the format is unknown.
    """
    match format_type:
        case "yaml":
            return yaml.safe_dump(data, sort_keys=False)
        case "json":
            return json.dumps(data, indent=2)
        case "table":
            return render_table(flatten(data))
    raise ValueError(f"Invalid format type: {format_type}")


def render_table(rows: dict[str, Any], title: str | None = None) -> str:
    """Render key/value pairs as a two-column rich table."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Key", style="yellow", no_wrap=True)
    table.add_column("Value")
    for key, value in rows.items():
        if isinstance(value, list):
            value = ", ".join(str(item) for item in value)
        table.add_row(key, escape(str(value)))

    buffer = StringIO()
    Console(file=buffer, width=120).print(table)
    return buffer.getvalue()


def get_nested_value(data: dict[str, Any], key_path: str) -> Any:
    """Look up a value by dotted key.

    Raises
    ------
    KeyError
        If a part of the path is missing.

    Examples
    --------
    >>> get_nested_value({"search": {"sets_n": 3}}, "search.sets_n")
    3
    """
    value: Any = data
    for part in key_path.split("."):
        if not isinstance(value, dict) or part not in value:
            raise KeyError(f"Key '{part}' not found in path '{key_path}'")
        value = value[part]
    return value


def print_error(message: str, exit_code: int = 1) -> NoReturn:
    """Print an error message and exit with ``exit_code``."""
    console.print(f"[red]✗ Error:[/red] {escape(message)}")
    sys.exit(exit_code)


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {escape(message)}[/green]")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]⚠ Warning:[/yellow] {escape(message)}")
