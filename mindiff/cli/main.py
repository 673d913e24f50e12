"""Main CLI entry point for mindiff package.

This module provides the main CLI command group, the ``assign`` command that
runs a search on a delimited file and the ``count`` command that reports the
size of the exact-mode search space.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from mindiff import __version__
from mindiff.cli.config import config
from mindiff.cli.utils import (
    console,
    load_config_for_cli,
    print_error,
    print_success,
    print_warning,
)
from mindiff.config import configure_logging
from mindiff.errors import ConfigurationError, PersistenceError
from mindiff.grouping.labels import count_permutations, group_sizes, make_labels
from mindiff.grouping.search import SearchController, SearchResult, SearchState
from mindiff.io import CsvSink, read_table, write_table

# progress bars are only drawn for budgets that could plausibly finish
MAX_PROGRESS_TOTAL = 10**12


@click.group()
@click.version_option(version=__version__, prog_name="mindiff")
@click.option(
    "--config-file",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: use profile defaults)",
)
@click.option(
    "--profile",
    "-p",
    type=click.Choice(["default", "dev", "test"], case_sensitive=False),
    default="default",
    help="Configuration profile to use",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress all output except errors",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    profile: str,
    verbose: bool,
    quiet: bool,
) -> None:
    r"""Assign items to groups and minimize differences between the groups.

    \b
    Examples:
        # Split a class into 3 groups with similar mean test scores
        $ mindiff assign pupils.csv --sets 3 --scale score -r 1000

        # Balance gender exactly, keep ages similar
        $ mindiff assign pupils.csv -n 2 -s age -m gender -t 0

        # How many distinct assignments does exact mode enumerate?
        $ mindiff count --items 12 --sets 3
    """
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["profile"] = profile
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--sets", "-n", "sets_n", type=int, default=None, help="Number of groups")
@click.option("--scale", "-s", multiple=True, help="Continuous criterion (repeatable)")
@click.option("--nominal", "-m", multiple=True, help="Nominal criterion (max. 2)")
@click.option(
    "--tolerance",
    "-t",
    type=float,
    multiple=True,
    help="Tolerated frequency difference (repeatable, 'inf' allowed)",
)
@click.option("--equalize", "-e", multiple=True, help="Equalizer name (repeatable)")
@click.option("--repetitions", "-r", type=int, default=None, help="Random repetitions")
@click.option("--exact", is_flag=True, default=False, help="Enumerate all assignments")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option("--workers", type=int, default=None, help="Scoring threads")
@click.option("--time-limit", type=float, default=None, help="Time limit in seconds")
@click.option("--max-attempts", type=int, default=None, help="Max rejected candidates")
@click.option("--group-column", type=str, default=None, help="Output column name")
@click.option(
    "--resume",
    is_flag=True,
    default=False,
    help="Improve on the assignment stored in the group column",
)
@click.option("--sep", type=str, default=None, help="Field separator of input")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout)",
)
@click.option(
    "--write-file",
    is_flag=True,
    default=False,
    help="Write every improvement to the snapshot file",
)
@click.pass_context
def assign(
    ctx: click.Context,
    input_file: Path,
    sets_n: int | None,
    scale: tuple[str, ...],
    nominal: tuple[str, ...],
    tolerance: tuple[float, ...],
    equalize: tuple[str, ...],
    repetitions: int | None,
    exact: bool,
    seed: int | None,
    workers: int | None,
    time_limit: float | None,
    max_attempts: int | None,
    group_column: str | None,
    resume: bool,
    sep: str | None,
    output: Path | None,
    write_file: bool,
) -> None:
    r"""Assign the rows of INPUT_FILE to groups.

    Command options override the configuration file.

    \b
    Examples:
        $ mindiff assign items.csv -n 4 -s frequency -s length -e mean -e sd
        $ mindiff assign items.csv -n 2 -m condition -t 0 --exact
        $ mindiff assign best.csv -n 4 -s frequency --resume -r 10000
    """
    options: dict[str, Any] = {
        "sets_n": sets_n,
        "criteria_scale": list(scale) or None,
        "criteria_nominal": list(nominal) or None,
        "tolerance_nominal": list(tolerance) or None,
        "equalize": list(equalize) or None,
        "repetitions": repetitions,
        "exact": exact or None,
        "random_seed": seed,
        "n_workers": workers,
        "time_limit": time_limit,
        "max_attempts": max_attempts,
        "group_column": group_column,
    }
    overrides = {
        f"search__{key}": value for key, value in options.items() if value is not None
    }
    if write_file:
        overrides["persistence__write_file"] = True

    cfg = load_config_for_cli(
        config_file=ctx.obj.get("config_file"),
        profile=ctx.obj.get("profile", "default"),
        verbose=ctx.obj.get("verbose", False),
        **overrides,
    )

    if ctx.obj.get("verbose"):
        cfg.logging.level = "DEBUG"
    elif ctx.obj.get("quiet"):
        cfg.logging.level = "ERROR"
    configure_logging(cfg.logging)

    try:
        data = read_table(input_file, sep=sep)
    except (OSError, ValueError) as e:
        print_error(f"Failed to read {input_file}: {e}")
        return

    search = cfg.search
    prior = None
    if resume:
        if search.group_column not in data.columns:
            print_error(
                f"Cannot resume: column '{search.group_column}' not in {input_file}"
            )
            return
        prior = data[search.group_column]
        data = data.drop(columns=search.group_column)

    sink = None
    if cfg.persistence.write_file:
        sink = CsvSink(
            cfg.persistence.path,
            sep=cfg.persistence.sep,
            decimal=cfg.persistence.decimal,
        )

    try:
        controller = SearchController(data, search, prior_assignment=prior, sink=sink)
    except ConfigurationError as e:
        print_error(str(e))
        return

    result = _run_with_progress(controller, show=not ctx.obj.get("quiet"))

    if not ctx.obj.get("quiet"):
        console.print(_summary_table(result))
    if not result.is_feasible:
        print_warning(
            "No assignment satisfied the nominal tolerances; relax --tolerance "
            "or increase --repetitions."
        )

    if output is None:
        click.echo(result.table.to_csv(index=False), nl=False)
        return

    try:
        write_table(result.table, output, sep=sep or ",")
    except PersistenceError as e:
        print_error(str(e))
        return
    if not ctx.obj.get("quiet"):
        print_success(f"Wrote {len(result.table)} rows to {output}")


def _run_with_progress(controller: SearchController, show: bool) -> SearchResult:
    if not show:
        return controller.run()

    total = controller.budget if controller.budget <= MAX_PROGRESS_TOTAL else None
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Searching assignments[/cyan]", total=total)

        def on_iteration(state: SearchState) -> None:
            progress.update(task, completed=state.iteration)

        controller.on_iteration = on_iteration
        return controller.run()


def _summary_table(result: SearchResult) -> Table:
    table = Table(title="Search summary", show_header=False)
    table.add_column("Key", style="yellow", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("status", result.status.value)
    table.add_row("iterations", str(result.state.iteration))
    table.add_row("candidates", str(result.state.attempts))
    table.add_row("best score", f"{result.score:.6g}")
    if result.state.best_iteration is not None:
        table.add_row("found at iteration", str(result.state.best_iteration))
    if result.assignment is not None:
        sizes = ", ".join(str(size) for size in group_sizes(result.assignment))
        table.add_row("group sizes", sizes)
    table.add_row("elapsed", f"{result.elapsed:.2f}s")
    return table


@cli.command()
@click.option("--items", "n_items", type=int, required=True, help="Number of items")
@click.option("--sets", "sets_n", type=int, required=True, help="Number of groups")
def count(n_items: int, sets_n: int) -> None:
    r"""Print the number of distinct assignments of ITEMS to SETS groups.

    This is the number of iterations of an exact search.

    \b
    Examples:
        $ mindiff count --items 9 --sets 3
        1680
    """
    try:
        labels = make_labels(n_items, sets_n)
    except ValueError as e:
        print_error(str(e))
        return
    click.echo(count_permutations(group_sizes(labels)))


cli.add_command(config)
