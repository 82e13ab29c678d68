import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from toporder._dataset import DataSet
from toporder._errors import CyclicGraphError, TopologicalSortError
from toporder._graph import build_adjacency, topological_sort
from toporder._io import InputFileError, load_graph, read_toml

from .config import ConfigError, ToporderConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class SortInput:
    """Vertices and edges read from an input file."""

    kind: str
    nodes: tuple[str, ...]
    edges: dict[str, tuple[str, ...]]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Toporder CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_input(path: Path) -> SortInput:
    """Load a dataset file (`[tables]`) or a graph file (`[graph]`).

    Dataset tables become vertices whose edge sets are their `depends_on` lists.
    """
    data = read_toml(path)
    if "tables" in data:
        dataset = DataSet.from_toml(path)
        edges = {table.name: tuple(table.depends_on) for table in dataset}
        return SortInput(kind="dataset", nodes=dataset.table_names, edges=edges)
    if "graph" in data:
        nodes, edges = load_graph(path)
        return SortInput(kind="graph", nodes=nodes, edges=edges)
    msg = f"{path} has neither a [tables] nor a [graph] table"
    raise InputFileError(msg)


def _get_config_or_exit() -> ToporderConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_input_or_exit(path: Path) -> SortInput:
    try:
        return _load_input(path)
    except (InputFileError, OSError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _print_cycle(error: CyclicGraphError) -> None:
    remaining = "\n".join(escape(str(vertex)) for vertex in error.remaining)
    err_console.print(
        Panel(
            remaining,
            title="[bold red]Cycle detected[/bold red]",
            subtitle=f"[dim]{len(error.remaining)} unresolved vertices[/dim]",
            border_style="red",
        ),
    )


@dataclass(frozen=True, slots=True)
class SortOptions:
    """Sort settings after merging command line flags over the config."""

    flip_edges: bool
    excluded: frozenset[str]
    strict: bool


def _resolve_options(
    config: ToporderConfig,
    sort_input: SortInput,
    flip: bool | None,
    exclude: list[str] | None,
    strict: bool | None,
) -> SortOptions:
    """Merge flags over `[tool.toporder]`.

    Datasets are strict unless told otherwise, since a table depending on a
    missing table is a data error.
    """
    flip_edges = config.flip_edges if flip is None else flip
    if sort_input.kind == "dataset" and flip_edges:
        logger.warning("Ignoring --flip: dataset dependencies always name prerequisites")
        flip_edges = False

    if strict is None:
        strict = config.strict
    if strict is None:
        strict = sort_input.kind == "dataset"

    return SortOptions(
        flip_edges=flip_edges,
        excluded=frozenset(config.exclude if exclude is None else exclude),
        strict=strict,
    )


def _sort_or_exit(sort_input: SortInput, options: SortOptions) -> tuple[str, ...]:
    try:
        return topological_sort(
            sort_input.nodes,
            sort_input.edges,
            flip_edges=options.flip_edges,
            exclude=options.excluded.__contains__,
            strict=options.strict,
        )
    except CyclicGraphError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        _print_cycle(e)
        raise typer.Exit(code=1) from e
    except TopologicalSortError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


FlipOption = Annotated[
    bool | None,
    typer.Option("--flip/--no-flip", help="Edge lists name dependents instead of prerequisites (graph files only)"),
]
ExcludeOption = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Vertex to leave out of the order (repeatable)"),
]
StrictOption = Annotated[
    bool | None,
    typer.Option(
        "--strict/--no-strict",
        help="Fail on edges to vertices outside the vertex set (default: on for datasets, off for graphs)",
    ),
]
PathArgument = Annotated[
    Path,
    typer.Argument(help="Path to a TOML dataset ([tables]) or graph ([graph]) file"),
]


@app.command()
def sort(  # noqa: PLR0913
    path: PathArgument,
    *,
    flip: FlipOption = None,
    exclude: ExcludeOption = None,
    strict: StrictOption = None,
    reverse: Annotated[
        bool,
        typer.Option("--reverse", help="Print dependents before their prerequisites"),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format"),
    ] = OutputFormat.TEXT,
) -> None:
    """Print the vertices of a graph in topological order."""
    config = _get_config_or_exit()
    sort_input = _load_input_or_exit(path)
    options = _resolve_options(config, sort_input, flip, exclude, strict)

    order = _sort_or_exit(sort_input, options)
    if reverse:
        order = order[::-1]

    match output_format:
        case OutputFormat.JSON:
            typer.echo(json.dumps(list(order)))
        case OutputFormat.TEXT:
            for vertex in order:
                typer.echo(vertex)


@app.command()
def check(
    path: PathArgument,
    *,
    flip: FlipOption = None,
    exclude: ExcludeOption = None,
    strict: StrictOption = None,
) -> None:
    """Check that a graph can be ordered, and summarize it."""
    config = _get_config_or_exit()
    sort_input = _load_input_or_exit(path)
    options = _resolve_options(config, sort_input, flip, exclude, strict)

    err_console.print()
    err_console.print(f"[cyan]Checking {sort_input.kind}:[/cyan] {escape(str(path))}")
    err_console.print()

    adjacency = build_adjacency(sort_input.nodes, sort_input.edges, exclude=options.excluded.__contains__)
    dangling = adjacency.dangling()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value", justify="right", style="yellow")
    table.add_row("Vertices", str(len(adjacency.vertices)))
    table.add_row("Excluded", str(len(adjacency.excluded)))
    table.add_row("Edges", str(sum(len(edge_set) for edge_set in adjacency.outgoing.values())))
    table.add_row("Dangling references", str(len(dangling)))
    err_console.print(
        Panel(
            table,
            title=f"[bold]{escape(path.name)}[/bold]",
            border_style="cyan",
        ),
    )

    if not options.strict:
        for vertex in dangling:
            logger.warning(f"Vertex '{vertex}' is referenced but not in the vertex set")

    _sort_or_exit(sort_input, options)

    err_console.print()
    err_console.print("[green]✓ Graph can be ordered[/green]")
    err_console.print()


def main() -> None:
    app()
