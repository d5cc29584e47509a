import logging
import re
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from bindgraph._assemble import assemble
from bindgraph._catalog import CatalogError, load_catalog
from bindgraph._converter_set import ConverterSet
from bindgraph._errors import ConverterError
from bindgraph._graph import ConversionGraph, generate_dot
from bindgraph._key import Direction

from .config import BindgraphConfig, ConfigError, get_config
from .render import render_errors, render_summary

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)

SeedOption = Annotated[
    list[str] | None,
    typer.Option(
        "--seed",
        help="Additional converter to generate, as TYPE or TYPE:DIRECTION (direction 'to' or 'from')",
    ),
]
CatalogArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to the TOML type catalog (defaults to the tool.bindgraph catalog setting)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Bindgraph CLI."""
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


def _load_config() -> BindgraphConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def parse_seed(text: str) -> tuple[str, Direction]:
    """Parse a ``--seed`` value.

    A trailing ``:to`` or ``:from`` (or any other direction spelling) selects
    the direction. Anything else is part of the type description.

    Args:
        text: The option value.

    Returns:
        The type description and direction.

    Raises:
        typer.BadParameter: If the type description is empty.

    """
    description, direction = text, Direction.TO_DYNAMIC
    head, sep, tail = text.rpartition(":")
    if sep:
        try:
            direction = Direction.parse(tail)
        except ValueError:
            pass
        else:
            description = head
    if not description:
        msg = f"Empty type in seed '{text}'"
        raise typer.BadParameter(msg)
    return description, direction


def _build(
    catalog_path: Path | None,
    seeds: list[str] | None,
    config: BindgraphConfig,
) -> tuple[ConverterSet, ConversionGraph]:
    catalog_path = catalog_path or config.catalog
    if catalog_path is None:
        err_console.print("[red]✗ No catalog given and no tool.bindgraph catalog configured[/red]")
        raise typer.Exit(code=1)

    err_console.print(f"[cyan]Loading catalog from:[/cyan] {catalog_path}")
    try:
        catalog = load_catalog(catalog_path)
    except CatalogError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    converters = ConverterSet.from_catalog(catalog)
    for seed in seeds or []:
        description, direction = parse_seed(seed)
        converters.add(description, direction, "command line")

    if not converters.seeds():
        err_console.print("[yellow]⚠ No seeds given; nothing to generate[/yellow]")

    err_console.print("[cyan]Building conversion graph...[/cyan]")
    graph = converters.build()
    return converters, graph


def _write_or_echo(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    logger.debug(f"Wrote {len(text)} characters to {output}")


@app.command()
def generate(
    catalog: CatalogArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output file (defaults to the tool.bindgraph output setting, else stdout)"),
    ] = None,
    seed: SeedOption = None,
    allow_partial: Annotated[
        bool | None,
        typer.Option(
            "--allow-partial/--no-allow-partial",
            help="Write the converters that could be generated even if others failed",
        ),
    ] = None,
) -> None:
    """Generate the converter code for every seed."""
    config = _load_config()
    converters, graph = _build(catalog, seed, config)
    output = output or config.output
    if allow_partial is None:
        allow_partial = config.allow_partial

    error = ConverterError.from_graph(graph)
    if error is not None:
        render_errors(error, err_console)
        if not allow_partial:
            err_console.print("[red]✗ Some converters could not be generated (use --allow-partial to write the rest)[/red]")
            raise typer.Exit(code=1)
        logger.warning("Skipping %d failed converters and their dependents", len(graph.incomplete_keys()))

    assembled = assemble(graph, base_package=converters.base_package, prelude=converters.prelude)
    _write_or_echo(assembled.render(), output)
    if output is not None:
        err_console.print(f"[green]✓ Wrote {len(assembled.sections)} converter(s) to {output}[/green]")


@app.command()
def check(
    catalog: CatalogArgument = None,
    *,
    seed: SeedOption = None,
) -> None:
    """Build the conversion graph and report which converters fail."""
    config = _load_config()
    _, graph = _build(catalog, seed, config)

    err_console.print()
    render_summary(graph, err_console)

    error = ConverterError.from_graph(graph)
    if error is not None:
        err_console.print()
        render_errors(error, err_console)
        raise typer.Exit(code=1)

    err_console.print("[green]✓ All converters can be generated[/green]")


@app.command()
def dot(
    catalog: CatalogArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output DOT file (defaults to the tool.bindgraph dot setting, else stdout)"),
    ] = None,
    filter_: Annotated[
        str | None,
        typer.Option(
            "--filter",
            help="Only show converters whose type or debug label matches this regex, and their dependencies",
        ),
    ] = None,
    seed: SeedOption = None,
) -> None:
    """Export the complete conversion graph as Graphviz DOT."""
    config = _load_config()
    pattern_text = filter_ if filter_ is not None else config.dot_filter
    try:
        pattern = re.compile(pattern_text) if pattern_text is not None else None
    except re.error as e:
        err_console.print(f"[red]✗ Invalid filter regex: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    _, graph = _build(catalog, seed, config)
    output = output or config.dot
    text = generate_dot(graph, pattern)

    _write_or_echo(text, output)
    if output is not None:
        err_console.print(f"[green]✓ Wrote graph to {output}[/green]")


def main() -> None:
    app()
