"""Rich rendering of build results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from bindgraph._errors import ConverterError
    from bindgraph._graph import ConversionGraph


def render_summary(graph: ConversionGraph, console: Console) -> None:
    """Render node counts of a build as a Rich table.

    Args:
        graph: The built graph.
        console: Rich Console to output to.

    """
    incomplete = graph.incomplete_keys()
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("State", style="bold")
    table.add_column("Converters", justify="right")
    table.add_row("[green]Valid[/green]", str(len(graph.nodes)))
    table.add_row("[yellow]Incomplete[/yellow]", str(len(incomplete) - len(graph.errors)))
    table.add_row("[red]Error origin[/red]", str(len(graph.errors)))
    table.add_row("[dim]Seeds[/dim]", str(len(graph.seeds)))
    console.print(table)


def render_errors(error: ConverterError, console: Console) -> None:
    """Render every failing converter as a Rich table.

    Args:
        error: The aggregate converter error.
        console: Rich Console to output to.

    """
    table = Table(show_header=True, header_style="bold red", title=f"[bold]{escape(error.summary())}[/bold]")
    table.add_column("Type", style="dim")
    table.add_column("Direction")
    table.add_column("Reason")

    for key, conversion_error in error.errors:
        table.add_row(escape(key.description), key.direction.human, escape(conversion_error.reason))

    console.print(table)
