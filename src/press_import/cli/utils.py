"""
Output helpers shared by the CLI commands.
"""

from typing import Any

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from press_import.reporting.colors import ImportColors

console = Console()


def echo_success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green")


def echo_error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)


def echo_warning(message: str) -> None:
    click.secho(f"⚠ {message}", fg="yellow")


def echo_info(message: str) -> None:
    click.secho(f"ℹ {message}", fg="blue")


def format_duration(seconds: float) -> str:
    """
    Format an elapsed time, e.g. ``"4.2s"``, ``"2m 15s"`` or ``"1h 3m 0s"``.
    """
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"

    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {secs}s"


def print_table(title: str, columns: list[str], rows: list[list[Any]]) -> None:
    """Print a two-dimensional listing as a rich table."""
    table = Table(
        title=title,
        border_style=ImportColors.BORDER,
        header_style=ImportColors.HEADER,
    )
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(str(cell) for cell in row))

    console.print(table)


def create_progress_bar() -> Progress:
    """
    Per-file progress: spinner, current file name, bar and files done.

    The bar disappears once the import finishes so only the report remains.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
