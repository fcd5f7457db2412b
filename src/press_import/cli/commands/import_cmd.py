"""
Import command.

Runs one import of an entity type from a source and prints the resulting
log.
"""

import time
from functools import partial
from pathlib import Path

import click

from press_import.cli.context import ImportContext
from press_import.cli.decorators import handle_errors, pass_context, requires_config
from press_import.cli.menu import select_files
from press_import.cli.utils import (
    console,
    create_progress_bar,
    echo_info,
    echo_success,
    echo_warning,
    format_duration,
)
from press_import.pipeline import ImportPipeline
from press_import.reporting.render import render_import_log
from press_import.utils.logging import get_logger

logger = get_logger(__name__)


@click.command(name="import")
@click.argument("type_name", metavar="TYPE")
@click.option(
    "--source",
    "-s",
    required=True,
    help="Source adapter to use (excel, content)",
)
@click.option(
    "--path",
    "-p",
    type=click.Path(path_type=Path),
    help="Override the configured input directory of the source",
)
@click.option(
    "--file",
    "-f",
    "pattern",
    help="File name or pattern to match (e.g. 'pages-*.xlsx')",
)
@click.option(
    "--interactive",
    "-i",
    is_flag=True,
    help="Select files interactively",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Reconcile against an empty in-memory store; nothing is written",
)
@click.option(
    "--details/--no-details",
    default=True,
    help="Show one line per imported row",
)
@pass_context
@requires_config
@handle_errors
def import_cmd(
    ctx: ImportContext,
    type_name: str,
    source: str,
    path: Path | None,
    pattern: str | None,
    interactive: bool,
    dry_run: bool,
    details: bool,
) -> None:
    """Import TYPE (post, term, user) from a source.

    Rows are matched against existing content by path (login for users);
    existing entries are only written when something changed.

    Examples:

        # Import pages from every spreadsheet of the configured directory
        press-import import post --source excel

        # Import terms from one file of another directory
        press-import import term -s excel -p ./exports -f 'genres*.csv'

        # Pick the markdown files to import
        press-import import post --source content --interactive
    """
    if dry_run:
        ctx.dry_run = True
        echo_warning("Dry run: rows are reconciled against an empty in-memory store")

    pipeline = ImportPipeline(
        repository=ctx.repository,
        config=ctx.config,
        selector=partial(select_files, console=console) if interactive else None,
    )

    echo_info(f"Starting import of type '{type_name}' from '{source}' source")
    start = time.time()

    # Files are selected before the progress display takes over the console
    plan = pipeline.plan(type_name, source, path=path, pattern=pattern, interactive=interactive)

    with create_progress_bar() as progress:
        task = progress.add_task("Importing files", total=len(plan.files))

        def on_file_done(file: Path, completed: int, total: int) -> None:
            progress.update(task, completed=completed, total=total, description=file.name)

        log = pipeline.execute(plan, progress=on_file_done)

    click.echo()
    render_import_log(log, console=console, details=details)
    click.echo()

    elapsed = format_duration(time.time() - start)
    if log.has_failures:
        echo_warning(f"Import completed with failures in {elapsed}")
    else:
        echo_success(f"Import completed successfully in {elapsed}")
