"""
Source listing command.
"""

from pathlib import Path

import click

from press_import.cli.context import ImportContext
from press_import.cli.decorators import handle_errors, pass_context, requires_config
from press_import.cli.utils import print_table
from press_import.importers import IMPORTERS
from press_import.sources import ADAPTERS


@click.command(name="sources")
@pass_context
@requires_config
@handle_errors
def sources(ctx: ImportContext) -> None:
    """List the import types and source adapters.

    Examples:

        press-import sources
    """
    rows = []
    for name, adapter_class in sorted(ADAPTERS.items()):
        directory = ctx.config.sources.for_source(name) or "N/A"
        status = "found" if directory != "N/A" and Path(directory).is_dir() else "missing"
        rows.append([name, ", ".join(adapter_class.supported_extensions()), directory, status])

    print_table("Sources", ["Source", "Extensions", "Directory", "Status"], rows)

    click.echo(f"\nImport types: {', '.join(sorted(IMPORTERS))}")
