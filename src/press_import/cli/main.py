"""
Main CLI entry point for Press Import.

This module provides the command-line interface for importing posts, terms
and users from spreadsheets and content files into a site.
"""

import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from press_import import __version__
from press_import.cli.commands import config as config_commands
from press_import.cli.commands import import_cmd as import_commands
from press_import.cli.commands import sources as sources_commands
from press_import.cli.context import ImportContext
from press_import.cli.utils import echo_error
from press_import.utils.logging import configure_logging, get_logger, log_error

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

DEFAULT_LOG_FILE = Path("logs/import.log")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="press-import")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
    envvar="PRESS_IMPORT_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Console logging level (default: logging.level of the config, else WARNING)",
    envvar="PRESS_IMPORT_LOG_LEVEL",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Log file path (default: logging.file of the config, else logs/import.log)",
    envvar="PRESS_IMPORT_LOG_FILE",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    log_level: str | None,
    log_file: Path | None,
) -> None:
    """Press Import - import content from spreadsheets and text files.

    Every row is matched against existing content by its path (or login for
    users). Missing entries are created, changed entries updated, and
    unchanged entries left alone.

    Examples:

        # Import posts from the configured spreadsheet directory
        press-import --config config.yaml import post --source excel

        # Show the effective configuration
        press-import --config config.yaml config show
    """
    # Provisional until the configuration file, if any, is loaded
    configure_logging(level=log_level or "WARNING", log_file=log_file or DEFAULT_LOG_FILE)

    ctx.obj = ImportContext(
        config_path=config,
        log_level=log_level,
        log_file=log_file,
    )
    ctx.call_on_close(ctx.obj.cleanup)

    logger.debug(
        "cli_initialized",
        config=str(config) if config else None,
        log_level=log_level,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(config_commands.config)
cli.add_command(import_commands.import_cmd, name="import")
cli.add_command(sources_commands.sources)


def main() -> int:
    """Main entry point for CLI."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.exceptions.Exit as e:
        return e.exit_code
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except Exception as e:
        log_error(logger, e, "cli")
        echo_error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
