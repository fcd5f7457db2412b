"""
Decorators for CLI commands.

Commands receive the ``ImportContext`` as first argument and share one error
policy: failed rows are part of the report, not an error, while anything
that stops a run maps to a distinct exit code.
"""

import functools
from collections.abc import Callable

import click

from press_import.cli.context import ImportContext
from press_import.client.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    InvalidPathError,
    NetworkError,
    NoFilesFoundError,
    UnsupportedSourceError,
    UnsupportedTypeError,
)
from press_import.utils.logging import get_logger

logger = get_logger(__name__)

EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4

_CONFIGURATION_HINTS = {
    UnsupportedTypeError: "Run 'press-import sources' to list the import types.",
    UnsupportedSourceError: "Run 'press-import sources' to list the source adapters.",
    InvalidPathError: "Pass --path or set the source directory under 'sources:'.",
    NoFilesFoundError: "Check --file and the extensions the source supports.",
}


def pass_context(f: Callable) -> Callable:
    """
    Decorator to pass ImportContext to command function.

    Usage:
        @click.command()
        @pass_context
        def show(ctx: ImportContext):
            print(ctx.config)
    """

    @click.pass_context
    @functools.wraps(f)
    def wrapper(click_ctx: click.Context, *args, **kwargs):
        import_ctx: ImportContext = click_ctx.obj
        return f(import_ctx, *args, **kwargs)

    return wrapper


def _configuration_hint(error: ConfigurationError) -> str:
    for error_type, hint in _CONFIGURATION_HINTS.items():
        if isinstance(error, error_type):
            return hint
    return "Please check the command options and your configuration file."


def handle_errors(f: Callable) -> Callable:
    """
    Decorator mapping run-stopping errors to exit codes.

    Exit codes:
        0: Import finished (FAILED rows are reported, not fatal)
        1: Unexpected error
        2: Configuration error (nothing was imported)
        3: The store rejected the credentials
        4: Store API or network error
    """

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)

        except click.exceptions.Exit:
            raise

        except ConfigurationError as e:
            logger.error("configuration_error", error_type=type(e).__name__, error=str(e))
            click.echo(f"Configuration Error: {e}", err=True)
            click.echo(f"\n{_configuration_hint(e)}", err=True)
            raise click.exceptions.Exit(EXIT_CONFIGURATION) from e

        except AuthenticationError as e:
            logger.error("authentication_error", error=str(e))
            click.echo(f"Authentication Error: {e}", err=True)
            click.echo(
                "\nThe import stopped; rows already written are kept. Verify the store "
                "user name and application password.",
                err=True,
            )
            raise click.exceptions.Exit(EXIT_AUTHENTICATION) from e

        except (APIError, NetworkError) as e:
            logger.error("api_error", error_type=type(e).__name__, error=str(e))
            click.echo(f"API Error: {e}", err=True)
            if getattr(e, "status_code", None):
                click.echo(f"\nResponse status: {e.status_code}", err=True)
            raise click.exceptions.Exit(EXIT_API) from e

        except Exception as e:
            logger.error("unexpected_error", error=str(e), exc_info=True)
            click.echo(f"Unexpected Error: {e}", err=True)
            click.echo("\nPlease check the log file for details.", err=True)
            raise click.exceptions.Exit(EXIT_UNEXPECTED) from e

    return wrapper


def requires_config(f: Callable) -> Callable:
    """
    Decorator loading the configuration before the command runs.

    An unreadable or invalid configuration exits with code 2 before any file
    is touched.
    """

    @functools.wraps(f)
    def wrapper(ctx: ImportContext, *args, **kwargs):
        try:
            _ = ctx.config
        except ConfigurationError as e:
            click.echo(f"Error loading configuration: {e}", err=True)
            raise click.exceptions.Exit(EXIT_CONFIGURATION) from e

        return f(ctx, *args, **kwargs)

    return wrapper
