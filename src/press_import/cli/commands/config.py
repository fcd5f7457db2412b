"""
Configuration commands.
"""

import click

from press_import.cli.context import ImportContext
from press_import.cli.decorators import handle_errors, pass_context, requires_config
from press_import.cli.utils import print_table
from press_import.config import ImportConfig


@click.group(name="config")
def config() -> None:
    """Configuration commands."""
    pass


def _display_config_summary(config: ImportConfig) -> None:
    """Display configuration summary."""
    store = config.store
    rows = [
        ["Store Backend", store.backend],
        ["Store URL", store.url or "N/A"],
        ["Store User", store.username or "N/A"],
        ["Application Password", "*" * 24 + " (masked)" if store.application_password else "N/A"],
        ["Rate Limit (req/s)", store.rate_limit],
        ["Retry Attempts", store.retry_attempts],
        ["Excel Directory", config.sources.excel],
        ["Content Directory", config.sources.content],
        ["Default Post Type", config.importers.default_post_type],
        ["Default Taxonomy", config.importers.default_taxonomy or "N/A"],
        ["List Delimiter", repr(config.importers.list_delimiter)],
        ["Metadata Prefix", config.importers.meta_prefix],
        ["SEO Plugin", config.seo.plugin or "N/A"],
        ["Log File", config.logging.file or "N/A"],
    ]

    print_table("Configuration Summary", ["Setting", "Value"], rows)


@config.command(name="show")
@pass_context
@requires_config
@handle_errors
def show(ctx: ImportContext) -> None:
    """Display current configuration.

    Shows the loaded configuration with sensitive values masked.

    Examples:

        press-import --config config.yaml config show
    """
    config = ctx.config

    _display_config_summary(config)

    if config.prefixes.post_types or config.prefixes.taxonomies:
        click.echo("\nRewrite Prefixes:")
        for name, prefix in config.prefixes.post_types.items():
            click.echo(f"  post type {name}: {prefix}")
        for name, prefix in config.prefixes.taxonomies.items():
            click.echo(f"  taxonomy {name}: {prefix}")
