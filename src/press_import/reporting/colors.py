"""Color definitions for console output.

Rich color names shared by the report tables and CLI messages.
"""

from press_import.core.status import SaveStatus


class ImportColors:
    """Centralized color palette for Press Import console output.

    Reference: https://rich.readthedocs.io/en/stable/appendix/colors.html
    """

    # Semantic colors for messages
    SUCCESS = "green"
    WARNING = "yellow"
    ERROR = "red"

    # Status colors
    CREATED = "green"
    UPDATED = "cyan"
    SKIPPED = "dark_orange"
    FAILED = "red"
    NOOP = "dim"

    # UI elements
    BORDER = "blue"
    HEADER = "bold bright_white"


STATUS_COLORS = {
    SaveStatus.CREATED: ImportColors.CREATED,
    SaveStatus.UPDATED: ImportColors.UPDATED,
    SaveStatus.SKIPPED: ImportColors.SKIPPED,
    SaveStatus.FAILED: ImportColors.FAILED,
    SaveStatus.NOOP: ImportColors.NOOP,
}
